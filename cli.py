#!/usr/bin/env python3
"""
Website Audit - CLI Entry Point

Runs one audit from the terminal and writes both HTML reports to disk.
"""

import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich import box

from auditor import AuditError, build_orchestrator, render_documents, stored_image_urls, FileDelivery
from config import configure_logging, get_settings
from models import AuditRequest
from repositories import get_repository, configure_backend

console = Console()


def print_summary(request, result, paths):
    """Summary table for a finished audit."""
    table = Table(title=f"Audit {result.audit_id}", box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    research = result.research
    table.add_row("Website", request.website_url)
    table.add_row("Email", request.email)
    table.add_row("Research groups ok", ", ".join(research.successful_groups) or "-")
    table.add_row("Research groups failed", ", ".join(research.failed_groups) or "-")
    table.add_row("Fallback", research.fallback_reason if research.used_fallback else "no")
    table.add_row("Screenshots planned", str(len(result.capture_plan)))
    for path in paths:
        table.add_row("Report", str(path))

    console.print(table)


def cli(argv=None):
    """Main CLI entry point"""
    import argparse

    parser = argparse.ArgumentParser(
        description="AI website audit - visitor and owner reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py example.com --email owner@example.com
  python cli.py https://example.com --email a@b.co --name "Jane Doe" --instagram https://instagram.com/example
        """
    )
    parser.add_argument("url", help="Website to audit")
    parser.add_argument("--email", required=True, help="Recipient email")
    parser.add_argument("--name", default="", help="Recipient name")
    parser.add_argument("--facebook", default="", help="Facebook page URL")
    parser.add_argument("--instagram", default="", help="Instagram profile URL")
    parser.add_argument("--x", dest="x", default="", help="X/Twitter profile URL")
    parser.add_argument("--linkedin", default="", help="LinkedIn page URL")
    parser.add_argument("--out", metavar="DIR", help="Report output directory (default: settings reports_dir)")

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    configure_backend("json", settings.data_dir)

    if not settings.has_any_key:
        console.print("[red]No API keys configured.[/red]")
        console.print("[dim]Set AUDIT_RESEARCH_API_KEY and/or AUDIT_SYNTHESIS_API_KEY in .env[/dim]")
        return 1

    try:
        request = AuditRequest(
            website_url=args.url,
            email=args.email,
            name=args.name,
            socials={
                "facebook": args.facebook,
                "instagram": args.instagram,
                "x": args.x,
                "linkedin": args.linkedin,
            },
        )
    except ValidationError as e:
        console.print(f"[red]Invalid input:[/red] {e}")
        return 1

    console.print(f"[dim]Auditing {request.website_url} (this can take several minutes)...[/dim]")

    repository = get_repository()
    try:
        result = build_orchestrator(settings, repository).run_audit(
            request, settings.research_api_key, settings.synthesis_api_key
        )
    except AuditError as e:
        console.print(f"[red]Audit failed:[/red] {e}")
        return 1

    captures = stored_image_urls(repository.captures, result.audit_id)
    rendered = render_documents(request, result, captures)
    out_dir = Path(args.out) if args.out else settings.reports_dir
    paths = FileDelivery(out_dir).deliver(request, result, rendered)

    print_summary(request, result, paths)
    return 0


if __name__ == "__main__":
    sys.exit(cli())
