"""
Report rendering - Markdown documents to standalone HTML.

Screenshot placeholders of the form ![caption](screenshot:ID) are swapped
for stored image URLs before conversion. Ids with no stored capture fall
back to the caption in italics so the document still reads cleanly.
"""

import logging
import re
from datetime import date as date_cls
from typing import Mapping, Optional, Union

import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import TEMPLATES_DIR
from models import AuditRequest, StoredCapture
from repositories import CaptureRepository, RepositoryError

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"!\[([^\]]*)\]\(screenshot:([A-Za-z0-9_\-]+)\)")
MARKDOWN_EXTENSIONS = ["tables", "fenced_code"]

REPORT_TYPES = {
    "visitor": "Visitor Report",
    "owner": "Owner Report",
}

_env: Optional[Environment] = None


def _environment() -> Environment:
    global _env
    if _env is None:
        _env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
    return _env


def _image_url(capture: Union[StoredCapture, str, None]) -> str:
    if isinstance(capture, StoredCapture):
        return capture.image_url
    return capture or ""


def resolve_capture_placeholders(markdown_text: str,
                                 captures: Mapping[str, Union[StoredCapture, str]]) -> str:
    """Replace screenshot placeholders with image links; unknown ids become italic captions."""
    captures = captures or {}
    missing = []

    def _replace(match: re.Match) -> str:
        caption, shot_id = match.group(1).strip(), match.group(2)
        url = _image_url(captures.get(shot_id))
        if url:
            return f"![{caption}]({url})"
        missing.append(shot_id)
        return f"*{caption}*" if caption else ""

    resolved = PLACEHOLDER_RE.sub(_replace, markdown_text or "")
    if missing:
        logger.info("Unresolved screenshot placeholders: %s", ", ".join(missing))
    return resolved


def markdown_to_html(markdown_text: str) -> str:
    return markdown.markdown(markdown_text or "", extensions=MARKDOWN_EXTENSIONS)


def render_report(markdown_text: str, request: AuditRequest, audit_id: str, report_type: str,
                  captures: Optional[Mapping[str, Union[StoredCapture, str]]] = None,
                  date: Optional[date_cls] = None) -> str:
    """
    Render one document as a complete HTML page.

    report_type is 'visitor' or 'owner'. The summary table at the top
    carries the website, audit id, recipient name and date.
    """
    if report_type not in REPORT_TYPES:
        raise ValueError(f"Unknown report type: {report_type!r}")

    date = date or date_cls.today()
    body = markdown_to_html(resolve_capture_placeholders(markdown_text, captures or {}))

    template = _environment().get_template("report.html")
    return template.render(
        title=f"{REPORT_TYPES[report_type]} - {request.host}",
        report_label=REPORT_TYPES[report_type],
        website_url=request.website_url,
        audit_id=audit_id,
        name=request.name or "-",
        report_date=date.strftime("%d %B %Y"),
        contact_url=request.contact_url,
        body=body,
    )


def render_documents(request: AuditRequest, result, captures=None, date: Optional[date_cls] = None) -> dict[str, str]:
    """Render both documents of an AuditResult. Returns {'visitor': html, 'owner': html}."""
    return {
        "visitor": render_report(result.visitor_document, request, result.audit_id, "visitor", captures, date),
        "owner": render_report(result.owner_document, request, result.audit_id, "owner", captures, date),
    }


def stored_image_urls(captures: CaptureRepository, audit_id: str) -> dict[str, str]:
    """Capture id -> image URL for rendering. Unreadable storage renders without images."""
    try:
        return captures.image_urls(audit_id)
    except RepositoryError as e:
        logger.error("Stored captures for audit %s are unreadable; rendering without screenshots: %s", audit_id, e)
        return {}
