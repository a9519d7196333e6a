"""
Report delivery - where finished documents go.

Only the file backend lives here. PDF conversion and mail are separate
ReportDelivery implementations.
"""

import logging
import re
from abc import ABC, abstractmethod
from datetime import date as date_cls
from pathlib import Path
from typing import Optional

from models import AuditRequest, AuditResult

logger = logging.getLogger(__name__)

UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")


def slugify(value: str) -> str:
    """'Jane Doe' -> 'jane-doe'."""
    return UNSAFE_CHARS_RE.sub("-", (value or "").strip().lower()).strip("-.")


def safe_host(request: AuditRequest) -> str:
    return UNSAFE_CHARS_RE.sub("_", request.host) or "site"


def visitor_filename(request: AuditRequest, audit_id: str, day: date_cls) -> str:
    return f"{safe_host(request)}_{day.strftime('%d%m%Y')}_{audit_id}"


def owner_filename(request: AuditRequest, audit_id: str) -> str:
    return f"{slugify(request.name) or 'owner'}_{safe_host(request)}_{audit_id}"


class ReportDelivery(ABC):
    """Takes rendered documents somewhere (disk, PDF, mail...)."""

    @abstractmethod
    def deliver(self, request: AuditRequest, result: AuditResult, rendered: dict[str, str]) -> list[Path]:
        """
        rendered maps report type ('visitor' / 'owner') to HTML.
        Returns the paths written, if any.
        """
        pass


class FileDelivery(ReportDelivery):
    """Write both reports as .html files under one directory."""

    def __init__(self, reports_dir: Path, today: Optional[date_cls] = None):
        self.reports_dir = Path(reports_dir)
        self.today = today

    def deliver(self, request: AuditRequest, result: AuditResult, rendered: dict[str, str]) -> list[Path]:
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        day = self.today or date_cls.today()

        names = {
            "visitor": visitor_filename(request, result.audit_id, day),
            "owner": owner_filename(request, result.audit_id),
        }

        written = []
        for report_type, stem in names.items():
            html = rendered.get(report_type)
            if not html:
                continue
            path = self.reports_dir / f"{stem}.html"
            path.write_text(html, encoding="utf-8")
            written.append(path)

        logger.info("Audit %s: wrote %d report file(s) to %s", result.audit_id, len(written), self.reports_dir)
        return written
