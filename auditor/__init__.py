"""
Audit pipeline - research, synthesis, capture, render.

Usage:
    from auditor import build_orchestrator

    result = build_orchestrator().run_audit(request, research_key, synthesis_key)
    result.visitor_document, result.owner_document, result.audit_id
"""

from .errors import AuditError, SynthesisError
from .plan import extract_capture_plan, PLAN_START, PLAN_END
from .clients import ModelClient, ResearchClient, SynthesisClient, clients_from_settings
from .capture import CaptureDispatcher
from .orchestrator import (
    AuditOrchestrator,
    build_orchestrator,
    run_audit,
    split_reports,
    allocate_audit_id,
)
from .render import resolve_capture_placeholders, render_report, render_documents, stored_image_urls
from .delivery import ReportDelivery, FileDelivery

__all__ = [
    "AuditError",
    "SynthesisError",
    "extract_capture_plan",
    "PLAN_START",
    "PLAN_END",
    "ModelClient",
    "ResearchClient",
    "SynthesisClient",
    "clients_from_settings",
    "CaptureDispatcher",
    "AuditOrchestrator",
    "build_orchestrator",
    "run_audit",
    "split_reports",
    "allocate_audit_id",
    "resolve_capture_placeholders",
    "render_report",
    "render_documents",
    "stored_image_urls",
    "ReportDelivery",
    "FileDelivery",
]
