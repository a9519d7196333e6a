"""
Domain models - single source of truth for all entities.

Design principles:
- Every entity defined once
- Validation at the boundary
- Backend-agnostic (repository handles persistence)
"""

from .base import DomainModel, FrozenModel, TimestampMixin
from .research import (
    ResearchGroup,
    ResearchPassResult,
    ResearchSummary,
    RESEARCH_GROUPS,
    MASTER_CATEGORIES,
)
from .capture import Viewport, CaptureRequest, CapturePlan, StoredCapture, LEGACY_FIELDS
from .audit import (
    AuditRequest,
    AuditDocumentPair,
    AuditResult,
    SOCIAL_PLATFORMS,
    AUDIT_ID_FLOOR,
    format_audit_id,
    normalize_website_url,
)

__all__ = [
    # Base
    "DomainModel",
    "FrozenModel",
    "TimestampMixin",
    # Research
    "ResearchGroup",
    "ResearchPassResult",
    "ResearchSummary",
    "RESEARCH_GROUPS",
    "MASTER_CATEGORIES",
    # Capture
    "Viewport",
    "CaptureRequest",
    "CapturePlan",
    "StoredCapture",
    "LEGACY_FIELDS",
    # Audit
    "AuditRequest",
    "AuditDocumentPair",
    "AuditResult",
    "SOCIAL_PLATFORMS",
    "AUDIT_ID_FLOOR",
    "format_audit_id",
    "normalize_website_url",
]
