"""
Audit - the submitted request and the generated document pair.
"""

import re
from typing import Any
from urllib.parse import urlparse
from pydantic import Field, field_validator

from .base import DomainModel, FrozenModel
from .capture import CapturePlan
from .research import ResearchSummary

# Platforms the form collects, in prompt order
SOCIAL_PLATFORMS = ("facebook", "instagram", "x", "linkedin")
SOCIAL_ALIASES = {"twitter": "x"}

AUDIT_ID_PREFIX = "AR-"
AUDIT_ID_FLOOR = 120

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def format_audit_id(number: int) -> str:
    """120 -> 'AR-0120'."""
    return f"{AUDIT_ID_PREFIX}{number:04d}"


def normalize_website_url(url: str) -> str:
    """Trim, default to https, strip trailing slashes. Raises ValueError if unusable."""
    url = (url or "").strip()
    if not url:
        raise ValueError("website_url is required")
    if not SCHEME_RE.match(url):
        url = f"https://{url}"
    url = url.rstrip("/ \t\r\n")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc or any(c.isspace() for c in url):
        raise ValueError(f"website_url is not a valid http(s) URL: {url!r}")
    return url


class AuditRequest(FrozenModel):
    """
    One submission from the audit form.

    Immutable once built; validation happens here so the orchestrator
    never sees a blank URL or email.
    """
    website_url: str
    email: str
    name: str = ""
    socials: dict[str, str] = Field(default_factory=dict)

    @field_validator("website_url")
    @classmethod
    def _check_website(cls, value: str) -> str:
        return normalize_website_url(value)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("email is required")
        if not EMAIL_RE.match(value):
            raise ValueError(f"email is not well-formed: {value!r}")
        return value

    @field_validator("socials", mode="before")
    @classmethod
    def _clean_socials(cls, value: Any) -> dict:
        if not value:
            return {}
        if not isinstance(value, dict):
            raise ValueError("socials must be a mapping of platform -> URL")

        cleaned = {}
        for platform, url in value.items():
            key = SOCIAL_ALIASES.get(str(platform).lower(), str(platform).lower())
            key = key.removesuffix("_url")
            key = SOCIAL_ALIASES.get(key, key)
            url = str(url or "").strip()
            if key in SOCIAL_PLATFORMS and url and key not in cleaned:
                cleaned[key] = url
        return {p: cleaned[p] for p in SOCIAL_PLATFORMS if p in cleaned}

    @property
    def contact_url(self) -> str:
        """Primary CTA destination in both reports."""
        return f"{self.website_url}/contact"

    @property
    def host(self) -> str:
        return urlparse(self.website_url).netloc


class AuditDocumentPair(DomainModel):
    """Visitor + owner documents. Both always non-empty."""
    visitor_document: str = Field(min_length=1)
    owner_document: str = Field(min_length=1)


class AuditResult(DomainModel):
    """Everything run_audit hands back to the caller."""
    documents: AuditDocumentPair
    audit_id: str
    capture_plan: CapturePlan = Field(default_factory=CapturePlan)
    research: ResearchSummary = Field(default_factory=ResearchSummary)

    @property
    def visitor_document(self) -> str:
        return self.documents.visitor_document

    @property
    def owner_document(self) -> str:
        return self.documents.owner_document
