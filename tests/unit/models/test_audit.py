"""Unit tests for audit request and research models."""

import pytest
from pydantic import ValidationError

from models import (
    AuditRequest,
    AuditDocumentPair,
    ResearchSummary,
    RESEARCH_GROUPS,
    MASTER_CATEGORIES,
    format_audit_id,
    normalize_website_url,
)


class TestAuditRequest:
    """Validation at the boundary."""

    def test_minimal(self):
        request = AuditRequest(website_url="https://example.com", email="a@b.co")
        assert request.name == ""
        assert request.socials == {}

    def test_url_normalized(self):
        request = AuditRequest(website_url="  example.com/// ", email="a@b.co")
        assert request.website_url == "https://example.com"
        assert request.contact_url == "https://example.com/contact"
        assert request.host == "example.com"

    @pytest.mark.parametrize("url", ["", "   ", "ftp://example.com", "https://", "http://exa mple.com"])
    def test_bad_url_rejected(self, url):
        with pytest.raises(ValidationError):
            AuditRequest(website_url=url, email="a@b.co")

    @pytest.mark.parametrize("email", ["", "   ", "not-an-email", "a@b"])
    def test_bad_email_rejected(self, email):
        with pytest.raises(ValidationError):
            AuditRequest(website_url="https://example.com", email=email)

    def test_socials_cleaned(self):
        request = AuditRequest(
            website_url="https://example.com",
            email="a@b.co",
            socials={
                "linkedin_url": "https://linkedin.com/company/x",
                "twitter": "https://x.com/x",
                "facebook": "",
                "myspace": "https://myspace.com/x",
            },
        )
        assert request.socials == {"x": "https://x.com/x", "linkedin": "https://linkedin.com/company/x"}

    def test_frozen(self):
        request = AuditRequest(website_url="https://example.com", email="a@b.co")
        with pytest.raises(ValidationError):
            request.email = "other@b.co"


class TestAuditIds:

    def test_format(self):
        assert format_audit_id(120) == "AR-0120"
        assert format_audit_id(7) == "AR-0007"
        assert format_audit_id(12345) == "AR-12345"

    def test_normalize_keeps_path(self):
        assert normalize_website_url("http://example.com/shop/") == "http://example.com/shop"


class TestDocumentPair:

    def test_empty_document_rejected(self):
        with pytest.raises(ValidationError):
            AuditDocumentPair(visitor_document="", owner_document="x")


class TestResearchGroups:

    def test_groups_partition_categories(self):
        flattened = [c for g in RESEARCH_GROUPS for c in g.categories]
        assert len(flattened) == 13
        assert len(set(flattened)) == 13
        assert tuple(flattened) == MASTER_CATEGORIES

    def test_group_order(self):
        assert [g.id for g in RESEARCH_GROUPS] == ["UX_MESSAGING", "VISIBILITY", "AUTHORITY"]


class TestResearchSummary:

    def test_skipped_reason_wins(self):
        summary = ResearchSummary(skipped_reason="No key")
        assert summary.failure_reason() == "No key"

    def test_all_failed_lists_errors(self):
        summary = ResearchSummary()
        summary.record_failure("A", "timeout")
        summary.record_failure("B", "bad gateway")
        assert summary.failure_reason() == "All research passes failed. Group errors: A: timeout | B: bad gateway"

    def test_success_with_no_text(self):
        summary = ResearchSummary()
        summary.record_success("A", "")
        assert summary.successful_groups == ["A"]
        assert summary.failure_reason() == "The research model returned no usable output."

    def test_partial_failure_keeps_errors(self):
        summary = ResearchSummary()
        summary.record_success("A", "")
        summary.record_failure("B", "timeout")
        assert summary.failure_reason() == "The research model returned no usable output. Group errors: B: timeout"

    def test_unknown(self):
        assert ResearchSummary().failure_reason() == "Research passes failed for unknown reasons."
