"""Unit tests for prompt building."""

from auditor import prompts
from auditor.plan import PLAN_START, PLAN_END
from models import MASTER_CATEGORIES, RESEARCH_GROUPS, AuditRequest


class TestSocialSummary:

    def test_joins_non_empty(self):
        summary = prompts.social_summary({"facebook": "https://fb.com/x", "instagram": "  ", "x": "https://x.com/x"})
        assert summary == "Facebook: https://fb.com/x | X: https://x.com/x"

    def test_empty_uses_fallback_text(self):
        assert prompts.social_summary({}, "nothing here") == "nothing here"
        assert prompts.social_summary(None) == prompts.NO_SOCIALS_SYSTEM


class TestResearchPrompts:

    def test_system_prompt_embeds_site_and_markers(self, sample_socials):
        text = prompts.research_system_prompt("https://example.com", sample_socials)
        assert "https://example.com" in text
        assert PLAN_START in text and PLAN_END in text
        assert "Instagram: https://instagram.com/example" in text

    def test_group_prompt_lists_only_its_categories(self):
        group = RESEARCH_GROUPS[1]
        text = prompts.research_group_prompt("https://example.com", {}, group.id, group.categories)

        assert f"GROUPED PASS: {group.id}" in text
        for category in group.categories:
            assert f"- {category}" in text
        for other in RESEARCH_GROUPS[0].categories:
            assert f"- {other}" not in text

    def test_group_prompt_uppercases_id(self):
        text = prompts.research_group_prompt("https://example.com", {}, "visibility", ["SEO"])
        assert '"group_id": "VISIBILITY"' in text

    def test_group_prompt_forbids_legacy_fields(self):
        text = prompts.research_group_prompt("https://example.com", {}, "X", ["SEO"])
        assert '"crop_mode", "selector", "text_pattern"' in text


class TestSynthesisPrompts:

    def test_system_prompt_lists_all_categories_in_order(self):
        text = prompts.synthesis_system_prompt()
        positions = [text.index(f"{i}. {c}") for i, c in enumerate(MASTER_CATEGORIES, 1)]
        assert positions == sorted(positions)
        assert prompts.USER_REPORT_MARKER in text
        assert prompts.OWNER_REPORT_MARKER in text

    def test_user_prompt_carries_research_and_status(self, audit_request):
        text = prompts.synthesis_user_prompt(
            audit_request, "RESEARCH BODY {with braces}", ["UX_MESSAGING"], {"AUTHORITY": "timeout"}
        )
        assert text.endswith("RESEARCH BODY {with braces}")
        assert "Jane Doe" in text
        assert "https://example.com/contact" in text
        assert "UX_MESSAGING" in text
        assert "AUTHORITY => timeout" in text

    def test_user_prompt_without_name_greets_generically(self, sample_website):
        request = AuditRequest(website_url=sample_website, email="a@b.co")
        text = prompts.synthesis_user_prompt(request, "x", [], {})
        assert "Hi there" in text

    def test_fallback_prompt_carries_reason(self, audit_request):
        text = prompts.fallback_user_prompt(audit_request, "No research model API key was configured.")
        assert '"No research model API key was configured."' in text
        assert audit_request.website_url in text
        assert str(len(MASTER_CATEGORIES)) in text


class TestResearchStatusSummary:

    def test_empty(self):
        assert prompts.research_status_summary([], {}) == ""

    def test_both_lines(self):
        text = prompts.research_status_summary(["A", "B"], {"C": "boom"})
        assert text.splitlines() == [
            "The analyst successfully completed these grouped passes: A, B.",
            "These grouped passes hit errors (you may still infer or fill gaps where safe): C => boom",
        ]
