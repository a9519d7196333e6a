"""
Research - thematic passes and their outcomes.
"""

from typing import Optional
from pydantic import Field

from .base import DomainModel, FrozenModel


class ResearchGroup(FrozenModel):
    """A named thematic pass over a fixed slice of the report categories."""
    id: str
    label: str
    categories: tuple[str, ...]


# Fixed pass order. The three groups partition MASTER_CATEGORIES.
RESEARCH_GROUPS: tuple[ResearchGroup, ...] = (
    ResearchGroup(
        id="UX_MESSAGING",
        label="UX, navigation, messaging, brand & trust",
        categories=(
            "UI/UX & Navigation",
            "Copywriting & Messaging",
            "Brand Messaging & Value Proposition",
            "Trust & Credibility",
        ),
    ),
    ResearchGroup(
        id="VISIBILITY",
        label="SEO, content & performance",
        categories=(
            "SEO",
            "Blog & Content Strategy",
            "Performance & Mobile Experience",
        ),
    ),
    ResearchGroup(
        id="AUTHORITY",
        label="Social proof, GBP, reviews, competitors & opportunities",
        categories=(
            "Social Media Presence",
            "Google Business Profile",
            "Advertising Readiness / Landing Pages",
            "Missing Opportunities",
            "Legal / Compliance / Footer",
            "Overall Competitor Comparison",
        ),
    ),
)

# The canonical report order, shared by both documents.
MASTER_CATEGORIES: tuple[str, ...] = tuple(
    category for group in RESEARCH_GROUPS for category in group.categories
)


class ResearchPassResult(DomainModel):
    """Outcome of one research pass."""
    group_id: str
    success: bool
    text: str = ""
    error: Optional[str] = None


class ResearchSummary(DomainModel):
    """
    What happened during the research phase of one run.

    successful_groups / failed_groups keep pass order, which is what
    the synthesis prompt reports back to the second model.
    """
    passes: list[ResearchPassResult] = Field(default_factory=list)
    failed_groups: dict[str, str] = Field(default_factory=dict)
    skipped_reason: Optional[str] = None
    used_fallback: bool = False
    fallback_reason: Optional[str] = None

    @property
    def successful_groups(self) -> list[str]:
        return [p.group_id for p in self.passes if p.success]

    def record_success(self, group_id: str, text: str) -> None:
        """Record a completed pass. Empty text still counts as success."""
        self.passes.append(ResearchPassResult(group_id=group_id, success=True, text=text or ""))

    def record_failure(self, group_id: str, message: str) -> None:
        """Record a pass that raised."""
        self.passes.append(ResearchPassResult(group_id=group_id, success=False, error=message))
        self.failed_groups[group_id] = message

    def failure_reason(self) -> str:
        """
        Explain why research produced nothing usable.

        Used as the fallback reason handed to the synthesis model. Recorded
        group errors are always included.
        """
        if self.skipped_reason:
            return self.skipped_reason

        errors = " | ".join(f"{gid}: {message}" for gid, message in self.failed_groups.items())
        if self.failed_groups and not self.successful_groups:
            return "All research passes failed. Group errors: " + errors
        if self.successful_groups:
            reason = "The research model returned no usable output."
            if errors:
                reason += " Group errors: " + errors
            return reason
        return "Research passes failed for unknown reasons."
