"""
Audit orchestration - research passes, synthesis, split.

The run, in order:
1. RESEARCH: one research-model call per group, fixed order. A failing
   group is recorded and skipped; it never stops the next one.
2. DECIDE: any research text -> normal path; none -> fallback path where
   the synthesis model does the whole audit alone.
3. SYNTHESIZE: one synthesis-model call. Nothing back is fatal.
4. SPLIT: cut the response into the visitor and owner documents.
5. ALLOCATE: next AR-NNNN audit id.
6. CAPTURE: best-effort screenshot dispatch for the collected plan.
"""

import logging
import re
from typing import Optional, Sequence

from config import Settings, get_settings
from models import (
    AuditRequest,
    AuditDocumentPair,
    AuditResult,
    CapturePlan,
    ResearchGroup,
    ResearchSummary,
    RESEARCH_GROUPS,
    AUDIT_ID_FLOOR,
    format_audit_id,
)
from repositories import Repository, RepositoryError, get_repository
from . import prompts
from .capture import CaptureDispatcher
from .clients import ModelClient, clients_from_settings
from .errors import AuditError, SynthesisError
from .plan import extract_capture_plan

logger = logging.getLogger(__name__)

AUDIT_COUNTER = "report_counter"

NO_RESEARCH_KEY_REASON = "No research model API key was configured."

OWNER_SPLIT_RE = re.compile(re.escape(prompts.OWNER_REPORT_MARKER), re.IGNORECASE)
USER_SPLIT_RE = re.compile(re.escape(prompts.USER_REPORT_MARKER), re.IGNORECASE)

VISITOR_PARSE_NOTICE = "This visitor report failed to parse cleanly from the AI response."
OWNER_PARSE_NOTICE = "This owner report failed to parse cleanly from the AI response."
OWNER_SPLIT_NOTICE = "Owner report could not be clearly separated from the AI response."


def group_start_marker(group_id: str) -> str:
    return f"<!-- RESEARCH_GROUP_{group_id}_START -->"


def group_end_marker(group_id: str) -> str:
    return f"<!-- RESEARCH_GROUP_{group_id}_END -->"


def wrap_group_text(group_id: str, text: str) -> str:
    """Annotate one pass so the synthesis model can tell which group wrote what."""
    return f"\n\n{group_start_marker(group_id)}\n\n{text}\n\n{group_end_marker(group_id)}\n\n"


def split_reports(combined: str) -> AuditDocumentPair:
    """
    Split one synthesis response into the two documents.

    Text before the owner marker is the visitor candidate (minus anything up
    to the first user marker); text after it is the owner document. Without
    an owner marker both documents fall back to the whole response so
    neither is ever empty.
    """
    combined = combined or ""
    parts = OWNER_SPLIT_RE.split(combined, maxsplit=1)

    if len(parts) < 2:
        return AuditDocumentPair(
            visitor_document=combined.strip() or VISITOR_PARSE_NOTICE,
            owner_document=f"{OWNER_SPLIT_NOTICE}\n\n{combined}".strip(),
        )

    visitor_raw, owner_raw = parts
    visitor_parts = USER_SPLIT_RE.split(visitor_raw, maxsplit=1)
    visitor = (visitor_parts[1] if len(visitor_parts) > 1 else visitor_raw).strip()
    owner = owner_raw.strip()

    if not visitor:
        visitor = VISITOR_PARSE_NOTICE
    if not owner:
        owner = f"{OWNER_PARSE_NOTICE}\n\n{combined}".strip()

    return AuditDocumentPair(visitor_document=visitor, owner_document=owner)


def allocate_audit_id(repository: Repository) -> str:
    """
    Next audit id from the persisted counter. Never below AR-0120.

    An unreadable counter is fatal: guessing could reissue an old id.
    """
    try:
        number = repository.counters.next_value(AUDIT_COUNTER, floor=AUDIT_ID_FLOOR)
    except RepositoryError as e:
        raise AuditError(f"Audit id allocation failed: {e}") from e
    return format_audit_id(number)


class AuditOrchestrator:
    """
    Runs one audit end to end.

    The capture dispatcher is optional; without one, capture plans are
    still collected and returned but nothing is captured.
    """

    def __init__(
        self,
        research_client: ModelClient,
        synthesis_client: ModelClient,
        repository: Repository,
        capture_dispatcher: Optional[CaptureDispatcher] = None,
        groups: Sequence[ResearchGroup] = RESEARCH_GROUPS,
    ):
        self.research_client = research_client
        self.synthesis_client = synthesis_client
        self.repository = repository
        self.capture_dispatcher = capture_dispatcher
        self.groups = tuple(groups)

    def run_audit(self, request: AuditRequest, primary_key: str, synthesis_key: str) -> AuditResult:
        """
        Run research, synthesis and split for one request.

        Raises SynthesisError when the synthesis model returns nothing and
        AuditError when no audit id can be allocated.
        Research and capture failures never raise.
        """
        primary_key = (primary_key or "").strip()
        synthesis_key = (synthesis_key or "").strip()

        summary = ResearchSummary()
        plan = CapturePlan()

        # ==================== RESEARCH ====================
        if primary_key:
            research_text = self._run_research(request, primary_key, summary, plan)
        else:
            summary.skipped_reason = NO_RESEARCH_KEY_REASON
            research_text = ""
            logger.info("Research phase skipped for %s: %s", request.website_url, NO_RESEARCH_KEY_REASON)

        # ==================== DECIDE ====================
        if research_text.strip():
            user_prompt = prompts.synthesis_user_prompt(
                request, research_text, summary.successful_groups, summary.failed_groups
            )
        else:
            summary.used_fallback = True
            summary.fallback_reason = summary.failure_reason()
            logger.warning("Falling back to synthesis-only audit for %s: %s", request.website_url, summary.fallback_reason)
            user_prompt = prompts.fallback_user_prompt(request, summary.fallback_reason)

        # ==================== SYNTHESIZE ====================
        combined = self.synthesis_client.call(synthesis_key, prompts.synthesis_system_prompt(), user_prompt)
        if not (combined or "").strip():
            raise SynthesisError("No response returned from the synthesis model.")

        # ==================== SPLIT ====================
        documents = split_reports(combined)

        # ==================== ALLOCATE ====================
        audit_id = allocate_audit_id(self.repository)
        logger.info(
            "Audit %s generated for %s (passes ok=%s failed=%s fallback=%s captures=%d)",
            audit_id, request.website_url, summary.successful_groups,
            list(summary.failed_groups), summary.used_fallback, len(plan),
        )

        # ==================== CAPTURE ====================
        self._dispatch_captures(audit_id, plan)

        return AuditResult(documents=documents, audit_id=audit_id, capture_plan=plan, research=summary)

    def _run_research(self, request: AuditRequest, api_key: str,
                      summary: ResearchSummary, plan: CapturePlan) -> str:
        """All research passes in group order. Returns the combined, annotated text."""
        system_prompt = prompts.research_system_prompt(request.website_url, request.socials)
        combined = []

        for group in self.groups:
            try:
                user_prompt = prompts.research_group_prompt(
                    request.website_url, request.socials, group.id, group.categories
                )
                chunk = self.research_client.call(api_key, system_prompt, user_prompt)
            except Exception as e:
                summary.record_failure(group.id, str(e) or type(e).__name__)
                logger.error("Research group %s failed: %s", group.id, e)
                continue

            summary.record_success(group.id, chunk)
            clean_text, records = extract_capture_plan(chunk, group.id)
            if records:
                plan.merge(records)
            if clean_text:
                combined.append(wrap_group_text(group.id, clean_text))
            else:
                logger.warning("Research group %s returned no analysis text", group.id)

        return "".join(combined)

    def _dispatch_captures(self, audit_id: str, plan: CapturePlan) -> None:
        """Best effort - a failure here never touches the finished documents."""
        if plan.is_empty():
            return
        if self.capture_dispatcher is None:
            logger.info("No capture dispatcher configured; skipping %d screenshot(s) for audit %s", len(plan), audit_id)
            return
        try:
            self.capture_dispatcher.dispatch(audit_id, plan)
        except Exception as e:
            logger.error("Screenshot generation failed for audit %s: %s", audit_id, e)


def build_orchestrator(settings: Optional[Settings] = None, repository: Optional[Repository] = None) -> AuditOrchestrator:
    """Wire an orchestrator from settings."""
    settings = settings or get_settings()
    repository = repository or get_repository()
    research, synthesis = clients_from_settings(settings)

    dispatcher = None
    if settings.capture_endpoint:
        dispatcher = CaptureDispatcher(settings.capture_endpoint, repository.captures, timeout=settings.capture_timeout)

    return AuditOrchestrator(research, synthesis, repository, capture_dispatcher=dispatcher)


def run_audit(request: AuditRequest, primary_key: str, synthesis_key: str,
              settings: Optional[Settings] = None) -> AuditResult:
    """Convenience wrapper: build from settings and run once."""
    return build_orchestrator(settings).run_audit(request, primary_key, synthesis_key)
