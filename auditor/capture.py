"""
Capture dispatcher - turns a capture plan into stored screenshots.

Calls an external Playwright-style screenshot worker once per request and
stores the returned image URL under the request id. Decoupled from the AI
logic: the orchestrator only hands over the audit id and the plan.
"""

import logging
from typing import Optional

import requests

from models import CapturePlan, CaptureRequest, StoredCapture
from repositories import CaptureRepository

logger = logging.getLogger(__name__)

WORKER_CROP_MODES = ("full_page", "viewport")
SNIPPET_CHARS = 400


def worker_crop_mode(request: CaptureRequest) -> str:
    """Map plan crop modes to what the worker accepts. Unknown -> full_page."""
    mode = (request.crop_mode or "full_page").strip().lower()
    return mode if mode in WORKER_CROP_MODES else "full_page"


def image_url_from_response(data: dict) -> str:
    """New workers answer {"file": url}; older ones {"image_url": url}."""
    for key in ("file", "image_url"):
        value = data.get(key)
        if value:
            return str(value)
    return ""


class CaptureDispatcher:
    """
    Resolve capture requests into image URLs.

    Idempotent per (audit_id, request id): ids that already have an image
    URL are never sent to the worker again.
    """

    def __init__(self, endpoint: Optional[str], repository: CaptureRepository,
                 timeout: int = 120, session: Optional[requests.Session] = None):
        self.endpoint = (endpoint or "").strip()
        self.repository = repository
        self.timeout = timeout
        self._http = session or requests

    def build_payload(self, audit_id: str, request: CaptureRequest) -> dict:
        return {
            "url": request.url,
            "crop_mode": worker_crop_mode(request),
            "width": request.viewport.width,
            "height": request.viewport.height,
            # Extra meta; the worker only logs these
            "audit_id": audit_id,
            "shot_id": request.id,
        }

    def dispatch(self, audit_id: str, plan: CapturePlan) -> int:
        """
        Capture everything in the plan not yet stored for this audit.

        Returns the number of newly stored captures. Per-request failures
        are logged and skipped; results are saved after every success so a
        crash mid-plan keeps what was already captured.
        """
        audit_id = (audit_id or "").strip()
        if not audit_id:
            logger.error("Capture dispatch: missing audit_id; aborting screenshot generation")
            return 0

        if plan is None or plan.is_empty():
            return 0

        if not self.endpoint:
            logger.warning(
                "Capture dispatch: no screenshot endpoint configured (audit %s). "
                "Set AUDIT_CAPTURE_ENDPOINT to point at the screenshot worker.",
                audit_id,
            )
            return 0

        stored = self.repository.get_for_audit(audit_id)
        created = 0

        for record in plan.records:
            request = CaptureRequest.from_record(record)
            if request is None:
                continue

            existing = stored.get(request.id)
            if existing is not None and existing.image_url:
                continue

            image_url = self._capture(audit_id, request)
            if not image_url:
                continue

            stored[request.id] = StoredCapture(image_url=image_url, shot=dict(record))
            self.repository.save_for_audit(audit_id, stored)
            created += 1

        logger.info("Capture dispatch: %d new screenshot(s) stored for audit %s", created, audit_id)
        return created

    def _capture(self, audit_id: str, request: CaptureRequest) -> str:
        """One worker call. Returns the image URL or "" on any failure."""
        try:
            resp = self._http.post(
                self.endpoint,
                json=self.build_payload(audit_id, request),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Capture dispatch: HTTP error for shot %s (audit %s): %s", request.id, audit_id, e)
            return ""

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.error(
                "Capture dispatch: non-2xx HTTP %d for shot %s (audit %s): %s",
                resp.status_code, request.id, audit_id, (resp.text or "")[:SNIPPET_CHARS],
            )
            return ""

        try:
            data = resp.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.error(
                "Capture dispatch: invalid JSON response for shot %s (audit %s): %s",
                request.id, audit_id, (resp.text or "")[:SNIPPET_CHARS],
            )
            return ""

        image_url = image_url_from_response(data)
        if not image_url:
            logger.error("Capture dispatch: missing file/image_url for shot %s (audit %s)", request.id, audit_id)
        return image_url
