"""
Audit API routes - form submission, health, stored captures.

Form payloads arrive either flat or wrapped in `form_fields` (a JSON
string, a query string or a mapping, depending on the form builder).
"""

import json
import logging
from urllib.parse import parse_qs

from flask import current_app, jsonify, request
from pydantic import ValidationError

from auditor import build_orchestrator, render_documents, stored_image_urls, FileDelivery
from config import get_settings
from models import AuditRequest, SOCIAL_PLATFORMS
from repositories import RepositoryError, get_repository

from . import audit_bp

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Please ensure both Website URL and Email are provided before requesting an audit."
NO_KEYS_MESSAGE = "AI API keys are not configured. Please contact the site owner."
INVALID_REQUEST_MESSAGE = "The submitted website or email address is not valid. Please check and try again."
FAILURE_MESSAGE = "Sorry, something went wrong while generating your audit. Please try again in a few minutes."
CAPTURES_UNAVAILABLE_MESSAGE = "Screenshots for this audit are unavailable right now."
SUCCESS_MESSAGE = (
    "Congratulations, your audit for {website} has been generated and sent to {email}. "
    "Check your inbox for both the Visitor and Owner reports."
)


def _flatten(value) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return "" if value is None else str(value)


def normalize_form_fields(raw) -> dict:
    """form_fields in any of its shapes -> flat {key: str}."""
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except ValueError:
            decoded = None
        if isinstance(decoded, dict):
            raw = decoded
        else:
            raw = {k: v if len(v) > 1 else v[0] for k, v in parse_qs(raw).items()}
    if not isinstance(raw, dict):
        return {}
    return {str(k): _flatten(v).strip() for k, v in raw.items()}


def get_field(fields: dict, keys, fallback_contains: str = None) -> str:
    """First non-empty exact key, then first key containing fallback_contains."""
    for key in keys:
        value = (fields.get(key) or "").strip()
        if value:
            return value
    if fallback_contains:
        needle = fallback_contains.lower()
        for key, value in fields.items():
            if needle in key.lower() and (value or "").strip():
                return value.strip()
    return ""


def submission_from_payload(payload: dict) -> dict:
    """
    Pull the audit fields out of a raw submission.

    Returns {name, email, website_url, socials}; values may be empty.
    """
    fields = normalize_form_fields(payload.get("form_fields"))
    flat = {str(k): _flatten(v).strip() for k, v in payload.items() if k != "form_fields"}

    name = get_field(fields, ["name"], "name") or flat.get("name", "")
    email = get_field(fields, ["email"], "mail") or flat.get("email", "")
    website_url = (
        get_field(fields, ["website_url", "website"], "website")
        or flat.get("website_url", "")
        or flat.get("website", "")
    )

    socials = {}
    for platform in SOCIAL_PLATFORMS:
        socials[platform] = get_field(fields, [f"{platform}_url"]) or flat.get(f"{platform}_url", "")
    if not socials["x"]:
        socials["x"] = get_field(fields, ["twitter_url"]) or flat.get("twitter_url", "")

    return {"name": name, "email": email, "website_url": website_url, "socials": socials}


@audit_bp.route("/api/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"})


@audit_bp.route("/api/audit", methods=["POST"])
def create_audit():
    """Run a full audit for one form submission and deliver both reports."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = request.form.to_dict(flat=True)

    submission = submission_from_payload(payload)
    if not submission["website_url"] or not submission["email"]:
        return jsonify({"error": MISSING_FIELDS_MESSAGE}), 400

    settings = current_app.config.get("AUDIT_SETTINGS") or get_settings()
    if not settings.has_any_key:
        return jsonify({"error": NO_KEYS_MESSAGE}), 503

    try:
        audit_request = AuditRequest(**submission)
    except ValidationError as e:
        logger.info("Rejected audit submission: %s", e)
        return jsonify({"error": INVALID_REQUEST_MESSAGE}), 400

    try:
        repository = get_repository()
        orchestrator = build_orchestrator(settings, repository)
        result = orchestrator.run_audit(audit_request, settings.research_api_key, settings.synthesis_api_key)

        captures = stored_image_urls(repository.captures, result.audit_id)
        rendered = render_documents(audit_request, result, captures)
        FileDelivery(settings.reports_dir).deliver(audit_request, result, rendered)
    except Exception:
        logger.exception("Audit failed for %s", audit_request.website_url)
        return jsonify({"error": FAILURE_MESSAGE}), 500

    return jsonify({
        "message": SUCCESS_MESSAGE.format(website=audit_request.website_url, email=audit_request.email),
        "audit_id": result.audit_id,
    })


@audit_bp.route("/api/audits/<audit_id>/captures", methods=["GET"])
def get_audit_captures(audit_id):
    """Stored screenshots for an audit, keyed by capture id."""
    try:
        captures = get_repository().captures.get_for_audit(audit_id)
    except RepositoryError:
        logger.exception("Unreadable captures for audit %s", audit_id)
        return jsonify({"error": CAPTURES_UNAVAILABLE_MESSAGE}), 500
    return jsonify({shot_id: c.to_record() for shot_id, c in captures.items()})
