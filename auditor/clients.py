"""
Low-level HTTP clients for the AI worker.

The worker exposes one chat route per provider. A client only:
- builds the JSON payload the worker expects
- handles timeouts, HTTP status and body checks
- returns the assistant content string, or "" on any failure

Clients never raise for network or protocol problems. The orchestrator
treats an empty string as a failed call.
"""

import logging
from typing import Optional

import requests

from config import Settings, DEFAULT_RESEARCH_ENDPOINT, DEFAULT_SYNTHESIS_ENDPOINT

logger = logging.getLogger(__name__)

SNIPPET_CHARS = 400


class ModelClient:
    """
    Stateless chat client for one worker route.

    Subclasses set the worker's expected key field, default model and timeout.
    """
    name: str = "model"
    key_field: str = "api_key"
    default_endpoint: str = ""
    default_model: str = ""
    default_timeout: int = 60

    def __init__(self, endpoint: Optional[str] = None, model: Optional[str] = None,
                 timeout: Optional[int] = None, session: Optional[requests.Session] = None):
        self.endpoint = endpoint or self.default_endpoint
        self.model = model or self.default_model
        self.timeout = timeout or self.default_timeout
        self._http = session or requests

    def build_payload(self, api_key: str, system_prompt: str, user_content: str) -> dict:
        return {
            self.key_field: str(api_key or ""),
            "system_prompt": str(system_prompt or ""),
            "user_content": str(user_content or ""),
            "model": self.model,
        }

    def call(self, api_key: str, system_prompt: str, user_content: str) -> str:
        """Send one (system, user) pair. Returns content or "" on failure."""
        payload = self.build_payload(api_key, system_prompt, user_content)

        try:
            resp = self._http.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("[%s] worker request error: %s", self.name, e)
            return ""

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.error("[%s] worker HTTP %d: %s", self.name, resp.status_code, (resp.text or "")[:SNIPPET_CHARS])
            return ""

        try:
            data = resp.json()
        except ValueError:
            logger.error("[%s] worker invalid JSON: %s", self.name, (resp.text or "")[:SNIPPET_CHARS])
            return ""

        if not isinstance(data, dict):
            logger.error("[%s] worker invalid JSON: %s", self.name, (resp.text or "")[:SNIPPET_CHARS])
            return ""

        if not data.get("success"):
            logger.error("[%s] worker returned failure: %s", self.name, data.get("error") or f"Unknown {self.name} worker error")
            return ""

        content = data.get("content")
        content = "" if content is None else str(content)
        if not content:
            logger.warning("[%s] worker returned empty content", self.name)
        return content


class ResearchClient(ModelClient):
    """Grok/xAI - the primary analyst. Live crawling needs a long timeout."""
    name = "research"
    key_field = "grok_key"  # Must match the worker's /grok-chat route
    default_endpoint = DEFAULT_RESEARCH_ENDPOINT
    default_model = "grok-3-mini-latest"
    default_timeout = 120


class SynthesisClient(ModelClient):
    """OpenAI - writes both reports. Longer still: two full documents per call."""
    name = "synthesis"
    key_field = "openai_key"  # Must match the worker's /openai-chat route
    default_endpoint = DEFAULT_SYNTHESIS_ENDPOINT
    default_model = "gpt-4.1-mini"
    default_timeout = 210


def clients_from_settings(settings: Settings) -> tuple[ResearchClient, SynthesisClient]:
    """Build both clients from settings."""
    research = ResearchClient(
        endpoint=settings.research_endpoint,
        model=settings.research_model,
        timeout=settings.research_timeout,
    )
    synthesis = SynthesisClient(
        endpoint=settings.synthesis_endpoint,
        model=settings.synthesis_model,
        timeout=settings.synthesis_timeout,
    )
    return research, synthesis
