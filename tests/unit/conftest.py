"""
Unit test fixtures.

All unit tests should be:
- Fast (< 100ms)
- Isolated (no network, no disk)
- Deterministic (same result every time)
"""

from unittest.mock import MagicMock

import pytest

from models import AuditRequest
from repositories import MemoryRepository


class ScriptedClient:
    """
    Stand-in model client.

    replies: list of strings or exceptions, consumed one per call.
    Every call is recorded as (api_key, system_prompt, user_content).
    """

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    def call(self, api_key, system_prompt, user_content):
        self.calls.append((api_key, system_prompt, user_content))
        if not self.replies:
            return ""
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def audit_request(sample_website, sample_socials):
    return AuditRequest(
        website_url=sample_website,
        email="owner@example.com",
        name="Jane Doe",
        socials=sample_socials,
    )


@pytest.fixture
def memory_repo():
    return MemoryRepository()


@pytest.fixture
def scripted_client():
    """Factory: scripted_client(["reply", RuntimeError("boom"), ...])."""
    return ScriptedClient


def make_response(status_code=200, json_data=None, text="", json_error=False):
    """Fake requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if json_error:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = json_data
    return resp


@pytest.fixture
def fake_response():
    return make_response


@pytest.fixture
def combined_report():
    """Synthesis output with both markers."""
    return (
        "---USER_REPORT---\n"
        "# Visitor view\n\nScore: 6/10\n\n"
        "---OWNER_REPORT---\n"
        "# Owner view\n\nFix the hero section.\n"
    )
