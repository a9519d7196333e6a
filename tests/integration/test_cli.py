"""Integration test: one audit through the CLI entry point."""

from unittest.mock import patch, MagicMock

import pytest

import cli
from config import Settings
from repositories import configure_backend


def worker_reply(content):
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = {"success": True, "content": content}
    return resp


@pytest.fixture(autouse=True)
def reset_backend():
    yield
    configure_backend("json")


@pytest.fixture
def settings(temp_dir):
    return Settings(synthesis_api_key="openai-key", data_dir=temp_dir / "data", reports_dir=temp_dir / "reports")


class TestCli:

    @patch("auditor.clients.requests.post")
    def test_writes_reports(self, mock_post, settings, temp_dir):
        mock_post.return_value = worker_reply("---USER_REPORT---\nV\n---OWNER_REPORT---\nO")
        out_dir = temp_dir / "out"

        with patch("cli.get_settings", return_value=settings):
            code = cli.cli(["example.com", "--email", "a@b.co", "--out", str(out_dir)])

        assert code == 0
        # No research key: one synthesis call only
        assert mock_post.call_count == 1
        assert len(list(out_dir.iterdir())) == 2

    def test_no_keys(self, temp_dir):
        empty = Settings(data_dir=temp_dir / "data")
        with patch("cli.get_settings", return_value=empty):
            assert cli.cli(["example.com", "--email", "a@b.co"]) == 1

    def test_invalid_input(self, settings):
        with patch("cli.get_settings", return_value=settings):
            assert cli.cli(["example.com", "--email", "not-an-email"]) == 1

    @patch("auditor.clients.requests.post")
    def test_synthesis_failure(self, mock_post, settings):
        mock_post.return_value = worker_reply("")
        with patch("cli.get_settings", return_value=settings):
            assert cli.cli(["example.com", "--email", "a@b.co"]) == 1
