"""Tests for moodrelay CLI commands."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
from aioresponses import aioresponses
from click.testing import CliRunner

from moodrelay.cli.commands import analyze, check, cli, stats, trends

BASE_URL = "http://backend.test"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def backend_env(monkeypatch):
    """No retries so failing commands never back off."""
    monkeypatch.setenv("BACKEND_API_URL", BASE_URL)
    monkeypatch.setenv("API_MAX_RETRIES", "0")


@pytest.fixture(autouse=True)
def configure_logging(monkeypatch):
    """Keep the CLI from reconfiguring the test process root logger."""
    mock = MagicMock()
    monkeypatch.setattr("moodrelay.cli.commands.configure_logging", mock)
    return mock


@pytest.fixture
def backend():
    with aioresponses() as m:
        yield m


class TestCommandDefinitions:
    def test_commands_registered(self):
        assert set(cli.commands) == {"check", "analyze", "stats", "trends"}

    def test_json_flags(self):
        for command in (analyze, stats, trends):
            assert "json_output" in [p.name for p in command.params]

    def test_check_has_no_options(self):
        assert check.params == []

    def test_log_level_passed_to_logging(self, runner, backend, configure_logging):
        backend.get(f"{BASE_URL}/health", payload={"status": "healthy"})

        runner.invoke(cli, ["--log-level", "DEBUG", "check"])

        configure_logging.assert_called_once_with(level="DEBUG")


class TestCheck:
    def test_healthy(self, runner, backend):
        backend.get(f"{BASE_URL}/health", payload={"status": "healthy"})

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0
        assert f"Backend is healthy at {BASE_URL}" in result.output

    def test_unhealthy(self, runner, backend):
        backend.get(f"{BASE_URL}/health", payload={"status": "down"})

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "Error: Backend at http://backend.test is not responding" in result.output

    def test_missing_base_url(self, runner, backend, monkeypatch):
        monkeypatch.delenv("BACKEND_API_URL")

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "BACKEND_API_URL is not configured" in result.output

    def test_base_url_option(self, runner, backend):
        backend.get("http://other.test/health", payload={"status": "healthy"})

        result = runner.invoke(cli, ["--base-url", "http://other.test/", "check"])

        assert result.exit_code == 0
        assert "http://other.test" in result.output

    def test_bad_timeout_option(self, runner, backend):
        result = runner.invoke(cli, ["--timeout", "0", "check"])

        assert result.exit_code == 1
        assert "timeout must be positive" in result.output


class TestAnalyze:
    def test_table_output(self, runner, backend):
        backend.post(
            f"{BASE_URL}/analyze",
            payload={"sentiment": "negative", "emotion": "stressed", "stress_score": 8},
        )

        result = runner.invoke(cli, ["analyze", "I am stressed"])

        assert result.exit_code == 0
        assert "sentiment" in result.output
        assert "negative" in result.output
        assert "stress_score" in result.output

    def test_json_output(self, runner, backend):
        payload = {"sentiment": "positive", "confidence": 0.75}
        backend.post(f"{BASE_URL}/analyze", payload=payload)

        result = runner.invoke(cli, ["analyze", "Great sprint!", "--channel-id", "c1", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == payload
        sent = [c.kwargs["json"] for calls in backend.requests.values() for c in calls]
        assert sent == [{"message": "Great sprint!", "channel_id": "c1"}]

    def test_non_object_response(self, runner, backend):
        backend.post(f"{BASE_URL}/analyze", payload="positive")

        result = runner.invoke(cli, ["analyze", "hello"])

        assert result.exit_code == 1
        assert "expected a JSON object, got str" in result.output

    def test_empty_message(self, runner, backend):
        result = runner.invoke(cli, ["analyze", "  "])

        assert result.exit_code == 1
        assert "message must be a non-empty string" in result.output

    def test_backend_error(self, runner, backend):
        backend.post(f"{BASE_URL}/analyze", status=500)

        result = runner.invoke(cli, ["analyze", "hello"])

        assert result.exit_code == 1
        assert "Error: Backend analysis failed: HTTP 500" in result.output


class TestStats:
    def test_table_with_issues(self, runner, backend):
        backend.get(
            f"{BASE_URL}/stats/today?channel_id=eng",
            payload={
                "positive_pct": 50.0,
                "avg_stress": 3.5,
                "trend": "stable",
                "top_issues": [{"category": "deadlines", "count": 4}],
            },
        )

        result = runner.invoke(cli, ["stats", "--channel-id", "eng"])

        assert result.exit_code == 0
        assert "positive_pct" in result.output
        assert "deadlines" in result.output

    def test_non_object_response(self, runner, backend):
        backend.get(f"{BASE_URL}/stats/today", payload=[1, 2])

        result = runner.invoke(cli, ["stats"])

        assert result.exit_code == 1
        assert "Error: Unexpected response from backend: expected a JSON object, got list" in (
            result.output
        )
        assert not isinstance(result.exception, AttributeError)

    def test_malformed_issues_skipped(self, runner, backend):
        backend.get(
            f"{BASE_URL}/stats/today",
            payload={
                "trend": "up",
                "top_issues": ["workload", {"category": "meetings", "count": 2}],
            },
        )

        result = runner.invoke(cli, ["stats"])

        assert result.exit_code == 0
        assert "meetings" in result.output
        assert "workload" not in result.output

    def test_issues_not_a_list(self, runner, backend):
        backend.get(f"{BASE_URL}/stats/today", payload={"trend": "up", "top_issues": "none"})

        result = runner.invoke(cli, ["stats"])

        assert result.exit_code == 0
        assert "Issue" not in result.output

    def test_unreachable(self, runner, backend):
        # No mocked route: the request fails as a refused connection
        result = runner.invoke(cli, ["stats"])

        assert result.exit_code == 1
        assert "Failed to fetch stats" in result.output


class TestTrends:
    def test_json_output(self, runner, backend):
        backend.get(f"{BASE_URL}/stats/trends?days=30", payload={"points": [1, 2]})

        result = runner.invoke(cli, ["trends", "--days", "30", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"points": [1, 2]}

    def test_days_must_be_positive(self, runner, backend):
        result = runner.invoke(cli, ["trends", "--days", "0"])

        assert result.exit_code == 2
