"""Tests for the client error taxonomy."""

import pytest

from moodrelay.client.errors import (
    BackendError,
    BackendUnavailableError,
    CircuitOpenError,
    ConfigurationError,
    HTTPStatusError,
    MoodRelayError,
    ParseError,
    TransportError,
)


class TestBackendError:
    def test_message_without_operation(self):
        assert str(BackendError("boom")) == "boom"

    def test_operation_prefixes_message(self):
        error = ParseError("Invalid JSON in response")
        error.operation = "Failed to fetch stats"

        assert str(error) == "Failed to fetch stats: Invalid JSON in response"
        assert error.message == "Invalid JSON in response"

    @pytest.mark.parametrize(
        "error",
        [
            CircuitOpenError(),
            TransportError("timed out", timed_out=True),
            HTTPStatusError("HTTP 500", 500),
            ParseError("bad json"),
            BackendUnavailableError("down"),
        ],
    )
    def test_categories_share_base(self, error):
        assert isinstance(error, BackendError)
        assert isinstance(error, MoodRelayError)

    def test_configuration_error_is_not_backend_error(self):
        assert not isinstance(ConfigurationError("missing"), BackendError)


class TestRetryable:
    @pytest.mark.parametrize(
        "status,expected", [(500, True), (503, True), (400, False), (404, False)]
    )
    def test_http_status(self, status, expected):
        assert HTTPStatusError(f"HTTP {status}", status).retryable is expected

    def test_transport_defaults_to_retryable(self):
        assert TransportError("Connection failed").retryable is True
        assert TransportError("Request failed", retryable=False).retryable is False

    def test_non_transient_categories(self):
        assert CircuitOpenError().retryable is False
        assert ParseError("bad json").retryable is False
