"""Backend client error types.

Every failure raised by the client belongs to one category below, so route
handlers can map errors to user-facing responses by type alone:

    MoodRelayError
    ├── ConfigurationError
    ├── RequestValidationError
    └── BackendError
        ├── CircuitOpenError
        ├── TransportError
        ├── HTTPStatusError
        ├── ParseError
        └── BackendUnavailableError
"""

from __future__ import annotations


class MoodRelayError(Exception):
    """Base error for moodrelay."""


class ConfigurationError(MoodRelayError):
    """Required configuration is missing or malformed.

    Fatal: usually stops service startup.
    """


class RequestValidationError(MoodRelayError, ValueError):
    """Operation input failed validation before any request was made."""


class BackendError(MoodRelayError):
    """A call to the analysis backend failed.

    Attributes:
        message: Description of the underlying failure.
        operation: Failed operation, prefixed to the message when set.
        retryable: Whether a read-only request may be resent.
    """

    retryable = False

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class CircuitOpenError(BackendError):
    """Circuit breaker is open; the request was rejected without a network call."""

    def __init__(
        self,
        message: str = "Circuit breaker is OPEN - backend unavailable",
        operation: str | None = None,
    ):
        super().__init__(message, operation)


class TransportError(BackendError):
    """Request timed out or the connection failed (refused, reset).

    Other client-side transport faults use ``retryable=False``.
    """

    def __init__(
        self,
        message: str,
        timed_out: bool = False,
        retryable: bool = True,
        operation: str | None = None,
    ):
        super().__init__(message, operation)
        self.timed_out = timed_out
        self.retryable = retryable


class HTTPStatusError(BackendError):
    """Backend answered with a non-2xx status.

    5xx responses are transient backend faults and may be retried;
    4xx responses are request problems and are surfaced immediately.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        response_body: str | None = None,
        operation: str | None = None,
    ):
        super().__init__(message, operation)
        self.status_code = status_code
        self.response_body = response_body

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status_code >= 500


class ParseError(BackendError):
    """Response body was not valid JSON."""


class BackendUnavailableError(BackendError):
    """Backend is unreachable or reports itself unhealthy."""
