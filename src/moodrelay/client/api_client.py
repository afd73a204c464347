"""Client for the sentiment-analysis backend.

Uses aiohttp.ClientSession for all HTTP traffic.

Features:
- Circuit breaker that stops calling a failing backend
- Linear-backoff retry for read-only (GET/HEAD) requests
- Per-request timeout
- Typed operations: analyze, stats, trends, health check, config validation
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from http import HTTPStatus
from typing import Any

import aiohttp

from moodrelay.client.errors import (
    BackendError,
    BackendUnavailableError,
    CircuitOpenError,
    HTTPStatusError,
    ParseError,
    RequestValidationError,
    TransportError,
)
from moodrelay.client.models import (
    AnalysisRequest,
    AnalysisResult,
    StatsResult,
    TrendsResult,
)
from moodrelay.config import BackendClientConfig

logger = logging.getLogger(__name__)

# Requests without side effects on the backend; only these are retried.
READ_ONLY_METHODS = frozenset({"GET", "HEAD"})

LOG_PREVIEW_LENGTH = 50


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = auto()  # Calls permitted
    OPEN = auto()  # Calls rejected without a network attempt


@dataclass
class CircuitBreaker:
    """Consecutive-failure circuit breaker.

    States:
    - CLOSED: requests pass through
    - OPEN: too many consecutive failures, requests are rejected until
      ``open_until``

    There is no separate half-open state. The first check after
    ``open_until`` closes the breaker and lets the request through as a
    trial request; if the trial fails the breaker opens again for a full
    ``reset_timeout``.
    """

    failure_threshold: int
    reset_timeout: float
    clock: Callable[[], float] = time.monotonic
    state: CircuitState = CircuitState.CLOSED
    failure_count: int = 0
    open_until: float | None = None
    trial_pending: bool = False

    def record_success(self) -> None:
        """Record a successful request."""
        if self.failure_count > 0:
            logger.info("Circuit breaker failures reset")
        self.failure_count = 0
        self.state = CircuitState.CLOSED
        self.open_until = None
        self.trial_pending = False

    def record_failure(self) -> None:
        """Record a failed request attempt."""
        self.failure_count += 1
        if self.trial_pending or self.failure_count >= self.failure_threshold:
            self.state = CircuitState.OPEN
            self.open_until = self.clock() + self.reset_timeout
            self.trial_pending = False
            logger.error("Circuit breaker OPEN after %d failures", self.failure_count)

    def can_execute(self) -> bool:
        """Check if a request can be executed, closing an expired open state."""
        if self.state == CircuitState.CLOSED:
            return True

        if self.open_until is not None and self.clock() >= self.open_until:
            logger.info("Circuit breaker reset - attempting request")
            self.state = CircuitState.CLOSED
            self.failure_count = 0
            self.open_until = None
            self.trial_pending = True
            return True

        return False


@dataclass
class BackendClient:
    """HTTP client for the sentiment-analysis backend.

    Create one instance per process and share it between handlers; the
    circuit breaker state lives on the instance.

    Example:
        >>> config = BackendClientConfig.from_env()
        >>> async with BackendClient(config) as client:
        ...     result = await client.analyze(AnalysisRequest(message="I am stressed"))
    """

    config: BackendClientConfig
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    clock: Callable[[], float] = time.monotonic
    _session: aiohttp.ClientSession | None = field(default=None, init=False, repr=False)
    _circuit: CircuitBreaker = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._circuit = CircuitBreaker(
            failure_threshold=self.config.circuit_failure_threshold,
            reset_timeout=self.config.circuit_reset_timeout,
            clock=self.clock,
        )

    @property
    def circuit(self) -> CircuitBreaker:
        return self._circuit

    async def connect(self) -> None:
        """Open the HTTP session."""
        if self._session is not None:
            return
        self._session = aiohttp.ClientSession(
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=aiohttp.ClientTimeout(total=self.config.timeout),
        )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "BackendClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # =========================================================================
    # Typed operations
    # =========================================================================

    async def analyze(self, request: AnalysisRequest | Mapping[str, Any]) -> AnalysisResult:
        """Analyze message sentiment and emotion.

        Sent exactly once: analysis is a mutating call and is never retried.

        Args:
            request: AnalysisRequest, or a mapping with ``message`` and
                optional ``user_id`` / ``channel_id``.

        Returns:
            The backend's result unchanged (sentiment, emotion, stress_score,
            category, suggested_reply, confidence, ...).

        Raises:
            RequestValidationError: If the message is empty or too long.
            ConfigurationError: If no base URL is configured.
            BackendError: Categorized backend failure.
        """
        if not isinstance(request, AnalysisRequest):
            request = AnalysisRequest.from_mapping(request)

        logger.info('Analyzing message: "%s"', _preview(request.message))
        try:
            result = await self._request("POST", "/analyze", payload=request.to_payload())
        except BackendError as e:
            _annotate(e, "Backend analysis failed")
            raise

        summary = {key: _field(result, key) for key in ("sentiment", "emotion", "stress_score")}
        logger.info(
            "Analysis complete - sentiment=%s emotion=%s stress=%s",
            summary["sentiment"],
            summary["emotion"],
            summary["stress_score"],
            extra=summary,
        )
        return result

    async def get_today_stats(self, channel_id: str | None = None) -> StatsResult:
        """Get today's team mood statistics.

        Args:
            channel_id: Optional channel to filter by.

        Returns:
            positive_pct, neutral_pct, negative_pct, avg_stress, top_issues,
            trend, total_messages.
        """
        logger.info("Fetching today's stats%s", _channel_suffix(channel_id))
        try:
            result = await self._request(
                "GET", "/stats/today", params=_params(channel_id=channel_id)
            )
        except BackendError as e:
            _annotate(e, "Failed to fetch stats")
            raise

        logger.info("Stats retrieved - total_messages=%s", _field(result, "total_messages"))
        return result

    async def get_trends(self, days: int = 7, channel_id: str | None = None) -> TrendsResult:
        """Get historical mood trends.

        Args:
            days: Number of days to fetch (positive integer).
            channel_id: Optional channel to filter by.
        """
        if isinstance(days, bool) or not isinstance(days, int) or days < 1:
            raise RequestValidationError(f"days must be a positive integer, got {days!r}")

        logger.info("Fetching %d-day trends%s", days, _channel_suffix(channel_id))
        try:
            result = await self._request(
                "GET", "/stats/trends", params=_params(days=days, channel_id=channel_id)
            )
        except BackendError as e:
            _annotate(e, "Failed to fetch trends")
            raise

        logger.info("Trends retrieved successfully")
        return result

    async def health_check(self) -> bool:
        """Check that the backend is reachable and healthy.

        Never raises: an unreachable backend and an unhealthy one both
        return False.
        """
        try:
            result = await self._request("GET", "/health")
        except Exception as e:
            logger.error("Health check failed: %s", e)
            return False

        status = _field(result, "status")
        if status != "healthy":
            logger.warning("Backend reported status %r", status)
            return False
        return True

    async def validate_config(self) -> bool:
        """Check that the base URL is set and the backend is healthy.

        Raises:
            ConfigurationError: If no base URL is configured. No request is made.
            BackendUnavailableError: If the health check fails.
        """
        base_url = self.config.require_base_url()

        if not await self.health_check():
            raise BackendUnavailableError(
                f"Backend at {base_url} is not responding. "
                "Please check the URL and backend status."
            )

        logger.info("Configuration validated - backend is healthy at %s", base_url)
        return True

    # =========================================================================
    # Resilient request
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request through the circuit breaker with retry.

        Each attempt checks the breaker first. Every failed attempt is
        recorded once, every success resets the breaker. Only read-only
        methods are retried, and only for retryable failures (timeouts,
        connection errors, 5xx).
        """
        url = f"{self.config.require_base_url()}{path}"
        session = self._require_session()
        can_retry = method.upper() in READ_ONLY_METHODS
        retries = 0

        while True:
            if not self._circuit.can_execute():
                logger.warning(
                    "Rejected %s %s: circuit breaker is open",
                    method,
                    path,
                    extra={"method": method, "path": path},
                )
                raise CircuitOpenError()

            attempt = retries + 1
            logger.debug(
                "%s %s (attempt %d)",
                method,
                url,
                attempt,
                extra={"method": method, "path": path, "attempt": attempt},
            )
            try:
                result = await self._send(session, method, url, params, payload)
            except BackendError as e:
                self._circuit.record_failure()

                if not (can_retry and e.retryable and retries < self.config.max_retries):
                    raise
                if self._circuit.state == CircuitState.OPEN:
                    logger.warning("Not retrying %s %s: circuit breaker opened", method, path)
                    raise

                retries += 1
                delay = self.config.retry_delay * retries
                logger.warning(
                    "Request %s %s failed, retrying in %.1fs (%d/%d): %s",
                    method,
                    path,
                    delay,
                    retries,
                    self.config.max_retries,
                    e,
                    extra={"method": method, "path": path, "attempt": attempt, "delay": delay},
                )
                await self.sleep(delay)
                continue

            self._circuit.record_success()
            return result

    async def _send(
        self,
        session: aiohttp.ClientSession,
        method: str,
        url: str,
        params: dict[str, Any] | None,
        payload: dict[str, Any] | None,
    ) -> Any:
        """Single HTTP attempt, translating failures into BackendError categories."""
        try:
            async with session.request(method, url, params=params, json=payload) as response:
                if not 200 <= response.status < 300:
                    # Error pages are not always valid UTF-8
                    body = await response.text(errors="replace")
                    raise HTTPStatusError(
                        f"HTTP {response.status}: {_reason(response)}",
                        response.status,
                        body,
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise ParseError(f"Invalid JSON in response: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Request timed out after {self.config.timeout:g}s", timed_out=True
            ) from e
        except aiohttp.ClientConnectionError as e:
            raise TransportError(f"Connection failed: {e}") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request failed: {e}", retryable=False) from e

    def _require_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("Client not connected. Call connect() first.")
        return self._session


def _annotate(error: BackendError, operation: str) -> None:
    error.operation = operation
    logger.error("%s: %s", operation, error.message, extra={"operation": operation})


def _reason(response: aiohttp.ClientResponse) -> str:
    if response.reason:
        return response.reason
    try:
        return HTTPStatus(response.status).phrase
    except ValueError:
        return "Unknown status"


def _params(**values: Any) -> dict[str, Any] | None:
    params = {k: v for k, v in values.items() if v is not None and v != ""}
    return params or None


def _field(result: Any, key: str) -> Any:
    return result.get(key) if isinstance(result, dict) else None


def _preview(text: str) -> str:
    if len(text) <= LOG_PREVIEW_LENGTH:
        return text
    return text[:LOG_PREVIEW_LENGTH] + "..."


def _channel_suffix(channel_id: str | None) -> str:
    return f" for channel {channel_id}" if channel_id else ""
