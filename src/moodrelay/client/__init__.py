"""Resilient client for the sentiment-analysis backend."""

from moodrelay.client.api_client import BackendClient, CircuitBreaker, CircuitState
from moodrelay.client.errors import (
    BackendError,
    BackendUnavailableError,
    CircuitOpenError,
    ConfigurationError,
    HTTPStatusError,
    MoodRelayError,
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

__all__ = [
    "AnalysisRequest",
    "AnalysisResult",
    "BackendClient",
    "BackendError",
    "BackendUnavailableError",
    "CircuitBreaker",
    "CircuitOpenError",
    "CircuitState",
    "ConfigurationError",
    "HTTPStatusError",
    "MoodRelayError",
    "ParseError",
    "RequestValidationError",
    "StatsResult",
    "TransportError",
    "TrendsResult",
]
