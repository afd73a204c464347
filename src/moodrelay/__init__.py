"""moodrelay - Webhook relay between a chat bot extension and a sentiment backend.

Chat events carry message text; moodrelay forwards it to an external
sentiment-analysis service and hands the JSON result back to the route
handlers that render chat cards.

Layers:
    client/     Resilient backend client (circuit breaker, retry, typed calls)
    config      Client configuration and environment loading
    cli/        Operator command line

Quick Start:
    >>> from moodrelay import AnalysisRequest, BackendClient, BackendClientConfig
    >>>
    >>> config = BackendClientConfig.from_env()
    >>> async with BackendClient(config) as client:
    ...     await client.validate_config()
    ...     result = await client.analyze(AnalysisRequest(message="Deadline moved again"))
    >>> print(result["sentiment"], result["stress_score"])
"""

from moodrelay.__version__ import __version__
from moodrelay.client import (
    AnalysisRequest,
    AnalysisResult,
    BackendClient,
    BackendError,
    BackendUnavailableError,
    CircuitOpenError,
    ConfigurationError,
    HTTPStatusError,
    MoodRelayError,
    ParseError,
    RequestValidationError,
    StatsResult,
    TransportError,
    TrendsResult,
)
from moodrelay.config import BackendClientConfig

__all__ = [
    "__version__",
    "AnalysisRequest",
    "AnalysisResult",
    "BackendClient",
    "BackendClientConfig",
    "BackendError",
    "BackendUnavailableError",
    "CircuitOpenError",
    "ConfigurationError",
    "HTTPStatusError",
    "MoodRelayError",
    "ParseError",
    "RequestValidationError",
    "StatsResult",
    "TransportError",
    "TrendsResult",
]
