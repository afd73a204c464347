"""Backend client configuration.

Values come from the hosting service, usually via environment variables:

    BACKEND_API_URL             Base URL of the analysis backend (required)
    API_TIMEOUT                 Request timeout in ms (default: 10000)
    API_MAX_RETRIES             Retries for read-only requests (default: 3)
    API_RETRY_DELAY             Linear backoff step in ms (default: 1000)
    CIRCUIT_BREAKER_THRESHOLD   Consecutive failures before opening (default: 5)
    CIRCUIT_BREAKER_RESET       Open period in ms (default: 30000)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from moodrelay.client.errors import ConfigurationError

BASE_URL_ENV = "BACKEND_API_URL"


@dataclass
class BackendClientConfig:
    """Configuration for BackendClient.

    Durations are in seconds. ``base_url`` may be None so that a missing
    setting is reported by ``BackendClient.validate_config()`` instead of
    failing at construction.
    """

    base_url: str | None

    timeout: float = 10.0

    # Retry configuration (read-only requests only)
    max_retries: int = 3
    retry_delay: float = 1.0

    # Circuit breaker
    circuit_failure_threshold: int = 5
    circuit_reset_timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.base_url:
            self.base_url = self.base_url.rstrip("/")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_delay < 0:
            raise ConfigurationError(f"retry_delay must be >= 0, got {self.retry_delay}")
        if self.circuit_failure_threshold < 1:
            raise ConfigurationError(
                f"circuit_failure_threshold must be >= 1, got {self.circuit_failure_threshold}"
            )
        if self.circuit_reset_timeout < 0:
            raise ConfigurationError(
                f"circuit_reset_timeout must be >= 0, got {self.circuit_reset_timeout}"
            )

    def require_base_url(self) -> str:
        """Return the base URL or raise ConfigurationError."""
        if not self.base_url:
            raise ConfigurationError(
                f"{BASE_URL_ENV} is not configured. Please set it in extension settings."
            )
        return self.base_url

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        base_url: str | None = None,
    ) -> BackendClientConfig:
        """Load configuration from environment variables.

        Args:
            env: Mapping to read instead of os.environ.
            base_url: Overrides BACKEND_API_URL when given.

        Raises:
            ConfigurationError: If a numeric setting is malformed.
        """
        env = os.environ if env is None else env

        def get_ms(key: str, default: int) -> float:
            return _get_int(env, key, default) / 1000

        return cls(
            base_url=base_url or env.get(BASE_URL_ENV) or None,
            timeout=get_ms("API_TIMEOUT", 10000),
            max_retries=_get_int(env, "API_MAX_RETRIES", 3),
            retry_delay=get_ms("API_RETRY_DELAY", 1000),
            circuit_failure_threshold=_get_int(env, "CIRCUIT_BREAKER_THRESHOLD", 5),
            circuit_reset_timeout=get_ms("CIRCUIT_BREAKER_RESET", 30000),
        )


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None
