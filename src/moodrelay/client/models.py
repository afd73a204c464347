"""Request and result shapes exchanged with the analysis backend.

Results are produced entirely by the backend and passed through unchanged;
the TypedDicts below document their shape for callers and type checkers.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, TypedDict

from moodrelay.client.errors import RequestValidationError

MAX_MESSAGE_LENGTH = 5000

Sentiment = Literal["positive", "neutral", "negative"]
Trend = Literal["up", "down", "stable"]


@dataclass(frozen=True)
class AnalysisRequest:
    """A chat message to analyze."""

    message: str
    user_id: str | None = None
    channel_id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.message, str) or not self.message.strip():
            raise RequestValidationError("message must be a non-empty string")
        if len(self.message) > MAX_MESSAGE_LENGTH:
            raise RequestValidationError(
                f"message is too long ({len(self.message)} > {MAX_MESSAGE_LENGTH} characters)"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AnalysisRequest":
        """Build a request from a payload dict such as a webhook body."""
        return cls(
            message=data.get("message", ""),
            user_id=data.get("user_id"),
            channel_id=data.get("channel_id"),
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON body for POST /analyze, without unset optional fields."""
        payload: dict[str, Any] = {"message": self.message}
        if self.user_id is not None:
            payload["user_id"] = self.user_id
        if self.channel_id is not None:
            payload["channel_id"] = self.channel_id
        return payload


class AnalysisResult(TypedDict, total=False):
    sentiment: Sentiment
    emotion: str
    stress_score: float  # 0-10
    category: str
    suggested_reply: str
    confidence: float  # 0-1


class IssueCount(TypedDict):
    category: str
    count: int


class StatsResult(TypedDict, total=False):
    positive_pct: float
    neutral_pct: float
    negative_pct: float
    avg_stress: float
    top_issues: list[IssueCount]
    trend: Trend
    total_messages: int


# Historical trend payload is defined by the backend.
TrendsResult = dict[str, Any]
