"""Signal model — emitted by the anomaly detector and the pattern matcher."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

SignalType = Literal[
    "price_action",
    "volume_anomaly",
    "whale_movement",
    "social_sentiment",
    "pattern_match",
    "news_catalyst",
    "macro_correlation",
    "on_chain",
]
Direction = Literal["bullish", "bearish", "neutral"]
Severity = Literal["critical", "warning", "info"]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class SignalEvidence(BaseModel):
    """The raw reading behind a signal."""

    raw_value: float
    threshold: float
    deviation: float  # how far past the threshold, in threshold units
    context: str


class AdversarialTestResult(BaseModel):
    test_id: str
    test: str
    result: Literal["pass", "fail", "not_applicable"]
    severity: Severity
    explanation: str


class SignalMetadata(BaseModel):
    source: str
    sensor: str
    validated: bool = False
    adversarial_tests: list[AdversarialTestResult] = Field(default_factory=list)
    pattern_id: str | None = None


class Signal(BaseModel):
    """A directional observation about one asset.

    ``confidence`` is clamped to [0, 1] and ``strength`` to [0, 10] on
    construction. Only the adversarial validator stamps ``metadata``, and it
    does so on a copy.
    """

    id: str
    asset: str
    type: SignalType
    direction: Direction
    confidence: float
    strength: float
    timestamp: datetime
    expires_at: datetime
    evidence: SignalEvidence
    metadata: SignalMetadata

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, v: float) -> float:
        return clamp(v, 0.0, 1.0)

    @field_validator("strength")
    @classmethod
    def _clamp_strength(cls, v: float) -> float:
        return clamp(v, 0.0, 10.0)

    @property
    def weight(self) -> float:
        """Confidence x strength, the signal's vote in the base win rate."""
        return self.confidence * self.strength
