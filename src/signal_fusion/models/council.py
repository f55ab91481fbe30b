"""Council models — specialists, their opinions, and the reduced consensus."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from signal_fusion.models.signal import Direction, clamp

SpecialistKind = Literal["market", "skill"]


class Specialist(BaseModel):
    id: str
    name: str
    kind: SpecialistKind
    domain: str
    personality: str
    expertise: list[str] = Field(default_factory=list)


class CouncilOpinion(BaseModel):
    specialist: Specialist
    stance: Direction
    confidence: float
    reasoning: str
    key_points: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, v: float) -> float:
        return clamp(v, 0.0, 1.0)


class Consensus(BaseModel):
    """Confidence-weighted stance shares across every opinion."""

    score: float
    majority: Direction
    minority: Direction | None = None
    bullish_share: float = 0.0
    bearish_share: float = 0.0
    neutral_share: float = 0.0
