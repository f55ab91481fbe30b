"""Historical pattern models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Comparator = Literal["gt", "lt", "eq", "gte", "lte", "contains"]


class PatternCondition(BaseModel):
    """One weighted test of a snapshot field, addressed by dotted path."""

    field: str  # e.g. "price.change_24h"
    operator: Comparator
    value: float | bool | str
    weight: float = Field(gt=0.0)


class Pattern(BaseModel):
    """A named historical setup with running outcome counters."""

    id: str
    name: str
    description: str = ""
    conditions: list[PatternCondition]
    historical_wins: int = 0
    historical_losses: int = 0
    avg_return: float = 0.0  # percent, EMA of realised returns
    max_drawdown: float = 0.0  # percent
    avg_hold_time: float = 24.0  # hours

    @property
    def total_outcomes(self) -> int:
        return self.historical_wins + self.historical_losses

    @property
    def win_rate(self) -> float | None:
        """Historical win rate, or None for a pattern with no recorded outcomes."""
        if self.total_outcomes == 0:
            return None
        return self.historical_wins / self.total_outcomes


class PatternMatch(BaseModel):
    """Score of one pattern against one snapshot."""

    pattern: Pattern
    match_score: float = Field(ge=0.0, le=1.0)
    matched_conditions: int
    total_conditions: int
