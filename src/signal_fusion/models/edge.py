"""Edge and trade-plan models produced by the edge calculator."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Urgency = Literal["immediate", "soon", "patient"]
TradeDirection = Literal["long", "short"]


class EdgeCalculation(BaseModel):
    """Quantified edge. Frozen once computed."""

    model_config = ConfigDict(frozen=True)

    win_rate: float  # 0-1
    avg_win: float  # percent
    avg_loss: float  # percent
    risk_reward: float
    expected_value: float  # percent
    edge_exists: bool
    conviction_score: float = Field(ge=0.0, le=10.0)
    half_life: float  # hours


class EntryZone(BaseModel):
    min: float
    max: float
    optimal: float
    urgency: Urgency


class Target(BaseModel):
    price: float
    percentage: float  # share of the position to exit here
    probability: float
    action: Literal["take_profit", "move_stop", "hold"]


class PositionSizing(BaseModel):
    portfolio_percent: float
    max_risk_percent: float = 2.0
    kelly_fraction: float = Field(ge=0.0, le=0.25)
    confidence: float


class Scenario(BaseModel):
    probability: float
    price_target: float
    timeline_hours: float
    catalysts: list[str] = Field(default_factory=list)


class Scenarios(BaseModel):
    bull: Scenario
    base: Scenario
    bear: Scenario


class TradeSetup(BaseModel):
    asset: str
    direction: TradeDirection
    entry: EntryZone
    stop_loss: float
    targets: list[Target]
    position: PositionSizing
    scenarios: Scenarios
    max_hold_time: float  # hours, 2 x half-life
    catalyst: str | None = None
    warnings: list[str] = Field(default_factory=list)
