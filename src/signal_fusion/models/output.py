"""SignalFusionOutput — the channel-agnostic bundle handed to presentation layers."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from signal_fusion.models.council import CouncilOpinion
from signal_fusion.models.edge import EdgeCalculation, TradeSetup, Urgency
from signal_fusion.models.signal import Direction, Signal

Recommendation = Literal["buy", "sell", "hold", "avoid"]


class SignalSwarm(BaseModel):
    edge: EdgeCalculation
    signals: list[Signal]
    trade_setup: TradeSetup


class CouncilRound(BaseModel):
    round: int
    opinions: list[CouncilOpinion]
    consensus: float


class TradingCouncil(BaseModel):
    debate: list[CouncilRound]
    consensus: float
    majority_opinion: Direction
    minority_opinion: Direction | None = None


class FinalVerdict(BaseModel):
    recommendation: Recommendation
    conviction: float  # 0-100
    urgency: Urgency
    summary: str
    key_risks: list[str] = Field(default_factory=list)
    key_opportunities: list[str] = Field(default_factory=list)


class OutputMetadata(BaseModel):
    processing_time_ms: float
    data_sources: list[str]
    version: str


class SignalFusionOutput(BaseModel):
    query: str
    timestamp: datetime
    signal_swarm: SignalSwarm
    trading_council: TradingCouncil
    final_verdict: FinalVerdict
    metadata: OutputMetadata
