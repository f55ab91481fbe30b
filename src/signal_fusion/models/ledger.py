"""Ledger records and aggregate performance statistics."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from signal_fusion.models.edge import EdgeCalculation, TradeSetup
from signal_fusion.models.signal import Signal

Outcome = Literal["open", "win", "loss", "breakeven"]
ClosedOutcome = Literal["win", "loss", "breakeven"]


class LedgerEntry(BaseModel):
    """One recorded decision. ``outcome`` moves from "open" to a terminal value once."""

    id: str
    timestamp: datetime
    asset: str
    market_type: str
    signal: Signal
    trade_setup: TradeSetup
    edge: EdgeCalculation
    entry_price: float | None = None
    exit_price: float | None = None
    exit_time: datetime | None = None
    outcome: Outcome = "open"
    return_pct: float | None = None
    notes: str | None = None

    @property
    def is_closed(self) -> bool:
        return self.outcome != "open"

    @property
    def pattern_id(self) -> str | None:
        return self.signal.metadata.pattern_id


class PerformanceStats(BaseModel):
    """Closed-trade performance. All-zero when nothing has closed."""

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0  # 0-1
    avg_return: float = 0.0  # percent
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0
    max_drawdown: float = 0.0  # percentage points of cumulative return
    sharpe_ratio: float = 0.0


class SignalTypeStats(BaseModel):
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
