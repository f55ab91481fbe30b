"""TradeLedger — records every decision and closes it with its realised outcome.

Closing an entry is the only path that feeds results back into the pattern
library: when the originating signal came from a pattern, a win or loss is
forwarded to ``PatternStore.record_outcome``.
"""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, get_args

import structlog

from signal_fusion.ledger.storage import LedgerStorage, MemoryStorage
from signal_fusion.metrics import formulas
from signal_fusion.models.edge import EdgeCalculation, TradeSetup
from signal_fusion.models.ledger import (
    ClosedOutcome,
    LedgerEntry,
    PerformanceStats,
    SignalTypeStats,
)
from signal_fusion.models.signal import Signal

if TYPE_CHECKING:
    from signal_fusion.patterns.store import PatternStore

log = structlog.get_logger("trade_ledger")

CLOSED_OUTCOMES: tuple[str, ...] = get_args(ClosedOutcome)


class EntryNotFoundError(KeyError):
    """No ledger entry with the given id."""


class OutcomeAlreadyRecordedError(ValueError):
    """The entry has already moved to a terminal outcome."""


def realised_return(direction: str, entry_price: float, exit_price: float) -> float:
    """Directional return in percent.

    long:  (exit - entry) / entry * 100
    short: (entry - exit) / entry * 100
    """
    if entry_price <= 0:
        raise ValueError(f"Entry price must be positive, got {entry_price}")
    if direction == "long":
        return (exit_price - entry_price) / entry_price * 100
    return (entry_price - exit_price) / entry_price * 100


class TradeLedger:
    def __init__(
        self,
        storage: LedgerStorage | None = None,
        pattern_store: PatternStore | None = None,
    ) -> None:
        self.storage = storage or MemoryStorage()
        self.pattern_store = pattern_store
        self._lock = threading.Lock()
        self._entries: list[LedgerEntry] = []

    def load(self) -> None:
        """Replace in-memory entries with whatever the storage holds."""
        entries = self.storage.load()
        with self._lock:
            self._entries = entries
        log.info("ledger_loaded", entries=len(entries))

    def _commit(self, entries: list[LedgerEntry]) -> None:
        # Caller holds the lock; memory only changes once storage accepted the write
        self.storage.save(list(entries))
        self._entries = entries

    def record_signal(
        self,
        signal: Signal,
        trade_setup: TradeSetup,
        edge: EdgeCalculation,
        market_type: str,
        entry_price: float | None = None,
        now: datetime | None = None,
    ) -> LedgerEntry:
        now = now or datetime.now(timezone.utc)
        entry = LedgerEntry(
            id=f"trade-{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:9]}",
            timestamp=now,
            asset=signal.asset,
            market_type=market_type,
            signal=signal,
            trade_setup=trade_setup,
            edge=edge,
            entry_price=entry_price,
        )
        with self._lock:
            self._commit([*self._entries, entry])

        log.info(
            "ledger_entry_recorded",
            entry_id=entry.id,
            asset=entry.asset,
            signal_type=signal.type,
            direction=trade_setup.direction,
        )
        return entry

    def update_outcome(
        self,
        entry_id: str,
        outcome: ClosedOutcome,
        exit_price: float,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> LedgerEntry:
        """Close an open entry exactly once.

        Raises EntryNotFoundError for an unknown id and
        OutcomeAlreadyRecordedError when the entry is already closed; in both
        cases nothing changes.
        """
        if outcome not in CLOSED_OUTCOMES:
            raise ValueError(f"Invalid outcome {outcome!r}, expected one of {CLOSED_OUTCOMES}")
        now = now or datetime.now(timezone.utc)

        with self._lock:
            index = next((i for i, e in enumerate(self._entries) if e.id == entry_id), None)
            if index is None:
                raise EntryNotFoundError(entry_id)
            entry = self._entries[index]
            if entry.is_closed:
                raise OutcomeAlreadyRecordedError(
                    f"Entry {entry_id} already closed as {entry.outcome!r}"
                )

            basis = (
                entry.entry_price
                if entry.entry_price is not None
                else entry.trade_setup.entry.optimal
            )
            closed = entry.model_copy(
                update={
                    "outcome": outcome,
                    "exit_price": exit_price,
                    "exit_time": now,
                    "notes": notes,
                    "return_pct": realised_return(
                        entry.trade_setup.direction, basis, exit_price
                    ),
                }
            )
            updated = list(self._entries)
            updated[index] = closed
            self._commit(updated)

        log.info(
            "ledger_outcome_recorded",
            entry_id=entry_id,
            outcome=outcome,
            return_pct=round(closed.return_pct or 0.0, 4),
        )

        pattern_id = closed.pattern_id
        if pattern_id and outcome != "breakeven" and self.pattern_store is not None:
            self.pattern_store.record_outcome(
                pattern_id, won=outcome == "win", return_pct=closed.return_pct or 0.0
            )
        return closed

    def get_entries(
        self,
        asset: str | None = None,
        outcome: str | None = None,
        limit: int | None = None,
    ) -> list[LedgerEntry]:
        """Filtered entries, newest first, at most *limit* of them."""
        with self._lock:
            entries = list(self._entries)
        if asset:
            entries = [e for e in entries if e.asset == asset]
        if outcome:
            entries = [e for e in entries if e.outcome == outcome]
        entries.sort(key=lambda e: e.timestamp, reverse=True)
        if limit is not None:
            entries = entries[:limit]
        return entries

    def _closed(self, asset: str | None, market_type: str | None) -> list[LedgerEntry]:
        with self._lock:
            entries = [e for e in self._entries if e.is_closed]
        if asset:
            entries = [e for e in entries if e.asset == asset]
        if market_type:
            entries = [e for e in entries if e.market_type == market_type]
        entries.sort(key=lambda e: e.exit_time or e.timestamp)
        return entries

    def get_stats(
        self,
        asset: str | None = None,
        market_type: str | None = None,
    ) -> PerformanceStats:
        """Aggregate performance over closed entries, oldest exit first."""
        entries = self._closed(asset, market_type)
        if not entries:
            return PerformanceStats()

        returns = [e.return_pct or 0.0 for e in entries]
        wins = [e.return_pct or 0.0 for e in entries if e.outcome == "win"]
        losses = [abs(e.return_pct or 0.0) for e in entries if e.outcome == "loss"]
        avg_win = formulas.mean(wins)
        avg_loss = formulas.mean(losses)

        return PerformanceStats(
            total_trades=len(entries),
            winning_trades=len(wins),
            losing_trades=len(losses),
            win_rate=formulas.win_rate(len(wins), len(entries)),
            avg_return=formulas.mean(returns),
            avg_win=avg_win,
            avg_loss=avg_loss,
            profit_factor=formulas.profit_factor(avg_win, avg_loss),
            max_drawdown=formulas.max_drawdown(returns),
            sharpe_ratio=formulas.sharpe_ratio(returns),
        )

    def get_signal_type_stats(self) -> dict[str, SignalTypeStats]:
        """Wins, losses and win rate per originating signal type."""
        counts: dict[str, list[int]] = {}
        for entry in self._closed(None, None):
            tally = counts.setdefault(entry.signal.type, [0, 0])
            if entry.outcome == "win":
                tally[0] += 1
            elif entry.outcome == "loss":
                tally[1] += 1

        return {
            signal_type: SignalTypeStats(
                wins=won,
                losses=lost,
                win_rate=formulas.win_rate(won, won + lost),
            )
            for signal_type, (won, lost) in counts.items()
        }
