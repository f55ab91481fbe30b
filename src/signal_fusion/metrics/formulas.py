"""Pure performance formulas over realised returns — no ledger, no SQLAlchemy.

Returns are percentages (5.0 means +5%), in chronological order.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def win_rate(wins: int, total: int) -> float:
    """Win rate as a fraction 0-1."""
    if total <= 0:
        return 0.0
    return wins / total


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def profit_factor(avg_win: float, avg_loss: float) -> float:
    """avg_win / avg_loss.  *avg_loss* is a positive magnitude.

    With no losses the average win itself is returned.
    """
    if avg_loss <= 0:
        return avg_win
    return avg_win / avg_loss


def max_drawdown(returns: Sequence[float]) -> float:
    """Largest peak-to-trough fall of the cumulative return, in percentage points.

    The running peak starts at zero, so an opening loss counts as drawdown.
    """
    if len(returns) == 0:
        return 0.0
    cumulative = np.concatenate(([0.0], np.cumsum(np.asarray(returns, dtype=np.float64))))
    peak = np.maximum.accumulate(cumulative)
    return float(np.max(peak - cumulative))


def sharpe_ratio(returns: Sequence[float]) -> float:
    """Per-trade Sharpe: mean / population std, risk-free rate 0, not annualised."""
    if len(returns) == 0:
        return 0.0
    arr = np.asarray(returns, dtype=np.float64)
    std = np.std(arr)
    if std == 0:
        return 0.0
    return float(np.mean(arr) / std)
