"""Performance metrics."""

from signal_fusion.metrics.formulas import (
    max_drawdown,
    mean,
    profit_factor,
    sharpe_ratio,
    win_rate,
)

__all__ = ["max_drawdown", "mean", "profit_factor", "sharpe_ratio", "win_rate"]
