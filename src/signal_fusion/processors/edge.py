"""Edge calculator — Bayesian win rate, risk/reward, conviction and the trade plan.

Pure functions at the bottom of the stack; ``EdgeCalculator`` strings them
together:

  base win rate  confidence x strength weighted vote, mapped to [0.2, 0.8]
  posterior      Bayesian update against the top pattern, blended by match score
  risk/reward    market base win/loss % scaled by mean signal strength / 5
  EV             win_rate * avg_win - (1 - win_rate) * |avg_loss|
  conviction     5 + 0.5/type + 2 * match score + 0.5 * EV, clamped [0, 10]
  half-life      market base hours x 0.7 social x 1.2 whale x 0.8 news
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from signal_fusion.models.edge import (
    EdgeCalculation,
    EntryZone,
    PositionSizing,
    Scenario,
    Scenarios,
    Target,
    TradeDirection,
    TradeSetup,
    Urgency,
)
from signal_fusion.models.pattern import PatternMatch
from signal_fusion.models.signal import Signal, clamp

log = structlog.get_logger("edge_calculator")

# (avg win, avg loss) as fractions of price at average signal strength
MARKET_RETURNS: dict[str, tuple[float, float]] = {
    "crypto": (0.25, 0.08),
    "stock": (0.15, 0.05),
    "forex": (0.02, 0.01),
    "commodity": (0.10, 0.04),
    "penny": (0.50, 0.20),
}

BASE_HALF_LIFE_HOURS: dict[str, float] = {
    "crypto": 24,
    "stock": 72,
    "forex": 12,
    "commodity": 48,
    "penny": 168,
}

HALF_LIFE_MULTIPLIERS: dict[str, float] = {
    "social_sentiment": 0.7,
    "whale_movement": 1.2,
    "news_catalyst": 0.8,
}

ENTRY_SPREAD = 0.02
MAX_KELLY = 0.25
MAX_RISK_PERCENT = 2.0

# (reward multiple of stop distance, % of position exited, probability weight, action)
TARGET_LADDER: tuple[tuple[float, float, float, str], ...] = (
    (2, 50, 0.9, "take_profit"),
    (4, 30, 0.6, "take_profit"),
    (6, 20, 0.3, "hold"),
)


# ── Pure helpers ─────────────────────────────────────────────────────


def expected_value(win_rate: float, avg_win: float, avg_loss: float) -> float:
    """win_rate * avg_win - (1 - win_rate) * |avg_loss|"""
    return win_rate * avg_win - (1 - win_rate) * abs(avg_loss)


def risk_reward_ratio(avg_win: float, avg_loss: float) -> float:
    """avg_win / |avg_loss|, or 0.0 when there is no loss to divide by."""
    if avg_loss == 0:
        return 0.0
    return avg_win / abs(avg_loss)


def kelly_fraction(win_rate: float, risk_reward: float, safety_factor: float = 0.5) -> float:
    """Half-Kelly fraction clamped to [0, 0.25].

    b = risk_reward, p = win_rate, q = 1 - p
    kelly = (b * p - q) / b

    Returns 0.0 for a non-positive reward-to-risk ratio.
    """
    if risk_reward <= 0:
        return 0.0
    kelly = (risk_reward * win_rate - (1 - win_rate)) / risk_reward
    return clamp(kelly * safety_factor, 0.0, MAX_KELLY)


def base_win_rate(signals: Sequence[Signal]) -> float:
    """Map the weighted directional vote from [-1, 1] to [0.2, 0.8].

    Neutral signals add weight without a vote. No signals, or signals with
    zero total weight, give the 0.5 prior.
    """
    total = sum(s.weight for s in signals)
    if total <= 0:
        return 0.5
    net = 0.0
    for s in signals:
        if s.direction == "bullish":
            net += s.weight
        elif s.direction == "bearish":
            net -= s.weight
    return 0.5 + (net / total) * 0.3


def bayesian_update(prior: float, match: PatternMatch) -> float:
    """Blend the prior with P(win | pattern) by the match score.

    A pattern with no recorded outcomes carries no likelihood, so the
    prior is returned unchanged. Same when P(pattern) collapses to zero.
    """
    likelihood = match.pattern.win_rate
    if likelihood is None:
        return prior
    p_pattern = likelihood * prior + (1 - likelihood) * (1 - prior)
    if p_pattern == 0:
        return prior
    posterior = likelihood * prior / p_pattern
    blend = match.match_score
    return prior * (1 - blend) + posterior * blend


def conviction_score(
    signals: Sequence[Signal],
    match: PatternMatch | None,
    ev: float,
) -> float:
    score = 5.0
    score += 0.5 * len({s.type for s in signals})
    if match is not None:
        score += 2 * match.match_score
    score += 0.5 * ev
    return clamp(score, 0.0, 10.0)


def half_life_hours(signals: Sequence[Signal], market_type: str) -> float:
    half_life = BASE_HALF_LIFE_HOURS.get(market_type, 48)
    present = {s.type for s in signals}
    for signal_type, multiplier in HALF_LIFE_MULTIPLIERS.items():
        if signal_type in present:
            half_life *= multiplier
    return float(round(half_life))


# ── Calculator ───────────────────────────────────────────────────────


class EdgeCalculator:
    def calculate_edge(
        self,
        signals: Sequence[Signal],
        market_type: str,
        pattern_match: PatternMatch | None = None,
    ) -> EdgeCalculation:
        prior = base_win_rate(signals)
        win_rate = bayesian_update(prior, pattern_match) if pattern_match else prior
        win_rate = clamp(win_rate, 0.0, 1.0)

        base_win, base_loss = MARKET_RETURNS.get(market_type, MARKET_RETURNS["stock"])
        mean_strength = sum(s.strength for s in signals) / len(signals) if signals else 5.0
        strength_factor = mean_strength / 5
        avg_win = base_win * strength_factor * 100
        avg_loss = base_loss * strength_factor * 100

        ev = expected_value(win_rate, avg_win, avg_loss)
        edge = EdgeCalculation(
            win_rate=win_rate,
            avg_win=avg_win,
            avg_loss=avg_loss,
            risk_reward=risk_reward_ratio(avg_win, avg_loss),
            expected_value=ev,
            edge_exists=ev > 0,
            conviction_score=conviction_score(signals, pattern_match, ev),
            half_life=half_life_hours(signals, market_type),
        )
        log.debug(
            "edge_calculated",
            market_type=market_type,
            prior=round(prior, 4),
            win_rate=round(edge.win_rate, 4),
            expected_value=round(edge.expected_value, 4),
            conviction=round(edge.conviction_score, 2),
            half_life=edge.half_life,
        )
        return edge

    def construct_trade(
        self,
        edge: EdgeCalculation,
        current_price: float,
        asset: str,
        market_type: str,
    ) -> TradeSetup:
        """Derive a concrete plan. Long when the edge is positive, short otherwise.

        For shorts the stop sits above the price and targets below it.
        """
        direction: TradeDirection = "long" if edge.expected_value > 0 else "short"
        sign = 1 if direction == "long" else -1

        stop_loss = current_price * (1 - sign * edge.avg_loss / 100)
        risk = abs(current_price - stop_loss)
        targets = [
            Target(
                price=current_price + sign * risk * multiple,
                percentage=pct,
                probability=edge.win_rate * weight,
                action=action,
            )
            for multiple, pct, weight, action in TARGET_LADDER
        ]

        kelly = kelly_fraction(edge.win_rate, edge.risk_reward)
        return TradeSetup(
            asset=asset,
            direction=direction,
            entry=EntryZone(
                min=current_price * (1 - ENTRY_SPREAD),
                max=current_price * (1 + ENTRY_SPREAD),
                optimal=current_price,
                urgency=entry_urgency(edge.conviction_score),
            ),
            stop_loss=stop_loss,
            targets=targets,
            position=PositionSizing(
                portfolio_percent=kelly * 100,
                max_risk_percent=MAX_RISK_PERCENT,
                kelly_fraction=kelly,
                confidence=edge.conviction_score / 10,
            ),
            scenarios=Scenarios(
                bull=Scenario(
                    probability=edge.win_rate * 0.4,
                    price_target=targets[-1].price,
                    timeline_hours=round(edge.half_life),
                    catalysts=["Momentum continues", "Volume sustains", "Breakout confirmed"],
                ),
                base=Scenario(
                    probability=edge.win_rate,
                    price_target=targets[0].price,
                    timeline_hours=round(edge.half_life * 0.7),
                    catalysts=["Normal price action", "Expected scenario"],
                ),
                bear=Scenario(
                    probability=1 - edge.win_rate,
                    price_target=current_price * (1 - sign * 0.1),
                    timeline_hours=round(edge.half_life * 0.5),
                    catalysts=["Failed breakout", "Support lost", "Reversal"],
                ),
            ),
            max_hold_time=edge.half_life * 2,
            warnings=trade_warnings(edge, market_type),
        )


def entry_urgency(conviction: float) -> Urgency:
    if conviction > 7:
        return "immediate"
    if conviction > 4:
        return "soon"
    return "patient"


def trade_warnings(edge: EdgeCalculation, market_type: str) -> list[str]:
    warnings: list[str] = []
    if edge.win_rate < 0.5:
        warnings.append("Win rate below 50%, coin flip odds")
    if edge.expected_value < 2:
        warnings.append("Low expected value, small edge")
    if market_type in ("penny", "crypto"):
        warnings.append("High volatility asset, use tight stops")
    if edge.half_life < 12:
        warnings.append("Fast edge decay, requires quick execution")
    return warnings
