"""Skill specialists — market-agnostic technical roles.

Registration order is the order opinions are reported in. Chart, risk and
volume always run; the rest need their snapshot sub-record.
"""

from __future__ import annotations

from signal_fusion.council.registry import (
    Assessment,
    CouncilContext,
    skill_specialist,
    stance_from_ev,
)
from signal_fusion.models.signal import Direction


def _band(value: float, threshold: float) -> Direction:
    if value > threshold:
        return "bullish"
    if value < -threshold:
        return "bearish"
    return "neutral"


@skill_specialist(
    "chart-whisperer",
    name="Chart Whisperer",
    domain="Technical Analysis",
    personality="Pattern-focused, precise",
    expertise=["support_resistance", "indicators", "patterns"],
)
def chart_whisperer(ctx: CouncilContext) -> Assessment:
    data, edge, trade = ctx.snapshot, ctx.edge, ctx.trade_setup
    key_points: list[str] = []
    concerns: list[str] = []

    if data.price is not None and abs(data.price.change_24h) > 5:
        key_points.append(f"Significant price move: {data.price.change_24h:.1f}%")
    if trade.targets:
        key_points.append("Clear target levels defined")
    if edge.risk_reward < 2:
        concerns.append("Risk/reward below 2:1 threshold")

    return Assessment(
        stance=stance_from_ev(edge.expected_value, 1),
        confidence=edge.conviction_score / 10,
        reasoning=(
            "Chart-Whisperer: Technical setup "
            f"{'favorable' if edge.risk_reward >= 2 else 'marginal'}"
        ),
        key_points=key_points,
        concerns=concerns,
    )


@skill_specialist(
    "sentiment-sleuth",
    name="Sentiment Sleuth",
    domain="Social Sentiment",
    personality="Psychology-aware, contrarian",
    expertise=["social_media", "news_sentiment", "crowd_psychology"],
    requires="social",
)
def sentiment_sleuth(ctx: CouncilContext) -> Assessment:
    social = ctx.snapshot.social
    sentiment = social.sentiment_score
    key_points: list[str] = []
    concerns: list[str] = []

    if sentiment > 0.3:
        key_points.append(f"Positive sentiment: {sentiment * 100:.0f}%")
    elif sentiment < -0.3:
        concerns.append(f"Negative sentiment: {sentiment * 100:.0f}%")
    if social.trending:
        key_points.append("Asset is trending")
    if abs(sentiment) > 0.8:
        concerns.append("Sentiment at extreme, potential reversal")

    mood = "positive" if sentiment > 0 else "negative" if sentiment < 0 else "neutral"
    return Assessment(
        stance=_band(sentiment, 0.2),
        confidence=abs(sentiment),
        reasoning=f"Sentiment-Sleuth: Social mood {mood}",
        key_points=key_points,
        concerns=concerns,
    )


@skill_specialist(
    "whale-tracker",
    name="Whale Tracker",
    domain="Large Transactions",
    personality="Data-heavy, accumulation-focused",
    expertise=["wallet_tracking", "smart_money", "flow_analysis"],
    requires="whale",
)
def whale_tracker(ctx: CouncilContext) -> Assessment:
    whale = ctx.snapshot.whale
    net_flow = whale.net_flow_24h
    key_points: list[str] = []
    concerns: list[str] = []

    if net_flow > 100_000:
        key_points.append(f"Strong inflow: ${net_flow / 1000:.0f}k")
    elif net_flow < -100_000:
        concerns.append(f"Outflow detected: ${abs(net_flow) / 1000:.0f}k")
    if len(whale.large_transactions) > 5:
        key_points.append(f"{len(whale.large_transactions)} large transactions")

    activity = "accumulating" if net_flow > 0 else "distributing" if net_flow < 0 else "neutral"
    return Assessment(
        stance=_band(net_flow, 0),
        confidence=min(0.9, abs(net_flow) / 500_000),
        reasoning=f"Whale-Tracker: Smart money {activity}",
        key_points=key_points,
        concerns=concerns,
    )


@skill_specialist(
    "news-hound",
    name="News Hound",
    domain="Breaking News",
    personality="Fast, catalyst-focused",
    expertise=["news_scanning", "catalyst_detection", "impact_analysis"],
    requires="news",
)
def news_hound(ctx: CouncilContext) -> Assessment:
    news = ctx.snapshot.news
    key_points: list[str] = []
    concerns: list[str] = []

    if news.catalyst_detected:
        key_points.append(f"Catalyst: {news.catalyst_detected}")
    if news.breaking_news:
        key_points.append("Breaking news detected")
    count = len(news.articles)
    if count > 10:
        key_points.append(f"High news volume: {count} articles")

    avg_sentiment = sum(a.sentiment for a in news.articles) / count if count else 0.0
    if avg_sentiment < -0.3:
        concerns.append("Negative news sentiment")

    return Assessment(
        stance=_band(avg_sentiment, 0.2),
        confidence=min(0.8, count / 20),
        reasoning=(
            f"News-Hound: {'Catalyst-driven' if news.catalyst_detected else 'No major catalysts'}"
        ),
        key_points=key_points,
        concerns=concerns,
    )


@skill_specialist(
    "risk-advisor",
    name="Risk Advisor",
    domain="Risk Management",
    personality="Conservative, protective",
    expertise=["position_sizing", "portfolio_risk", "kelly_criterion"],
)
def risk_advisor(ctx: CouncilContext) -> Assessment:
    edge, trade = ctx.edge, ctx.trade_setup
    key_points = [
        f"Position size: {trade.position.portfolio_percent:.1f}%",
        f"Max risk: {trade.position.max_risk_percent:g}%",
    ]
    concerns: list[str] = []

    if trade.position.kelly_fraction < 0.1:
        concerns.append("Kelly fraction suggests minimal edge")
    if edge.conviction_score < 5:
        concerns.append("Low conviction, consider smaller size")
    if trade.entry.optimal:
        stop_distance = abs(1 - trade.stop_loss / trade.entry.optimal)
        if stop_distance > 0.1:
            concerns.append(f"Wide stop at {stop_distance * 100:.1f}%")

    conviction = edge.conviction_score
    if conviction > 6:
        stance: Direction = "bullish"
    elif conviction < 3:
        stance = "bearish"
    else:
        stance = "neutral"
    return Assessment(
        stance=stance,
        confidence=conviction / 10,
        reasoning=(
            f"Risk-Advisor: {'Favorable' if conviction > 6 else 'Moderate'} risk/reward profile"
        ),
        key_points=key_points,
        concerns=concerns,
    )


@skill_specialist(
    "safety-inspector",
    name="Safety Inspector",
    domain="Safety Audits",
    personality="Skeptical, thorough",
    expertise=["contract_audits", "rug_detection", "liquidity_checks"],
    requires="onchain",
)
def safety_inspector(ctx: CouncilContext) -> Assessment:
    onchain = ctx.snapshot.onchain
    key_points: list[str] = []
    concerns: list[str] = []

    if onchain.contract_verified:
        key_points.append("Contract verified")
    concentration = onchain.holder_concentration
    if concentration < 0.5:
        key_points.append("Good holder distribution")
    elif concentration > 0.6:
        concerns.append(f"High concentration: {concentration * 100:.0f}%")
    if onchain.liquidity_locked:
        key_points.append("Liquidity locked")
    else:
        concerns.append("Liquidity not locked, rug risk")
    if onchain.holder_count < 100:
        concerns.append("Low holder count, liquidity risk")

    if not concerns:
        stance: Direction = "bullish"
        confidence = 0.9
        reasoning = "Safety-Inspector: No red flags"
    elif len(concerns) > 2:
        stance, confidence = "bearish", 0.3
        reasoning = f"Safety-Inspector: {len(concerns)} concerns identified"
    else:
        stance, confidence = "neutral", 0.6
        reasoning = f"Safety-Inspector: {len(concerns)} concerns identified"
    return Assessment(
        stance=stance,
        confidence=confidence,
        reasoning=reasoning,
        key_points=key_points,
        concerns=concerns,
    )


@skill_specialist(
    "volume-analyst",
    name="Volume Analyst",
    domain="Trading Volume",
    personality="Flow-focused, institutional-aware",
    expertise=["liquidity_analysis", "order_flow", "volume_patterns"],
)
def volume_analyst(ctx: CouncilContext) -> Assessment:
    price = ctx.snapshot.price
    volume = price.volume_24h if price is not None else 0.0
    liquidity = price.liquidity if price is not None and price.liquidity else volume
    key_points: list[str] = []
    concerns: list[str] = []

    if volume > 1_000_000:
        key_points.append(f"Healthy volume: ${volume / 1e6:.2f}M")
    elif volume < 100_000:
        concerns.append("Low volume, liquidity risk")
    if liquidity > 500_000:
        key_points.append("Good liquidity depth")
    else:
        concerns.append("Shallow liquidity, slippage risk")

    if volume > 500_000:
        stance: Direction = "bullish"
    elif volume < 100_000:
        stance = "bearish"
    else:
        stance = "neutral"
    return Assessment(
        stance=stance,
        confidence=min(0.9, volume / 1e6),
        reasoning=f"Volume-Analyst: {'Sufficient' if volume > 500_000 else 'Limited'} liquidity",
        key_points=key_points,
        concerns=concerns,
    )


@skill_specialist(
    "macro-monitor",
    name="Macro Monitor",
    domain="Macro Trends",
    personality="Big-picture, policy-aware",
    expertise=["fed_policy", "inflation", "global_trends"],
    requires="macro",
)
def macro_monitor(ctx: CouncilContext) -> Assessment:
    macro = ctx.snapshot.macro
    key_points: list[str] = []
    concerns: list[str] = []

    if macro.fed_policy == "dovish":
        key_points.append("Dovish Fed environment")
    elif macro.fed_policy == "hawkish":
        concerns.append("Hawkish Fed environment")
    if macro.risk_on_off == "risk-on":
        key_points.append("Risk-on market")
    elif macro.risk_on_off == "risk-off":
        concerns.append("Risk-off market")
    if macro.vix > 25:
        concerns.append(f"Elevated VIX: {macro.vix:.1f}")

    stance, backdrop = {
        "risk-on": ("bullish", "Favorable"),
        "risk-off": ("bearish", "Challenging"),
    }.get(macro.risk_on_off, ("neutral", "Neutral"))
    return Assessment(
        stance=stance,
        confidence=0.7,
        reasoning=f"Macro-Monitor: {backdrop} macro backdrop",
        key_points=key_points,
        concerns=concerns,
    )
