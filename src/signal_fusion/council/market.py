"""Market specialists — one pure function per market domain."""

from __future__ import annotations

from signal_fusion.council.registry import (
    Assessment,
    CouncilContext,
    market_specialist,
    stance_from_ev,
)


@market_specialist(
    "crypto-sage",
    name="Crypto Sage",
    domain="BTC, ETH, major alts",
    personality="Veteran, cautious, fundamental",
    expertise=["market_cycles", "adoption_metrics", "macro_trends"],
)
def crypto_sage(ctx: CouncilContext) -> Assessment:
    data, edge = ctx.snapshot, ctx.edge
    key_points: list[str] = []
    concerns: list[str] = []

    if data.macro is not None:
        if data.macro.risk_on_off == "risk-on":
            key_points.append("Risk-on environment favors crypto")
        elif data.macro.risk_on_off == "risk-off":
            concerns.append("Risk-off environment may pressure crypto")
        if data.macro.dxy > 105:
            concerns.append("Strong dollar typically pressures crypto")

    if data.onchain is not None and 0 < data.onchain.holder_concentration < 0.5:
        key_points.append("Good holder distribution")

    ev_word = "Positive" if edge.expected_value > 0 else "Negative"
    return Assessment(
        stance=stance_from_ev(edge.expected_value, 2),
        confidence=edge.conviction_score / 10,
        reasoning=(
            f"Crypto-Sage: {ev_word} expected value with "
            f"{len(key_points)} supporting factors"
        ),
        key_points=key_points,
        concerns=concerns,
    )


@market_specialist(
    "solana-scout",
    name="Solana Scout",
    domain="Solana ecosystem, SPL tokens",
    personality="Fast-paced, degen-friendly",
    expertise=["dex_activity", "ecosystem_growth", "nft_volume"],
)
def solana_scout(ctx: CouncilContext) -> Assessment:
    data, edge = ctx.snapshot, ctx.edge
    key_points: list[str] = []

    if data.onchain is not None and len(data.onchain.recent_transactions) > 10:
        key_points.append("High on-chain activity")
    if data.whale is not None and data.whale.accumulation_score > 5:
        key_points.append("Smart money accumulating")

    momentum = "positive" if edge.expected_value > 0 else "negative"
    return Assessment(
        stance=stance_from_ev(edge.expected_value, 1.5),
        confidence=edge.conviction_score / 10,
        reasoning=f"Solana-Scout: Ecosystem momentum {momentum}",
        key_points=key_points,
    )


@market_specialist(
    "meme-maestro",
    name="Meme Maestro",
    domain="Meme coins, viral tokens",
    personality="High-energy, social-savvy",
    expertise=["narratives", "social_momentum", "viral_trends"],
)
def meme_maestro(ctx: CouncilContext) -> Assessment:
    data, edge = ctx.snapshot, ctx.edge
    key_points: list[str] = []
    concerns: list[str] = []
    sentiment = data.social.sentiment_score if data.social is not None else 0.0

    if sentiment > 0.5:
        key_points.append("Strong social momentum")
    if data.social is not None and data.social.trending:
        key_points.append("Trending on social media")
    # Meme tokens get the rug check regardless of edge
    if data.onchain is not None and data.onchain.holder_concentration > 0.6:
        concerns.append("High concentration, rug risk")

    # Never bearish: memes without social lift are just noise
    stance = "bullish" if edge.expected_value > 3 and sentiment > 0.3 else "neutral"
    return Assessment(
        stance=stance,
        confidence=min(0.7, edge.conviction_score / 10),
        reasoning=f"Meme-Maestro: Social momentum {'positive' if sentiment > 0 else 'neutral'}",
        key_points=key_points,
        concerns=concerns,
    )


@market_specialist(
    "stock-sentinel",
    name="Stock Sentinel",
    domain="Stocks, ETFs, indices",
    personality="Traditional, data-driven",
    expertise=["earnings", "fundamentals", "sector_analysis"],
)
def stock_sentinel(ctx: CouncilContext) -> Assessment:
    data, edge = ctx.snapshot, ctx.edge
    key_points: list[str] = []
    concerns: list[str] = []
    fed_policy = data.macro.fed_policy if data.macro is not None else None

    if fed_policy == "dovish":
        key_points.append("Dovish Fed supports equities")
    elif fed_policy == "hawkish":
        concerns.append("Hawkish Fed pressures equities")
    if data.news is not None and data.news.catalyst_detected:
        key_points.append(f"Catalyst: {data.news.catalyst_detected}")

    return Assessment(
        stance=stance_from_ev(edge.expected_value, 1),
        confidence=edge.conviction_score / 10,
        reasoning=(
            f"Stock-Sentinel: {'Favorable' if fed_policy == 'dovish' else 'Mixed'} "
            "macro environment"
        ),
        key_points=key_points,
        concerns=concerns,
    )


@market_specialist(
    "penny-prospector",
    name="Penny Prospector",
    domain="Penny stocks, micro-caps",
    personality="Risk-aware, catalyst hunter",
    expertise=["volume_spikes", "catalysts", "promotions"],
)
def penny_prospector(ctx: CouncilContext) -> Assessment:
    data, edge = ctx.snapshot, ctx.edge
    key_points: list[str] = []

    if data.news is not None and data.news.catalyst_detected:
        key_points.append(f"Binary catalyst identified: {data.news.catalyst_detected}")
    if data.price is not None and data.price.volume_24h > 500_000:
        key_points.append("Unusual volume for penny stock")

    return Assessment(
        stance="bullish" if edge.expected_value > 5 else "neutral",
        confidence=min(0.6, edge.conviction_score / 10),
        reasoning="Penny-Prospector: Catalyst-driven setup with high risk/reward",
        key_points=key_points,
        concerns=["High volatility asset", "Limited liquidity"],
    )


@market_specialist(
    "commodity-chief",
    name="Commodity Chief",
    domain="Gold, silver, oil, commodities",
    personality="Macro-focused, geopolitical",
    expertise=["inflation", "fed_policy", "supply_demand"],
)
def commodity_chief(ctx: CouncilContext) -> Assessment:
    data, edge = ctx.snapshot, ctx.edge
    key_points: list[str] = []
    concerns: list[str] = []

    if data.macro is not None:
        if data.macro.fed_policy == "dovish":
            key_points.append("Dovish Fed typically bullish for gold and silver")
        if data.macro.dxy > 104:
            concerns.append("Strong dollar pressures commodities")

    return Assessment(
        stance=stance_from_ev(edge.expected_value, 1),
        confidence=edge.conviction_score / 10,
        reasoning=(
            "Commodity-Chief: Macro factors "
            f"{'supportive' if edge.expected_value > 0 else 'mixed'}"
        ),
        key_points=key_points,
        concerns=concerns,
    )


@market_specialist(
    "forex-falcon",
    name="Forex Falcon",
    domain="Currency pairs",
    personality="Global perspective",
    expertise=["central_banks", "rates", "capital_flows"],
)
def forex_falcon(ctx: CouncilContext) -> Assessment:
    data, edge = ctx.snapshot, ctx.edge
    key_points: list[str] = []

    if data.macro is not None:
        key_points.append(f"Fed policy: {data.macro.fed_policy}")
        key_points.append(f"DXY at {data.macro.dxy:.2f}")

    return Assessment(
        stance=stance_from_ev(edge.expected_value, 0.5),
        confidence=edge.conviction_score / 10,
        reasoning="Forex-Falcon: Rate differential analysis",
        key_points=key_points,
    )
