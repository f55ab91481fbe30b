"""Tests for the specialist registry, the specialists and the council runner."""

from __future__ import annotations

import pytest

from signal_fusion.council import CouncilRunner, specialist_for_market
from signal_fusion.council.registry import (
    MARKET_SPECIALISTS,
    SKILL_SPECIALISTS,
    Assessment,
    CouncilContext,
    SpecialistEntry,
    market_specialist,
    skill_specialist,
    stance_from_ev,
)
from signal_fusion.config.schema import CouncilConfig
from signal_fusion.models import (
    EdgeCalculation,
    MacroData,
    NewsData,
    OnChainData,
    SocialData,
    Specialist,
    WhaleData,
)
from signal_fusion.processors import EdgeCalculator

SKILL_ORDER = [
    "chart-whisperer",
    "sentiment-sleuth",
    "whale-tracker",
    "news-hound",
    "risk-advisor",
    "safety-inspector",
    "volume-analyst",
    "macro-monitor",
]


def _edge(**overrides) -> EdgeCalculation:
    values = dict(
        win_rate=0.6,
        avg_win=20.0,
        avg_loss=8.0,
        risk_reward=2.5,
        expected_value=8.8,
        edge_exists=True,
        conviction_score=8.0,
        half_life=24.0,
    )
    values.update(overrides)
    return EdgeCalculation(**values)


@pytest.fixture
def context(snapshot_factory):
    """Build a CouncilContext around a 100.0 crypto snapshot."""

    def _build(edge: EdgeCalculation | None = None, market_type: str = "crypto", **snapshot_kw):
        edge = edge or _edge()
        snapshot = snapshot_factory(market_type=market_type, price=100.0, **snapshot_kw)
        trade = EdgeCalculator().construct_trade(edge, 100.0, snapshot.asset, market_type)
        return CouncilContext(snapshot=snapshot, edge=edge, trade_setup=trade)

    return _build


def _opine(registry: dict[str, SpecialistEntry], specialist_id: str, ctx: CouncilContext):
    return registry[specialist_id].opine(ctx)


# ═══════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════


class TestRegistry:
    def test_market_specialists_registered(self):
        CouncilRunner()  # importing the runner registers everything
        assert set(MARKET_SPECIALISTS) == {
            "crypto-sage",
            "solana-scout",
            "meme-maestro",
            "stock-sentinel",
            "penny-prospector",
            "commodity-chief",
            "forex-falcon",
        }

    def test_skill_registration_order(self):
        assert list(SKILL_SPECIALISTS) == SKILL_ORDER

    def test_skill_requirements(self):
        requires = {sid: e.requires for sid, e in SKILL_SPECIALISTS.items()}
        assert requires == {
            "chart-whisperer": None,
            "sentiment-sleuth": "social",
            "whale-tracker": "whale",
            "news-hound": "news",
            "risk-advisor": None,
            "safety-inspector": "onchain",
            "volume-analyst": None,
            "macro-monitor": "macro",
        }

    def test_kinds(self):
        assert all(e.specialist.kind == "market" for e in MARKET_SPECIALISTS.values())
        assert all(e.specialist.kind == "skill" for e in SKILL_SPECIALISTS.values())

    @pytest.mark.parametrize(
        "market,expected",
        [
            ("crypto", "crypto-sage"),
            ("CRYPTO", "crypto-sage"),
            ("solana", "solana-scout"),
            ("meme", "meme-maestro"),
            ("penny", "penny-prospector"),
            ("forex", "forex-falcon"),
        ],
    )
    def test_specialist_for_market(self, market, expected):
        assert specialist_for_market(market).specialist.id == expected

    def test_unknown_market_is_none(self):
        assert specialist_for_market("bonds") is None

    def test_duplicate_market_id_rejected(self):
        with pytest.raises(ValueError, match="crypto-sage"):
            market_specialist(
                "crypto-sage", name="Dup", domain="x", personality="x", expertise=[]
            )(lambda ctx: None)

    def test_duplicate_skill_id_rejected(self):
        before = dict(SKILL_SPECIALISTS)
        with pytest.raises(ValueError):
            skill_specialist(
                "risk-advisor", name="Dup", domain="x", personality="x", expertise=[]
            )(lambda ctx: None)
        assert SKILL_SPECIALISTS == before

    @pytest.mark.parametrize(
        "ev,expected", [(3.0, "bullish"), (2.0, "neutral"), (0.0, "neutral"), (-0.1, "bearish")]
    )
    def test_stance_from_ev(self, ev, expected):
        assert stance_from_ev(ev, 2) == expected


# ═══════════════════════════════════════════════════════════════════════
# Market specialists
# ═══════════════════════════════════════════════════════════════════════


class TestMarketSpecialists:
    def test_crypto_sage_bullish(self, context):
        opinion = _opine(MARKET_SPECIALISTS, "crypto-sage", context())
        assert opinion.stance == "bullish"
        assert opinion.confidence == pytest.approx(0.8)

    def test_crypto_sage_threshold(self, context):
        neutral = context(_edge(expected_value=1.5))
        bearish = context(_edge(expected_value=-1.0))
        assert _opine(MARKET_SPECIALISTS, "crypto-sage", neutral).stance == "neutral"
        assert _opine(MARKET_SPECIALISTS, "crypto-sage", bearish).stance == "bearish"

    def test_crypto_sage_macro_concerns(self, context):
        ctx = context(macro=MacroData(dxy=106.0, vix=20.0, risk_on_off="risk-off"))
        opinion = _opine(MARKET_SPECIALISTS, "crypto-sage", ctx)
        assert len(opinion.concerns) == 2

    def test_meme_maestro_needs_social_lift(self, context):
        flat = context(market_type="crypto", social=SocialData(sentiment_score=0.2))
        assert _opine(MARKET_SPECIALISTS, "meme-maestro", flat).stance == "neutral"

        hyped = context(social=SocialData(sentiment_score=0.6, trending=True))
        opinion = _opine(MARKET_SPECIALISTS, "meme-maestro", hyped)
        assert opinion.stance == "bullish"
        assert opinion.confidence == pytest.approx(0.7)
        assert len(opinion.key_points) == 2

    def test_meme_maestro_never_bearish(self, context):
        ctx = context(_edge(expected_value=-5.0), social=SocialData(sentiment_score=-0.9))
        assert _opine(MARKET_SPECIALISTS, "meme-maestro", ctx).stance == "neutral"

    def test_penny_prospector(self, context):
        opinion = _opine(MARKET_SPECIALISTS, "penny-prospector", context(market_type="penny"))
        assert opinion.stance == "bullish"
        assert opinion.confidence == pytest.approx(0.6)
        assert opinion.concerns == ["High volatility asset", "Limited liquidity"]

        weak = context(_edge(expected_value=4.0), market_type="penny")
        assert _opine(MARKET_SPECIALISTS, "penny-prospector", weak).stance == "neutral"

    def test_stock_sentinel_fed(self, context):
        ctx = context(
            market_type="stock",
            macro=MacroData(dxy=100.0, vix=15.0, fed_policy="hawkish"),
            news=NewsData(catalyst_detected="earnings beat"),
        )
        opinion = _opine(MARKET_SPECIALISTS, "stock-sentinel", ctx)
        assert opinion.concerns == ["Hawkish Fed pressures equities"]
        assert opinion.key_points == ["Catalyst: earnings beat"]

    def test_commodity_chief_strong_dollar(self, context):
        ctx = context(market_type="commodity", macro=MacroData(dxy=104.5, vix=15.0))
        opinion = _opine(MARKET_SPECIALISTS, "commodity-chief", ctx)
        assert opinion.concerns == ["Strong dollar pressures commodities"]

    def test_forex_falcon(self, context):
        macro = MacroData(dxy=101.0, vix=15.0)
        ctx = context(_edge(expected_value=0.6), market_type="forex", macro=macro)
        opinion = _opine(MARKET_SPECIALISTS, "forex-falcon", ctx)
        assert opinion.stance == "bullish"
        assert opinion.key_points == ["Fed policy: neutral", "DXY at 101.00"]


# ═══════════════════════════════════════════════════════════════════════
# Skill specialists
# ═══════════════════════════════════════════════════════════════════════


class TestSkillSpecialists:
    def test_chart_whisperer_marginal_rr(self, context):
        opinion = _opine(SKILL_SPECIALISTS, "chart-whisperer", context(_edge(risk_reward=1.5)))
        assert "Risk/reward below 2:1 threshold" in opinion.concerns
        assert "Clear target levels defined" in opinion.key_points

    def test_sentiment_sleuth_extreme(self, context):
        ctx = context(social=SocialData(sentiment_score=0.9))
        opinion = _opine(SKILL_SPECIALISTS, "sentiment-sleuth", ctx)
        assert opinion.stance == "bullish"
        assert opinion.confidence == pytest.approx(0.9)
        assert "Sentiment at extreme, potential reversal" in opinion.concerns

    def test_whale_tracker_outflow(self, context):
        ctx = context(whale=WhaleData(net_flow_24h=-200_000))
        opinion = _opine(SKILL_SPECIALISTS, "whale-tracker", ctx)
        assert opinion.stance == "bearish"
        assert opinion.confidence == pytest.approx(0.4)
        assert opinion.concerns == ["Outflow detected: $200k"]

    def test_news_hound_without_articles(self, context):
        ctx = context(news=NewsData(breaking_news=True))
        opinion = _opine(SKILL_SPECIALISTS, "news-hound", ctx)
        assert opinion.stance == "neutral"
        assert opinion.confidence == 0.0
        assert opinion.key_points == ["Breaking news detected"]

    def test_risk_advisor(self, context):
        opinion = _opine(SKILL_SPECIALISTS, "risk-advisor", context())
        assert opinion.stance == "bullish"
        assert opinion.key_points == ["Position size: 22.0%", "Max risk: 2%"]
        assert opinion.concerns == []

    def test_risk_advisor_low_conviction(self, context):
        ctx = context(
            _edge(win_rate=0.3, expected_value=-2.0, edge_exists=False, conviction_score=2.0)
        )
        opinion = _opine(SKILL_SPECIALISTS, "risk-advisor", ctx)
        assert opinion.stance == "bearish"
        assert "Kelly fraction suggests minimal edge" in opinion.concerns
        assert "Low conviction, consider smaller size" in opinion.concerns

    def test_safety_inspector_clean(self, context):
        onchain = OnChainData(
            token_address="0x1",
            holder_count=5_000,
            holder_concentration=0.3,
            liquidity_locked=True,
            contract_verified=True,
        )
        opinion = _opine(SKILL_SPECIALISTS, "safety-inspector", context(onchain=onchain))
        assert opinion.stance == "bullish"
        assert opinion.confidence == pytest.approx(0.9)

    def test_safety_inspector_red_flags(self, context):
        onchain = OnChainData(token_address="0x1", holder_count=50, holder_concentration=0.7)
        opinion = _opine(SKILL_SPECIALISTS, "safety-inspector", context(onchain=onchain))
        assert opinion.stance == "bearish"
        assert opinion.confidence == pytest.approx(0.3)
        assert len(opinion.concerns) == 3

    def test_volume_analyst_thin(self, context):
        opinion = _opine(SKILL_SPECIALISTS, "volume-analyst", context(volume_24h=300_000))
        assert opinion.stance == "neutral"
        assert opinion.confidence == pytest.approx(0.3)
        assert opinion.concerns == ["Shallow liquidity, slippage risk"]

    def test_macro_monitor_risk_off(self, context):
        macro = MacroData(dxy=100.0, vix=30.0, fed_policy="hawkish", risk_on_off="risk-off")
        opinion = _opine(SKILL_SPECIALISTS, "macro-monitor", context(macro=macro))
        assert opinion.stance == "bearish"
        assert opinion.confidence == pytest.approx(0.7)
        assert len(opinion.concerns) == 3


# ═══════════════════════════════════════════════════════════════════════
# Runner
# ═══════════════════════════════════════════════════════════════════════


class TestCouncilRunner:
    def test_select_minimal_snapshot(self, snapshot_factory):
        ids = [e.specialist.id for e in CouncilRunner().select(snapshot_factory())]
        assert ids == ["crypto-sage", "chart-whisperer", "risk-advisor", "volume-analyst"]

    def test_select_rich_snapshot(self, rich_snapshot):
        ids = [e.specialist.id for e in CouncilRunner().select(rich_snapshot)]
        assert ids == ["crypto-sage", *SKILL_ORDER]

    def test_market_override(self, snapshot_factory):
        ids = [e.specialist.id for e in CouncilRunner().select(snapshot_factory(), market="meme")]
        assert ids[0] == "meme-maestro"

    def test_unknown_market_runs_skills_only(self, snapshot_factory):
        ids = [e.specialist.id for e in CouncilRunner().select(snapshot_factory(), market="bonds")]
        assert ids == ["chart-whisperer", "risk-advisor", "volume-analyst"]

    def test_parallel_matches_sequential(self, context, rich_snapshot):
        ctx = context()
        sequential = CouncilRunner().convene(rich_snapshot, ctx.edge, ctx.trade_setup)
        parallel = CouncilRunner(parallel=True, max_workers=3).convene(
            rich_snapshot, ctx.edge, ctx.trade_setup
        )
        assert [o.specialist.id for o in parallel] == [o.specialist.id for o in sequential]
        assert [o.stance for o in parallel] == [o.stance for o in sequential]
        assert len(sequential) == 9

    def test_from_config(self):
        runner = CouncilRunner.from_config(CouncilConfig(parallel=True, max_workers=2))
        assert runner.parallel is True
        assert runner.max_workers == 2

    @pytest.mark.parametrize("parallel", [False, True])
    def test_failing_specialist_aborts_round(self, monkeypatch, context, parallel):
        def boom(ctx: CouncilContext) -> Assessment:
            raise RuntimeError("specialist down")

        broken = SpecialistEntry(
            specialist=Specialist(
                id="broken", name="Broken", kind="skill", domain="x", personality="x"
            ),
            analyze=boom,
        )
        monkeypatch.setitem(SKILL_SPECIALISTS, "broken", broken)
        ctx = context()
        with pytest.raises(RuntimeError, match="specialist down"):
            CouncilRunner(parallel=parallel).convene(ctx.snapshot, ctx.edge, ctx.trade_setup)
