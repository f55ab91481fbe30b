"""Specialist registry — decorated functions are auto-registered.

Market specialists are keyed by id and reached through an explicit
market -> id table. Skill specialists run in registration order, each one
gated on the snapshot sub-record it needs.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from signal_fusion.models.council import CouncilOpinion, Specialist
from signal_fusion.models.edge import EdgeCalculation, TradeSetup
from signal_fusion.models.signal import Direction
from signal_fusion.models.snapshot import SensorData

MarketSpecialistId = Literal[
    "crypto-sage",
    "solana-scout",
    "meme-maestro",
    "stock-sentinel",
    "penny-prospector",
    "commodity-chief",
    "forex-falcon",
]

SkillSpecialistId = Literal[
    "chart-whisperer",
    "sentiment-sleuth",
    "whale-tracker",
    "news-hound",
    "risk-advisor",
    "safety-inspector",
    "volume-analyst",
    "macro-monitor",
]

SnapshotSection = Literal["price", "onchain", "whale", "orderbook", "social", "news", "macro"]

MARKET_TO_SPECIALIST: dict[str, MarketSpecialistId] = {
    "crypto": "crypto-sage",
    "solana": "solana-scout",
    "meme": "meme-maestro",
    "stock": "stock-sentinel",
    "penny": "penny-prospector",
    "commodity": "commodity-chief",
    "forex": "forex-falcon",
}


@dataclass(frozen=True)
class CouncilContext:
    """Everything a specialist may read. Specialists never see each other's opinions."""

    snapshot: SensorData
    edge: EdgeCalculation
    trade_setup: TradeSetup


@dataclass
class Assessment:
    stance: Direction
    confidence: float
    reasoning: str
    key_points: list[str] = field(default_factory=list)
    concerns: list[str] = field(default_factory=list)


Analyzer = Callable[[CouncilContext], Assessment]


@dataclass(frozen=True)
class SpecialistEntry:
    specialist: Specialist
    analyze: Analyzer
    requires: SnapshotSection | None = None

    def applies_to(self, snapshot: SensorData) -> bool:
        return self.requires is None or getattr(snapshot, self.requires) is not None

    def opine(self, ctx: CouncilContext) -> CouncilOpinion:
        assessment = self.analyze(ctx)
        return CouncilOpinion(
            specialist=self.specialist,
            stance=assessment.stance,
            confidence=assessment.confidence,
            reasoning=assessment.reasoning,
            key_points=assessment.key_points,
            concerns=assessment.concerns,
        )


MARKET_SPECIALISTS: dict[str, SpecialistEntry] = {}
SKILL_SPECIALISTS: dict[str, SpecialistEntry] = {}


def _register(
    registry: dict[str, SpecialistEntry],
    specialist: Specialist,
    fn: Analyzer,
    requires: SnapshotSection | None = None,
) -> None:
    if specialist.id in registry:
        raise ValueError(f"Duplicate specialist id: {specialist.id!r}")
    registry[specialist.id] = SpecialistEntry(specialist=specialist, analyze=fn, requires=requires)


def market_specialist(
    specialist_id: MarketSpecialistId,
    *,
    name: str,
    domain: str,
    personality: str,
    expertise: list[str],
) -> Callable[[Analyzer], Analyzer]:
    """Function decorator that adds a market specialist to the registry."""

    def decorator(fn: Analyzer) -> Analyzer:
        specialist = Specialist(
            id=specialist_id,
            name=name,
            kind="market",
            domain=domain,
            personality=personality,
            expertise=expertise,
        )
        _register(MARKET_SPECIALISTS, specialist, fn)
        return fn

    return decorator


def skill_specialist(
    specialist_id: SkillSpecialistId,
    *,
    name: str,
    domain: str,
    personality: str,
    expertise: list[str],
    requires: SnapshotSection | None = None,
) -> Callable[[Analyzer], Analyzer]:
    """Function decorator that adds a skill specialist to the registry.

    ``requires`` names the snapshot sub-record the specialist needs; it is
    skipped when that record is absent.
    """

    def decorator(fn: Analyzer) -> Analyzer:
        specialist = Specialist(
            id=specialist_id,
            name=name,
            kind="skill",
            domain=domain,
            personality=personality,
            expertise=expertise,
        )
        _register(SKILL_SPECIALISTS, specialist, fn, requires)
        return fn

    return decorator


def specialist_for_market(market: str) -> SpecialistEntry | None:
    """Market specialist for *market*, or None. The caller picks the miss policy."""
    specialist_id = MARKET_TO_SPECIALIST.get(market.lower())
    if specialist_id is None:
        return None
    return MARKET_SPECIALISTS.get(specialist_id)


def stance_from_ev(ev: float, bullish_above: float) -> Direction:
    """Bullish above the domain threshold, bearish when negative, else neutral."""
    if ev > bullish_above:
        return "bullish"
    if ev < 0:
        return "bearish"
    return "neutral"
