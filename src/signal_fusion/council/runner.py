"""CouncilRunner — fan the applicable specialists out and join their opinions."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import structlog

# Imported for their @market_specialist / @skill_specialist side effects
from signal_fusion.council import market, skills  # noqa: F401
from signal_fusion.council.registry import (
    SKILL_SPECIALISTS,
    CouncilContext,
    SpecialistEntry,
    specialist_for_market,
)
from signal_fusion.config.schema import CouncilConfig
from signal_fusion.models.council import CouncilOpinion
from signal_fusion.models.edge import EdgeCalculation, TradeSetup
from signal_fusion.models.snapshot import SensorData

log = structlog.get_logger("council")


class CouncilRunner:
    """Convene the council for one analysis.

    Specialists are independent, so with ``parallel=True`` they run on a
    thread pool. Either way the result order is fixed: the market opinion
    first, then skill opinions in registration order. A specialist that
    raises aborts the round.
    """

    def __init__(self, parallel: bool = False, max_workers: int = 4) -> None:
        self.parallel = parallel
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config: CouncilConfig) -> CouncilRunner:
        return cls(parallel=config.parallel, max_workers=config.max_workers)

    def select(self, snapshot: SensorData, market: str | None = None) -> list[SpecialistEntry]:
        market = market or snapshot.market_type
        entries: list[SpecialistEntry] = []
        market_entry = specialist_for_market(market)
        if market_entry is None:
            log.info("market_specialist_missing", market=market, asset=snapshot.asset)
        else:
            entries.append(market_entry)
        entries.extend(e for e in SKILL_SPECIALISTS.values() if e.applies_to(snapshot))
        return entries

    def convene(
        self,
        snapshot: SensorData,
        edge: EdgeCalculation,
        trade_setup: TradeSetup,
        market: str | None = None,
    ) -> list[CouncilOpinion]:
        ctx = CouncilContext(snapshot=snapshot, edge=edge, trade_setup=trade_setup)
        entries = self.select(snapshot, market)

        if self.parallel and len(entries) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                opinions = list(pool.map(lambda e: e.opine(ctx), entries))
        else:
            opinions = [e.opine(ctx) for e in entries]

        log.debug(
            "council_convened",
            asset=snapshot.asset,
            specialists=[o.specialist.id for o in opinions],
            parallel=self.parallel,
        )
        return opinions
