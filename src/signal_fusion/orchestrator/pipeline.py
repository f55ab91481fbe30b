"""SignalFusion — run one snapshot through the whole analytical pipeline.

  anomalies + top pattern signal
    -> adversarial validation
    -> edge and trade plan
    -> council
    -> final messenger
    -> ledger record + decay tracking
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

import structlog

from signal_fusion.config.schema import AppConfig
from signal_fusion.council.messenger import FinalMessenger
from signal_fusion.council.runner import CouncilRunner
from signal_fusion.db.engine import get_session_factory, init_engine
from signal_fusion.ledger.decay import EdgeDecayTracker
from signal_fusion.ledger.ledger import TradeLedger
from signal_fusion.ledger.storage import LedgerStorage, MemoryStorage, SqlStorage
from signal_fusion.logging.setup import setup_logging
from signal_fusion.models.ledger import PerformanceStats
from signal_fusion.models.output import SignalFusionOutput
from signal_fusion.models.signal import Signal
from signal_fusion.models.snapshot import SensorData
from signal_fusion.patterns.matcher import PatternMatcher
from signal_fusion.patterns.store import PatternStore
from signal_fusion.processors.adversarial import AdversarialValidator
from signal_fusion.processors.anomaly import AnomalyDetector
from signal_fusion.processors.edge import EdgeCalculator

log = structlog.get_logger("pipeline")


class MissingPriceDataError(ValueError):
    """The snapshot has no price record, so no trade can be planned."""


def _ledger_candidate(valid: list[Signal]) -> Signal | None:
    """The validated pattern signal if there is one, else the first valid signal."""
    for signal in valid:
        if signal.type == "pattern_match":
            return signal
    return valid[0] if valid else None


class SignalFusion:
    def __init__(
        self,
        config: AppConfig | None = None,
        pattern_store: PatternStore | None = None,
        ledger: TradeLedger | None = None,
        decay_tracker: EdgeDecayTracker | None = None,
        validator: AdversarialValidator | None = None,
        council: CouncilRunner | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.pattern_store = pattern_store or PatternStore(self.config.patterns)
        self.ledger = ledger or TradeLedger(pattern_store=self.pattern_store)
        if self.ledger.pattern_store is None:
            self.ledger.pattern_store = self.pattern_store
        self.decay_tracker = decay_tracker or EdgeDecayTracker()
        self.validator = validator or AdversarialValidator()
        self.council = council or CouncilRunner.from_config(self.config.council)

        self.anomaly_detector = AnomalyDetector(self.config.anomaly)
        self.pattern_matcher = PatternMatcher(self.pattern_store)
        self.edge_calculator = EdgeCalculator()
        self.messenger = FinalMessenger()

    @classmethod
    def from_config(cls, config: AppConfig, configure_logging: bool = True) -> SignalFusion:
        """Build the pipeline and its storage backend from loaded config."""
        if configure_logging:
            setup_logging(level=config.logging.level, log_format=config.logging.format)

        storage: LedgerStorage
        if config.ledger.backend == "sql":
            init_engine(config.ledger.database_url)
            storage = SqlStorage(get_session_factory())
        else:
            storage = MemoryStorage()

        pattern_store = PatternStore(config.patterns)
        ledger = TradeLedger(storage, pattern_store=pattern_store)
        ledger.load()
        log.info(
            "pipeline_configured",
            ledger_backend=config.ledger.backend,
            patterns=len(pattern_store.patterns()),
            council_parallel=config.council.parallel,
        )
        return cls(config=config, pattern_store=pattern_store, ledger=ledger)

    def analyze(
        self,
        snapshot: SensorData,
        query: str | None = None,
        now: datetime | None = None,
    ) -> SignalFusionOutput:
        started = time.perf_counter()
        now = now or datetime.now(timezone.utc)
        query = query or f"Analyze {snapshot.asset}"
        if snapshot.price is None:
            raise MissingPriceDataError(f"No price data for {snapshot.asset}")
        price = snapshot.price.price

        self.decay_tracker.update_all(now)
        self.decay_tracker.cleanup_expired(now)

        signals = self.anomaly_detector.detect_anomalies(snapshot, now=now)
        matches = self.pattern_matcher.match_patterns(snapshot)
        top_match = matches[0] if matches else None
        if top_match is not None:
            signals.append(
                self.pattern_matcher.pattern_to_signal(top_match, snapshot.asset, now=now)
            )

        batch = self.validator.validate_signals(signals, snapshot)
        edge = self.edge_calculator.calculate_edge(
            batch.valid, snapshot.market_type, pattern_match=top_match
        )
        trade_setup = self.edge_calculator.construct_trade(
            edge, price, snapshot.asset, snapshot.market_type
        )

        opinions = self.council.convene(snapshot, edge, trade_setup)
        output = self.messenger.synthesize(
            query=query,
            signals=batch.valid,
            edge=edge,
            trade_setup=trade_setup,
            opinions=opinions,
            processing_time_ms=(time.perf_counter() - started) * 1000,
            now=now,
        )

        recorded = _ledger_candidate(batch.valid)
        if recorded is not None:
            self.ledger.record_signal(
                recorded, trade_setup, edge, snapshot.market_type, entry_price=price, now=now
            )
            self.decay_tracker.register(recorded, edge, now=now)

        log.info(
            "analysis_complete",
            asset=snapshot.asset,
            market_type=snapshot.market_type,
            signals=len(signals),
            valid=len(batch.valid),
            pattern=top_match.pattern.id if top_match else None,
            recommendation=output.final_verdict.recommendation,
            expected_value=round(edge.expected_value, 4),
            processing_ms=round(output.metadata.processing_time_ms, 2),
        )
        return output

    def get_stats(self, asset: str | None = None) -> PerformanceStats:
        return self.ledger.get_stats(asset)
