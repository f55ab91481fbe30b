"""Adversarial validator — attack every candidate signal before trusting it.

Each test is a predicate over (signal, snapshot) returning True (pass),
False (fail) or None (not applicable). Built-in tests register themselves
through ``@adversarial_test``; callers may add more per validator instance.

A signal validates iff no *critical* test fails. Warnings and infos are
reported but never block.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import structlog

from signal_fusion.models.signal import AdversarialTestResult, Severity, Signal
from signal_fusion.models.snapshot import SensorData

log = structlog.get_logger("adversarial_validator")

Predicate = Callable[[Signal, SensorData], bool | None]

MIN_EXIT_LIQUIDITY_USD = 500_000
MAX_HOLDER_CONCENTRATION = 0.6


@dataclass(frozen=True)
class AdversarialTestCase:
    id: str
    name: str
    predicate: Predicate
    severity: Severity
    explanation: str
    description: str = ""


BUILTIN_TESTS: dict[str, AdversarialTestCase] = {}


def adversarial_test(
    test_id: str,
    *,
    name: str,
    severity: Severity,
    explanation: str,
    description: str = "",
) -> Callable[[Predicate], Predicate]:
    """Decorator that adds a predicate to the built-in catalog."""

    def decorator(fn: Predicate) -> Predicate:
        if test_id in BUILTIN_TESTS:
            raise ValueError(f"Duplicate adversarial test id: {test_id!r}")
        BUILTIN_TESTS[test_id] = AdversarialTestCase(
            id=test_id,
            name=name,
            predicate=fn,
            severity=severity,
            explanation=explanation,
            description=description,
        )
        return fn

    return decorator


# ── Built-in catalog ─────────────────────────────────────────────────


@adversarial_test(
    "bull-trap",
    name="Bull Trap Test",
    severity="critical",
    explanation="Breakout without volume or whale support often fails",
    description="Is this breakout genuine or a trap?",
)
def bull_trap(signal: Signal, data: SensorData) -> bool | None:
    if signal.type != "price_action" or signal.direction != "bullish":
        return None
    volume_confirmed = data.price is not None and data.price.volume_24h > 1_000_000
    whale_accumulating = data.whale is not None and data.whale.accumulation_score > 3
    return volume_confirmed or whale_accumulating


@adversarial_test(
    "whale-manipulation",
    name="Whale Manipulation Test",
    severity="warning",
    explanation="Single whale transaction may be manipulation, sustained flow is conviction",
    description="Are whales actually accumulating or distributing?",
)
def whale_manipulation(signal: Signal, data: SensorData) -> bool | None:
    if signal.type != "whale_movement":
        return None
    net_flow = data.whale.net_flow_24h if data.whale is not None else 0.0
    return abs(net_flow) > 50_000


@adversarial_test(
    "sentiment-peak",
    name="Sentiment Peak Test",
    severity="warning",
    explanation="Extreme sentiment often marks local tops and bottoms",
    description="Is sentiment already at extreme levels?",
)
def sentiment_peak(signal: Signal, data: SensorData) -> bool | None:
    if signal.type != "social_sentiment" or data.social is None:
        return None
    return abs(data.social.sentiment_score) < 0.8


@adversarial_test(
    "liquidity-test",
    name="Liquidity Depth Test",
    severity="critical",
    explanation="Low liquidity makes exit difficult, slippage kills edges",
    description="Is there enough liquidity to exit the trade?",
)
def liquidity_test(signal: Signal, data: SensorData) -> bool | None:
    if data.price is None:
        return None
    liquidity = data.price.liquidity or data.price.volume_24h or 0.0
    return liquidity > MIN_EXIT_LIQUIDITY_USD


@adversarial_test(
    "correlation-break",
    name="Correlation Break Test",
    severity="warning",
    explanation="Trading against the macro trend requires stronger signals",
    description="Is the asset diverging from its usual correlations?",
)
def correlation_break(signal: Signal, data: SensorData) -> bool | None:
    if data.macro is None or data.macro.risk_on_off != "risk-off":
        return None
    if signal.direction != "bullish":
        return None
    return signal.strength > 7


@adversarial_test(
    "late-entry",
    name="Late Entry Test",
    severity="info",
    explanation="Entering after large moves reduces expected value",
    description="Has the move already happened?",
)
def late_entry(signal: Signal, data: SensorData) -> bool | None:
    if signal.type != "pattern_match" or data.price is None or not data.price.change_24h:
        return None
    return abs(data.price.change_24h) < 20 or signal.confidence > 0.8


@adversarial_test(
    "rug-pull",
    name="Rug Pull Safety Test",
    severity="critical",
    explanation="High holder concentration increases rug pull risk",
    description="Basic safety checks for on-chain tokens",
)
def rug_pull(signal: Signal, data: SensorData) -> bool | None:
    if data.onchain is None:
        return None
    return data.onchain.holder_concentration < MAX_HOLDER_CONCENTRATION


@adversarial_test(
    "news-lag",
    name="News Lag Test",
    severity="info",
    explanation="Markets often price in news quickly",
    description="Is the news already priced in?",
)
def news_lag(signal: Signal, data: SensorData) -> bool | None:
    if signal.type != "news_catalyst":
        return None
    change = data.price.change_24h if data.price is not None else 0.0
    return abs(change) < 5


# Counter-arguments keyed by test id, then by the signal type raising them
_DEFENSES: dict[str, dict[str, str]] = {
    "bull-trap": {
        "whale_movement": "Whale accumulation confirms this is not a trap",
        "volume_anomaly": "Volume spike validates the breakout",
        "pattern_match": "Historical pattern has a high win rate despite volume",
    },
    "sentiment-peak": {
        "whale_movement": "Smart money is still accumulating despite public euphoria",
        "on_chain": "On-chain metrics show sustainable growth",
    },
    "late-entry": {
        "whale_movement": "Whales are just starting to accumulate",
        "news_catalyst": "News catalyst just announced, first mover advantage",
    },
}


# ── Validator ────────────────────────────────────────────────────────


@dataclass
class ValidationReport:
    passed: bool
    results: list[AdversarialTestResult]
    critical_failures: int = 0
    warnings: int = 0
    infos: int = 0


@dataclass
class ValidationBatch:
    valid: list[Signal] = field(default_factory=list)
    invalid: list[Signal] = field(default_factory=list)
    summary: str = ""


class AdversarialValidator:
    def __init__(self, custom_tests: Iterable[AdversarialTestCase] = ()) -> None:
        self._tests: dict[str, AdversarialTestCase] = dict(BUILTIN_TESTS)
        for test in custom_tests:
            self.add_test(test)

    @property
    def tests(self) -> list[AdversarialTestCase]:
        return list(self._tests.values())

    def add_test(self, test: AdversarialTestCase) -> None:
        if test.id in self._tests:
            raise ValueError(f"Duplicate adversarial test id: {test.id!r}")
        self._tests[test.id] = test

    def _run(
        self, test: AdversarialTestCase, signal: Signal, data: SensorData
    ) -> AdversarialTestResult:
        try:
            outcome = test.predicate(signal, data)
        except Exception as exc:
            # Scoped to this signal and this test: counts as a failure
            log.exception(
                "adversarial_test_error",
                test_id=test.id,
                signal_id=signal.id,
            )
            return AdversarialTestResult(
                test_id=test.id,
                test=test.name,
                result="fail",
                severity=test.severity,
                explanation=f"Test raised {type(exc).__name__}: {exc}",
            )

        if outcome is None:
            return AdversarialTestResult(
                test_id=test.id,
                test=test.name,
                result="not_applicable",
                severity=test.severity,
                explanation="Not applicable",
            )
        return AdversarialTestResult(
            test_id=test.id,
            test=test.name,
            result="pass" if outcome else "fail",
            severity=test.severity,
            explanation="Test passed" if outcome else test.explanation,
        )

    def validate_signal(self, signal: Signal, data: SensorData) -> ValidationReport:
        """Run every test against one signal and tally failures by severity."""
        results = [self._run(test, signal, data) for test in self._tests.values()]
        failed = [r for r in results if r.result == "fail"]
        critical = sum(1 for r in failed if r.severity == "critical")
        return ValidationReport(
            passed=critical == 0,
            results=results,
            critical_failures=critical,
            warnings=sum(1 for r in failed if r.severity == "warning"),
            infos=sum(1 for r in failed if r.severity == "info"),
        )

    def validate_signals(self, signals: Iterable[Signal], data: SensorData) -> ValidationBatch:
        """Validate each signal independently and partition the batch.

        Returned signals are copies stamped with ``metadata.validated`` and
        the per-test results; the inputs are left untouched.
        """
        batch = ValidationBatch()
        for signal in signals:
            report = self.validate_signal(signal, data)
            stamped = signal.model_copy(
                update={
                    "metadata": signal.metadata.model_copy(
                        update={
                            "validated": report.passed,
                            "adversarial_tests": report.results,
                        }
                    )
                }
            )
            if report.passed:
                batch.valid.append(stamped)
            else:
                batch.invalid.append(stamped)
                log.info(
                    "signal_rejected",
                    signal_id=signal.id,
                    signal_type=signal.type,
                    failed_tests=[
                        r.test_id
                        for r in report.results
                        if r.result == "fail" and r.severity == "critical"
                    ],
                )

        total = len(batch.valid) + len(batch.invalid)
        batch.summary = (
            f"Validated {total} signals: {len(batch.valid)} passed, "
            f"{len(batch.invalid)} failed on critical tests"
        )
        return batch

    @staticmethod
    def get_defense(signal: Signal, test_id: str) -> str:
        """Best counter-argument a signal of this type can offer against a failed test."""
        defenses = _DEFENSES.get(test_id)
        if defenses is None:
            return "No specific defense available"
        return defenses.get(
            signal.type, "Signal context suggests this concern may be overstated"
        )
