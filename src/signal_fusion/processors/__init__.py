"""Signal processors: anomaly detection, adversarial validation, edge calculation."""

from signal_fusion.processors.adversarial import (
    BUILTIN_TESTS,
    AdversarialTestCase,
    AdversarialValidator,
    ValidationBatch,
    ValidationReport,
    adversarial_test,
)
from signal_fusion.processors.anomaly import AnomalyDetector
from signal_fusion.processors.edge import (
    EdgeCalculator,
    expected_value,
    kelly_fraction,
    risk_reward_ratio,
)

__all__ = [
    "BUILTIN_TESTS",
    "AdversarialTestCase",
    "AdversarialValidator",
    "AnomalyDetector",
    "EdgeCalculator",
    "ValidationBatch",
    "ValidationReport",
    "adversarial_test",
    "expected_value",
    "kelly_fraction",
    "risk_reward_ratio",
]
