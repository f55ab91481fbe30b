"""Tests for the adversarial validator and its built-in catalog."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from signal_fusion.models import (
    MacroData,
    OnChainData,
    Signal,
    SignalEvidence,
    SignalMetadata,
    SocialData,
    WhaleData,
)
from signal_fusion.processors import (
    BUILTIN_TESTS,
    AdversarialTestCase,
    AdversarialValidator,
)

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def _signal(
    signal_type: str = "price_action",
    direction: str = "bullish",
    confidence: float = 0.7,
    strength: float = 6.0,
    sid: str = "sig-1",
) -> Signal:
    return Signal(
        id=sid,
        asset="BTC",
        type=signal_type,
        direction=direction,
        confidence=confidence,
        strength=strength,
        timestamp=NOW,
        expires_at=NOW + timedelta(hours=12),
        evidence=SignalEvidence(raw_value=1, threshold=1, deviation=1, context="test"),
        metadata=SignalMetadata(source="test", sensor="test"),
    )


def _result(report, test_id: str) -> str:
    return next(r.result for r in report.results if r.test_id == test_id)


class TestCatalog:
    def test_builtin_ids_and_severities(self):
        assert {tid: t.severity for tid, t in BUILTIN_TESTS.items()} == {
            "bull-trap": "critical",
            "whale-manipulation": "warning",
            "sentiment-peak": "warning",
            "liquidity-test": "critical",
            "correlation-break": "warning",
            "late-entry": "info",
            "rug-pull": "critical",
            "news-lag": "info",
        }


class TestValidateSignal:
    def test_breakout_passes_bull_trap(self, breakout_snapshot):
        report = AdversarialValidator().validate_signal(_signal(), breakout_snapshot)
        assert _result(report, "bull-trap") == "pass"
        assert report.passed is True
        assert report.critical_failures == 0

    def test_unconfirmed_breakout_is_a_trap(self, snapshot_factory):
        snap = snapshot_factory(change_24h=12, volume_24h=200_000, liquidity=900_000)
        report = AdversarialValidator().validate_signal(_signal(), snap)
        assert _result(report, "bull-trap") == "fail"
        assert report.passed is False

    def test_whale_accumulation_rescues_breakout(self, snapshot_factory):
        snap = snapshot_factory(
            volume_24h=200_000, liquidity=900_000, whale=WhaleData(accumulation_score=4)
        )
        report = AdversarialValidator().validate_signal(_signal(), snap)
        assert _result(report, "bull-trap") == "pass"

    def test_bull_trap_not_applicable_to_other_types(self, breakout_snapshot):
        report = AdversarialValidator().validate_signal(
            _signal("social_sentiment"), breakout_snapshot
        )
        assert _result(report, "bull-trap") == "not_applicable"

    def test_rug_pull_fails_on_concentration(self, breakout_snapshot):
        snap = breakout_snapshot.model_copy(
            update={"onchain": OnChainData(token_address="0x1", holder_concentration=0.75)}
        )
        report = AdversarialValidator().validate_signal(
            _signal(confidence=1.0, strength=10), snap
        )
        assert _result(report, "rug-pull") == "fail"
        assert report.passed is False
        assert report.critical_failures == 1

    def test_rug_pull_not_applicable_without_onchain(self, breakout_snapshot):
        report = AdversarialValidator().validate_signal(_signal(), breakout_snapshot)
        assert _result(report, "rug-pull") == "not_applicable"

    def test_thin_liquidity_is_critical(self, snapshot_factory):
        snap = snapshot_factory(volume_24h=100_000)
        report = AdversarialValidator().validate_signal(_signal("volume_anomaly"), snap)
        assert _result(report, "liquidity-test") == "fail"
        assert report.passed is False

    def test_warnings_do_not_block(self, snapshot_factory):
        snap = snapshot_factory(
            volume_24h=2_000_000,
            social=SocialData(sentiment_score=0.95),
            macro=MacroData(dxy=100, vix=20, risk_on_off="risk-off"),
        )
        report = AdversarialValidator().validate_signal(
            _signal("social_sentiment", strength=5), snap
        )
        assert _result(report, "sentiment-peak") == "fail"
        assert _result(report, "correlation-break") == "fail"
        assert report.warnings == 2
        assert report.passed is True

    def test_late_entry_is_info(self, snapshot_factory):
        snap = snapshot_factory(change_24h=25, volume_24h=2_000_000)
        report = AdversarialValidator().validate_signal(
            _signal("pattern_match", confidence=0.5), snap
        )
        assert _result(report, "late-entry") == "fail"
        assert report.infos == 1
        assert report.passed is True

    def test_whale_manipulation(self, snapshot_factory):
        snap = snapshot_factory(volume_24h=2_000_000, whale=WhaleData(net_flow_24h=20_000))
        report = AdversarialValidator().validate_signal(_signal("whale_movement"), snap)
        assert _result(report, "whale-manipulation") == "fail"
        assert report.passed is True


class TestValidateSignals:
    def test_partitions_and_stamps_copies(self, breakout_snapshot):
        snap = breakout_snapshot.model_copy(
            update={"onchain": OnChainData(token_address="0x1", holder_concentration=0.75)}
        )
        original = _signal(sid="a")
        batch = AdversarialValidator().validate_signals([original], snap)
        assert batch.valid == []
        [stamped] = batch.invalid
        assert stamped.metadata.validated is False
        assert len(stamped.metadata.adversarial_tests) == len(BUILTIN_TESTS)
        # input untouched
        assert original.metadata.adversarial_tests == []

    def test_valid_signal_stamped_true(self, breakout_snapshot):
        batch = AdversarialValidator().validate_signals([_signal()], breakout_snapshot)
        assert [s.metadata.validated for s in batch.valid] == [True]
        assert "1 passed" in batch.summary

    def test_failure_is_signal_scoped(self, snapshot_factory):
        snap = snapshot_factory(change_24h=12, volume_24h=600_000)
        trap = _signal("price_action", sid="trap")
        fine = _signal("volume_anomaly", sid="fine")
        batch = AdversarialValidator().validate_signals([trap, fine], snap)
        assert [s.id for s in batch.invalid] == ["trap"]
        assert [s.id for s in batch.valid] == ["fine"]

    def test_raising_predicate_fails_only_that_signal(self, breakout_snapshot):
        def explode_on_b(signal, data):
            if signal.id == "b":
                raise RuntimeError("boom")
            return True

        validator = AdversarialValidator(
            [
                AdversarialTestCase(
                    id="fragile",
                    name="Fragile",
                    predicate=explode_on_b,
                    severity="critical",
                    explanation="Fragile test failed",
                )
            ]
        )
        batch = validator.validate_signals(
            [_signal(sid="a"), _signal(sid="b")], breakout_snapshot
        )
        assert [s.id for s in batch.valid] == ["a"]
        [bad] = batch.invalid
        fragile = next(r for r in bad.metadata.adversarial_tests if r.test_id == "fragile")
        assert fragile.result == "fail"
        assert "boom" in fragile.explanation


class TestCustomTests:
    def _case(self, test_id: str = "always-fail", severity: str = "critical"):
        return AdversarialTestCase(
            id=test_id,
            name="Always Fail",
            predicate=lambda s, d: False,
            severity=severity,
            explanation="Nope",
        )

    def test_add_test(self, breakout_snapshot):
        validator = AdversarialValidator()
        validator.add_test(self._case())
        assert validator.validate_signal(_signal(), breakout_snapshot).passed is False

    def test_custom_info_test_does_not_block(self, breakout_snapshot):
        validator = AdversarialValidator([self._case(severity="info")])
        assert validator.validate_signal(_signal(), breakout_snapshot).passed is True

    def test_duplicate_id_rejected(self):
        validator = AdversarialValidator()
        with pytest.raises(ValueError, match="bull-trap"):
            validator.add_test(self._case("bull-trap"))

    def test_custom_tests_do_not_leak_between_validators(self):
        AdversarialValidator([self._case("local-only")])
        assert "local-only" not in BUILTIN_TESTS
        assert "local-only" not in {t.id for t in AdversarialValidator().tests}


class TestGetDefense:
    def test_known_defense(self):
        defense = AdversarialValidator.get_defense(_signal("whale_movement"), "bull-trap")
        assert defense == "Whale accumulation confirms this is not a trap"

    def test_generic_defense_for_test(self):
        defense = AdversarialValidator.get_defense(_signal("macro_correlation"), "late-entry")
        assert "overstated" in defense

    def test_no_defense(self):
        assert (
            AdversarialValidator.get_defense(_signal(), "rug-pull")
            == "No specific defense available"
        )
