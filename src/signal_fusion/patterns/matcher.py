"""Pattern matcher — scores a snapshot against the library and emits pattern signals."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from signal_fusion.models.pattern import Pattern, PatternCondition, PatternMatch
from signal_fusion.models.signal import Signal, SignalEvidence, SignalMetadata
from signal_fusion.models.snapshot import SensorData

if TYPE_CHECKING:
    from signal_fusion.patterns.store import PatternStore

MIN_MATCH_SCORE = 0.3


class _Missing:
    """Marker for a dotted path that does not resolve."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def _field_name(model: BaseModel, key: str) -> str | None:
    fields = type(model).model_fields
    if key in fields:
        return key
    for name, info in fields.items():
        if info.alias == key:
            return name
    return None


def resolve_path(data: Any, path: str) -> Any:
    """Walk a dotted path through models and dicts.

    Accepts field names or their wire aliases (``price.change_24h`` and
    ``price.change24h`` resolve to the same value). Returns ``MISSING``
    instead of raising when any hop is absent or None.
    """
    value = data
    for part in path.split("."):
        if value is None:
            return MISSING
        if isinstance(value, BaseModel):
            name = _field_name(value, part)
            if name is None:
                return MISSING
            value = getattr(value, name)
        elif isinstance(value, dict):
            if part not in value:
                return MISSING
            value = value[part]
        else:
            return MISSING
    return MISSING if value is None else value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def evaluate_condition(value: Any, condition: PatternCondition) -> bool:
    """True when *value* satisfies the condition; absent values never do."""
    if value is MISSING:
        return False

    op = condition.operator
    target = condition.value
    if op in ("gt", "lt", "gte", "lte"):
        if not _is_number(value) or not _is_number(target):
            return False
        if op == "gt":
            return value > target
        if op == "lt":
            return value < target
        if op == "gte":
            return value >= target
        return value <= target
    if op == "eq":
        if isinstance(value, bool) or isinstance(target, bool):
            return isinstance(value, bool) and isinstance(target, bool) and value is target
        return value == target
    if op == "contains":
        return isinstance(value, str) and str(target).lower() in value.lower()
    return False


def score_pattern(snapshot: SensorData, pattern: Pattern) -> PatternMatch:
    """Weighted fraction of the pattern's conditions the snapshot satisfies."""
    total_weight = 0.0
    matched_weight = 0.0
    matched = 0
    for condition in pattern.conditions:
        total_weight += condition.weight
        if evaluate_condition(resolve_path(snapshot, condition.field), condition):
            matched_weight += condition.weight
            matched += 1

    score = matched_weight / total_weight if total_weight > 0 else 0.0
    return PatternMatch(
        pattern=pattern,
        match_score=max(0.0, min(1.0, score)),
        matched_conditions=matched,
        total_conditions=len(pattern.conditions),
    )


def rank_matches(snapshot: SensorData, patterns: list[Pattern]) -> list[PatternMatch]:
    """Score every pattern, drop those under MIN_MATCH_SCORE, best first."""
    matches = [score_pattern(snapshot, p) for p in patterns]
    kept = [m for m in matches if m.match_score >= MIN_MATCH_SCORE]
    kept.sort(key=lambda m: m.match_score, reverse=True)
    return kept


class PatternMatcher:
    """Facade over a PatternStore used by the analysis pipeline."""

    def __init__(self, store: "PatternStore") -> None:
        self.store = store

    def match_patterns(self, snapshot: SensorData) -> list[PatternMatch]:
        return self.store.match(snapshot)

    @staticmethod
    def pattern_to_signal(
        match: PatternMatch,
        asset: str,
        now: datetime | None = None,
    ) -> Signal:
        """Turn a match into a ``pattern_match`` signal.

        Direction follows the pattern's historical win rate; a pattern with no
        recorded outcomes has no directional history and yields a neutral
        signal at half confidence.
        """
        now = now or datetime.now(timezone.utc)
        pattern = match.pattern
        win_rate = pattern.win_rate
        if win_rate is None:
            direction = "neutral"
            win_rate = 0.5
        else:
            direction = "bullish" if win_rate > 0.5 else "bearish"

        stamp = int(now.timestamp() * 1000)
        return Signal(
            id=f"pattern-{pattern.id}-{stamp}-{uuid.uuid4().hex[:9]}",
            asset=asset,
            type="pattern_match",
            direction=direction,
            confidence=match.match_score * win_rate,
            strength=match.match_score * 10,
            timestamp=now,
            expires_at=now + timedelta(hours=pattern.avg_hold_time),
            evidence=SignalEvidence(
                raw_value=match.match_score,
                threshold=MIN_MATCH_SCORE,
                deviation=match.match_score,
                context=(
                    f"{pattern.name}: {match.matched_conditions}/"
                    f"{match.total_conditions} conditions matched"
                ),
            ),
            metadata=SignalMetadata(
                source="pattern_matcher",
                sensor="pattern",
                pattern_id=pattern.id,
            ),
        )

    def update_pattern_result(self, pattern_id: str, won: bool, return_pct: float) -> bool:
        """Feed a realised outcome back into the library. Ledger use only."""
        return self.store.record_outcome(pattern_id, won, return_pct)

