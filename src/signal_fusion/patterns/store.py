"""PatternStore — owns the pattern library and its live outcome counters."""

from __future__ import annotations

import threading
from collections.abc import Iterable

import structlog

from signal_fusion.models.pattern import Pattern, PatternMatch
from signal_fusion.models.snapshot import SensorData
from signal_fusion.patterns.library import builtin_patterns
from signal_fusion.patterns.matcher import rank_matches

log = structlog.get_logger("pattern_store")

# Weight kept from the previous avg_return on each new outcome
AVG_RETURN_DECAY = 0.9


class PatternStore:
    """Thread-safe pattern library.

    ``match`` works on a snapshot of the list taken under the lock, so
    readers never see a half-applied update. ``record_outcome`` is the only
    way counters change; it swaps in an updated copy of the pattern.
    """

    def __init__(
        self,
        patterns: Iterable[Pattern] | None = None,
        *,
        include_builtin: bool = True,
    ) -> None:
        self._lock = threading.Lock()
        self._patterns: dict[str, Pattern] = {}
        if include_builtin:
            for pattern in builtin_patterns():
                self._patterns[pattern.id] = pattern
        for pattern in patterns or ():
            self.add_pattern(pattern)

    def add_pattern(self, pattern: Pattern) -> None:
        """Add a custom pattern. Raises ValueError on a duplicate id."""
        with self._lock:
            if pattern.id in self._patterns:
                raise ValueError(f"Duplicate pattern id: {pattern.id!r}")
            self._patterns[pattern.id] = pattern.model_copy(deep=True)

    def patterns(self) -> list[Pattern]:
        with self._lock:
            return list(self._patterns.values())

    def get(self, pattern_id: str) -> Pattern | None:
        with self._lock:
            return self._patterns.get(pattern_id)

    def match(self, snapshot: SensorData) -> list[PatternMatch]:
        """Matches scoring at least 0.3, best first."""
        return rank_matches(snapshot, self.patterns())

    def record_outcome(self, pattern_id: str, won: bool, return_pct: float) -> bool:
        """Count one realised outcome and fold its return into avg_return.

        Returns False (and logs) when the pattern id is unknown.
        """
        with self._lock:
            pattern = self._patterns.get(pattern_id)
            if pattern is None:
                log.warning("pattern_outcome_unknown_pattern", pattern_id=pattern_id)
                return False
            updated = pattern.model_copy(
                update={
                    "historical_wins": pattern.historical_wins + (1 if won else 0),
                    "historical_losses": pattern.historical_losses + (0 if won else 1),
                    "avg_return": (
                        pattern.avg_return * AVG_RETURN_DECAY
                        + return_pct * (1 - AVG_RETURN_DECAY)
                    ),
                }
            )
            self._patterns[pattern_id] = updated

        log.info(
            "pattern_outcome_recorded",
            pattern_id=pattern_id,
            won=won,
            return_pct=round(return_pct, 4),
            wins=updated.historical_wins,
            losses=updated.historical_losses,
        )
        return True
