"""Pattern library, store and matcher."""

from signal_fusion.patterns.library import builtin_patterns
from signal_fusion.patterns.matcher import (
    MIN_MATCH_SCORE,
    MISSING,
    PatternMatcher,
    evaluate_condition,
    rank_matches,
    resolve_path,
    score_pattern,
)
from signal_fusion.patterns.store import PatternStore

__all__ = [
    "MIN_MATCH_SCORE",
    "MISSING",
    "PatternMatcher",
    "PatternStore",
    "builtin_patterns",
    "evaluate_condition",
    "rank_matches",
    "resolve_path",
    "score_pattern",
]
