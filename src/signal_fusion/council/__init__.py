"""Trading council: market and skill specialists, runner and final messenger."""

from signal_fusion.council.messenger import FinalMessenger
from signal_fusion.council.registry import (
    MARKET_SPECIALISTS,
    MARKET_TO_SPECIALIST,
    SKILL_SPECIALISTS,
    Assessment,
    CouncilContext,
    SpecialistEntry,
    specialist_for_market,
)
from signal_fusion.council.runner import CouncilRunner

__all__ = [
    "MARKET_SPECIALISTS",
    "MARKET_TO_SPECIALIST",
    "SKILL_SPECIALISTS",
    "Assessment",
    "CouncilContext",
    "CouncilRunner",
    "FinalMessenger",
    "SpecialistEntry",
    "specialist_for_market",
]
