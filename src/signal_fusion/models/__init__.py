"""Pydantic domain models."""

from signal_fusion.models.council import Consensus, CouncilOpinion, Specialist
from signal_fusion.models.edge import (
    EdgeCalculation,
    EntryZone,
    PositionSizing,
    Scenario,
    Scenarios,
    Target,
    TradeSetup,
)
from signal_fusion.models.ledger import LedgerEntry, PerformanceStats, SignalTypeStats
from signal_fusion.models.output import (
    CouncilRound,
    FinalVerdict,
    OutputMetadata,
    SignalFusionOutput,
    SignalSwarm,
    TradingCouncil,
)
from signal_fusion.models.pattern import Pattern, PatternCondition, PatternMatch
from signal_fusion.models.signal import (
    AdversarialTestResult,
    Signal,
    SignalEvidence,
    SignalMetadata,
)
from signal_fusion.models.snapshot import (
    Holder,
    MacroData,
    Mention,
    NewsArticle,
    NewsData,
    OnChainData,
    OrderbookData,
    PriceData,
    SensorData,
    SocialData,
    Transaction,
    WhaleData,
    WhaleMovement,
)

__all__ = [
    "AdversarialTestResult",
    "Consensus",
    "CouncilOpinion",
    "CouncilRound",
    "EdgeCalculation",
    "EntryZone",
    "FinalVerdict",
    "Holder",
    "LedgerEntry",
    "MacroData",
    "Mention",
    "NewsArticle",
    "NewsData",
    "OnChainData",
    "OrderbookData",
    "OutputMetadata",
    "Pattern",
    "PatternCondition",
    "PatternMatch",
    "PerformanceStats",
    "PositionSizing",
    "PriceData",
    "Scenario",
    "Scenarios",
    "SensorData",
    "Signal",
    "SignalEvidence",
    "SignalFusionOutput",
    "SignalMetadata",
    "SignalSwarm",
    "SignalTypeStats",
    "SocialData",
    "Specialist",
    "Target",
    "TradeSetup",
    "TradingCouncil",
    "Transaction",
    "WhaleData",
    "WhaleMovement",
]
