"""Trade ledger, storage backends and edge decay tracking."""

from signal_fusion.ledger.decay import DecayAlert, DecayRecord, EdgeDecayTracker
from signal_fusion.ledger.ledger import (
    EntryNotFoundError,
    OutcomeAlreadyRecordedError,
    TradeLedger,
    realised_return,
)
from signal_fusion.ledger.storage import LedgerStorage, MemoryStorage, SqlStorage

__all__ = [
    "DecayAlert",
    "DecayRecord",
    "EdgeDecayTracker",
    "EntryNotFoundError",
    "LedgerStorage",
    "MemoryStorage",
    "OutcomeAlreadyRecordedError",
    "SqlStorage",
    "TradeLedger",
    "realised_return",
]
