"""Import all table modules so Base.metadata knows about them."""

from signal_fusion.db.tables.ledger import LedgerEntryRow

__all__ = ["LedgerEntryRow"]
