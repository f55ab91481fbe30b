"""Ledger storage backends — anything that can save and load the entry list."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

import structlog
from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from signal_fusion.db.tables.ledger import LedgerEntryRow
from signal_fusion.models.ledger import LedgerEntry

log = structlog.get_logger("ledger_storage")


class LedgerStorage(ABC):
    """Persistence capability for the trade ledger.

    ``save`` receives the complete entry list and replaces whatever was
    stored before; ``load`` returns it.
    """

    @abstractmethod
    def save(self, entries: Sequence[LedgerEntry]) -> None:
        ...

    @abstractmethod
    def load(self) -> list[LedgerEntry]:
        ...


class MemoryStorage(LedgerStorage):
    """Default backend. Copies on the way in and out so callers can't alias it."""

    def __init__(self) -> None:
        self._data: list[LedgerEntry] = []

    def save(self, entries: Sequence[LedgerEntry]) -> None:
        self._data = [e.model_copy(deep=True) for e in entries]

    def load(self) -> list[LedgerEntry]:
        return [e.model_copy(deep=True) for e in self._data]


class SqlStorage(LedgerStorage):
    """SQLAlchemy backend: one ``ledger_entries`` row per entry, JSON payload."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def save(self, entries: Sequence[LedgerEntry]) -> None:
        ids = [e.id for e in entries]
        with self._session_factory() as session, session.begin():
            for entry in entries:
                session.merge(
                    LedgerEntryRow(
                        id=entry.id,
                        ts=entry.timestamp,
                        asset=entry.asset,
                        market_type=entry.market_type,
                        outcome=entry.outcome,
                        payload=entry.model_dump(mode="json"),
                    )
                )
            session.execute(delete(LedgerEntryRow).where(LedgerEntryRow.id.not_in(ids)))
        log.debug("ledger_saved", entries=len(ids))

    def load(self) -> list[LedgerEntry]:
        with self._session_factory() as session:
            rows = session.scalars(select(LedgerEntryRow).order_by(LedgerEntryRow.ts)).all()
            entries = [LedgerEntry.model_validate(row.payload) for row in rows]
        log.debug("ledger_loaded", entries=len(entries))
        return entries
