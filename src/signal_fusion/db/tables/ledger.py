"""SQLAlchemy ORM model for persisted ledger entries."""

from datetime import datetime

from sqlalchemy import JSON, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from signal_fusion.db.base import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JsonPayload = JSON().with_variant(JSONB, "postgresql")


class LedgerEntryRow(Base):
    __tablename__ = "ledger_entries"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    ts: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    asset: Mapped[str] = mapped_column(Text, nullable=False)
    market_type: Mapped[str] = mapped_column(Text, nullable=False)
    outcome: Mapped[str] = mapped_column(Text, nullable=False, default="open")
    payload: Mapped[dict] = mapped_column(JsonPayload, nullable=False)
