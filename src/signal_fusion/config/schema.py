"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from signal_fusion.models.pattern import Pattern


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AnomalyConfig(BaseModel):
    volume_spike_usd: float = 1_000_000
    price_change_pct: float = 10.0
    whale_threshold_usd: float = 100_000
    sentiment_threshold: float = 0.5


class CouncilConfig(BaseModel):
    # Specialists are independent; fan them out on a thread pool when enabled
    parallel: bool = False
    max_workers: int = Field(default=4, ge=1)


class LedgerConfig(BaseModel):
    backend: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite:///signal_fusion.db"


class AppConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    anomaly: AnomalyConfig = Field(default_factory=AnomalyConfig)
    council: CouncilConfig = Field(default_factory=CouncilConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    # Extra patterns appended to the built-in library
    patterns: list[Pattern] = Field(default_factory=list)
