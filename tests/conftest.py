"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import signal_fusion.db.tables  # noqa: F401
from signal_fusion.db.base import Base
from signal_fusion.models import (
    MacroData,
    NewsData,
    OnChainData,
    PriceData,
    SensorData,
    SocialData,
    WhaleData,
)

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def make_snapshot(
    asset: str = "BTC",
    market_type: str = "crypto",
    *,
    price: float = 60_000.0,
    change_24h: float = 0.0,
    volume_24h: float = 0.0,
    liquidity: float | None = None,
    with_price: bool = True,
    **sections,
) -> SensorData:
    """SensorData with a price record and any extra sub-records passed by name."""
    price_data = None
    if with_price:
        price_data = PriceData(
            symbol=asset,
            price=price,
            volume_24h=volume_24h,
            change_24h=change_24h,
            liquidity=liquidity,
        )
    return SensorData(
        asset=asset,
        market_type=market_type,
        timestamp=NOW,
        price=price_data,
        **sections,
    )


@pytest.fixture
def breakout_snapshot() -> SensorData:
    """Crypto breakout: +8% on $2M volume, mild positive sentiment, whale inflow."""
    return make_snapshot(
        change_24h=8.0,
        volume_24h=2_000_000,
        social=SocialData(sentiment_score=0.4),
        whale=WhaleData(net_flow_24h=80_000),
    )


@pytest.fixture
def rich_snapshot() -> SensorData:
    """Every sub-record present, so every skill specialist runs."""
    return make_snapshot(
        change_24h=12.0,
        volume_24h=3_000_000,
        liquidity=1_500_000,
        social=SocialData(sentiment_score=0.6, trending=True),
        whale=WhaleData(net_flow_24h=250_000, accumulation_score=6),
        news=NewsData(breaking_news=True, catalyst_detected="ETF approval"),
        macro=MacroData(dxy=101.0, vix=14.0, fed_policy="dovish", risk_on_off="risk-on"),
        onchain=OnChainData(
            token_address="0xabc",
            holder_count=5_000,
            holder_concentration=0.3,
            liquidity_locked=True,
            contract_verified=True,
        ),
    )


@pytest.fixture
def db_session_factory():
    """In-memory SQLite session factory with the ledger tables created."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def snapshot_factory():
    return make_snapshot
