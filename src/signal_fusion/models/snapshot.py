"""Sensor snapshot models — one pre-assembled bundle of readings per asset.

Collectors outside this package emit camelCase JSON (``change24h``,
``netFlow24h``); every model here accepts both that spelling and the
snake_case field names.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MarketType = Literal["crypto", "stock", "forex", "commodity", "penny"]


def to_wire_name(field_name: str) -> str:
    """snake_case -> collector camelCase, digit runs untouched (change_24h -> change24h)."""
    head, *rest = field_name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class SensorModel(BaseModel):
    """Base for snapshot records: camelCase aliases, populate by name."""

    model_config = ConfigDict(alias_generator=to_wire_name, populate_by_name=True)


class PriceData(SensorModel):
    symbol: str
    price: float
    volume_24h: float = 0.0
    change_24h: float = 0.0
    market_cap: float | None = None
    liquidity: float | None = None
    fdv: float | None = None
    pe_ratio: float | None = None
    high_52w: float | None = None
    low_52w: float | None = None
    source: str = "unknown"


class Holder(SensorModel):
    address: str
    balance: float
    percentage: float


class Transaction(SensorModel):
    hash: str
    from_address: str = Field(alias="from")
    to_address: str = Field(alias="to")
    amount: float
    value_usd: float
    timestamp: datetime
    type: Literal["buy", "sell", "transfer"]


class OnChainData(SensorModel):
    token_address: str
    holder_count: int = 0
    top_holders: list[Holder] = Field(default_factory=list)
    holder_concentration: float = 0.0  # 0-1, higher = more concentrated
    recent_transactions: list[Transaction] = Field(default_factory=list)
    liquidity_locked: bool | None = None
    contract_verified: bool | None = None


class WhaleMovement(SensorModel):
    address: str
    amount: float
    direction: Literal["in", "out"]
    timestamp: datetime


class WhaleData(SensorModel):
    recent_movements: list[WhaleMovement] = Field(default_factory=list)
    net_flow_24h: float = 0.0  # positive = inflow
    accumulation_score: float = 0.0  # -10 .. +10
    large_transactions: list[Transaction] = Field(default_factory=list)


class OrderbookData(SensorModel):
    bid_depth: float
    ask_depth: float
    spread: float
    buy_pressure: float
    sell_pressure: float
    liquidity_score: float


class Mention(SensorModel):
    source: str
    text: str
    sentiment: float
    engagement: float
    timestamp: datetime


class SocialSources(SensorModel):
    twitter: int = 0
    reddit: int = 0
    news: int = 0


class SocialData(SensorModel):
    sentiment_score: float = 0.0  # -1 .. +1
    volume_24h: float = 0.0
    trending: bool = False
    mentions: list[Mention] = Field(default_factory=list)
    sources: SocialSources = Field(default_factory=SocialSources)


class NewsArticle(SensorModel):
    title: str
    source: str
    url: str
    sentiment: float
    timestamp: datetime


class NewsData(SensorModel):
    articles: list[NewsArticle] = Field(default_factory=list)
    breaking_news: bool = False
    catalyst_detected: str | None = None
    earnings_date: datetime | None = None


class MacroData(SensorModel):
    dxy: float
    vix: float
    spy_change: float = 0.0
    fed_policy: Literal["hawkish", "dovish", "neutral"] = "neutral"
    risk_on_off: Literal["risk-on", "risk-off", "neutral"] = "neutral"


class SensorData(SensorModel):
    """Everything the analytical pipeline knows about one asset at one instant.

    Every namespaced sub-record is optional; a missing one makes the tests and
    specialists that depend on it skip instead of fail.
    """

    asset: str
    market_type: MarketType
    timestamp: datetime
    price: PriceData | None = None
    onchain: OnChainData | None = None
    whale: WhaleData | None = None
    orderbook: OrderbookData | None = None
    social: SocialData | None = None
    news: NewsData | None = None
    macro: MacroData | None = None
