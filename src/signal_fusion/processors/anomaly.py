"""Anomaly detector — ad-hoc signals from outliers in a single snapshot.

Four independent checks, each emitting at most one signal:

  volume spike       24h volume above ``volume_spike_usd``
  price move         |24h change| at or above ``price_change_pct``
  whale activity     at least one large transaction >= ``whale_threshold_usd``
  sentiment extreme  |sentiment score| at or above ``sentiment_threshold``
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import structlog

from signal_fusion.config.schema import AnomalyConfig
from signal_fusion.models.signal import Signal, SignalEvidence, SignalMetadata
from signal_fusion.models.snapshot import SensorData

log = structlog.get_logger("anomaly_detector")


def _signal_id(kind: str, asset: str, now: datetime) -> str:
    return f"{kind}-{asset}-{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:9]}"


class AnomalyDetector:
    def __init__(self, config: AnomalyConfig | None = None) -> None:
        self.config = config or AnomalyConfig()

    def detect_anomalies(self, data: SensorData, now: datetime | None = None) -> list[Signal]:
        now = now or datetime.now(timezone.utc)
        signals = [
            s
            for s in (
                self._volume(data, now),
                self._price(data, now),
                self._whale(data, now),
                self._sentiment(data, now),
            )
            if s is not None
        ]
        log.debug(
            "anomalies_detected",
            asset=data.asset,
            count=len(signals),
            types=[s.type for s in signals],
        )
        return signals

    def _volume(self, data: SensorData, now: datetime) -> Signal | None:
        if data.price is None or not data.price.volume_24h:
            return None
        volume = data.price.volume_24h
        threshold = self.config.volume_spike_usd
        if volume <= threshold:
            return None

        return Signal(
            id=_signal_id("volume", data.asset, now),
            asset=data.asset,
            type="volume_anomaly",
            direction="bullish" if data.price.change_24h > 0 else "neutral",
            confidence=0.7,
            strength=6,
            timestamp=now,
            expires_at=now + timedelta(hours=24),
            evidence=SignalEvidence(
                raw_value=volume,
                threshold=threshold,
                deviation=volume / threshold,
                context=f"Volume spike detected: ${volume:,.0f}",
            ),
            metadata=SignalMetadata(source="price_feed", sensor="volume"),
        )

    def _price(self, data: SensorData, now: datetime) -> Signal | None:
        if data.price is None or not data.price.change_24h:
            return None
        change = data.price.change_24h
        magnitude = abs(change)
        threshold = self.config.price_change_pct
        if magnitude < threshold:
            return None

        return Signal(
            id=_signal_id("price", data.asset, now),
            asset=data.asset,
            type="price_action",
            direction="bullish" if change > 0 else "bearish",
            confidence=min(0.9, magnitude / 20),
            strength=min(10.0, magnitude / 2),
            timestamp=now,
            expires_at=now + timedelta(hours=12),
            evidence=SignalEvidence(
                raw_value=change,
                threshold=threshold,
                deviation=magnitude / threshold,
                context=f"Price {'up' if change > 0 else 'down'} {magnitude:.2f}% in 24h",
            ),
            metadata=SignalMetadata(source="price_feed", sensor="price"),
        )

    def _whale(self, data: SensorData, now: datetime) -> Signal | None:
        if data.whale is None or not data.whale.large_transactions:
            return None
        threshold = self.config.whale_threshold_usd
        large = [tx for tx in data.whale.large_transactions if tx.value_usd >= threshold]
        if not large:
            return None

        net_flow = data.whale.net_flow_24h
        return Signal(
            id=_signal_id("whale", data.asset, now),
            asset=data.asset,
            type="whale_movement",
            direction="bullish" if net_flow > 0 else "bearish",
            confidence=0.75,
            strength=min(10, len(large) * 2),
            timestamp=now,
            expires_at=now + timedelta(hours=6),
            evidence=SignalEvidence(
                raw_value=net_flow,
                threshold=threshold,
                deviation=abs(net_flow) / threshold,
                context=f"{len(large)} whale transactions, net flow ${net_flow:,.0f}",
            ),
            metadata=SignalMetadata(source="on_chain", sensor="whale"),
        )

    def _sentiment(self, data: SensorData, now: datetime) -> Signal | None:
        if data.social is None or not data.social.sentiment_score:
            return None
        score = data.social.sentiment_score
        threshold = self.config.sentiment_threshold
        if abs(score) < threshold:
            return None

        return Signal(
            id=_signal_id("sentiment", data.asset, now),
            asset=data.asset,
            type="social_sentiment",
            direction="bullish" if score > 0 else "bearish",
            confidence=abs(score),
            strength=min(10.0, abs(score) * 10),
            timestamp=now,
            expires_at=now + timedelta(hours=8),
            evidence=SignalEvidence(
                raw_value=score,
                threshold=threshold,
                deviation=abs(score) / threshold,
                context=(
                    f"Social sentiment {'positive' if score > 0 else 'negative'} "
                    f"({score * 100:.0f}%)"
                ),
            ),
            metadata=SignalMetadata(source="social", sensor="sentiment"),
        )
