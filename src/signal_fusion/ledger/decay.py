"""Edge decay tracker — how much of a recorded edge is still valid.

Validity falls linearly with age: 1.0 at registration, 0.5 at one
half-life, 0.0 at two half-lives (the trade's max hold time).

  active    age < half-life
  decaying  half-life <= age < 2 x half-life
  expired   age >= 2 x half-life

Alerts fire at most once per record: ``half_life`` at one half-life,
``quarter_life`` at 1.5 half-lives (a quarter of the edge left) and
``expired`` at two.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

import structlog

from signal_fusion.models.edge import EdgeCalculation
from signal_fusion.models.signal import Signal

log = structlog.get_logger("edge_decay")

DecayStatus = Literal["active", "decaying", "expired"]
AlertType = Literal["half_life", "quarter_life", "expired"]

# (alert, age in half-lives at which it fires)
ALERT_THRESHOLDS: tuple[tuple[AlertType, float], ...] = (
    ("half_life", 1.0),
    ("quarter_life", 1.5),
    ("expired", 2.0),
)


@dataclass
class DecayRecord:
    signal_id: str
    asset: str
    initial_edge: float
    current_edge: float
    registered_at: datetime
    last_update: datetime
    half_life: float  # hours
    status: DecayStatus = "active"
    alerts_sent: set[str] = field(default_factory=set)

    def age_hours(self, now: datetime) -> float:
        return max(0.0, (now - self.registered_at).total_seconds() / 3600)

    def validity(self, now: datetime) -> float:
        if self.half_life <= 0:
            return 0.0
        return max(0.0, 1.0 - self.age_hours(now) / (2 * self.half_life))


@dataclass(frozen=True)
class DecayAlert:
    signal_id: str
    asset: str
    alert_type: AlertType
    remaining_edge: float
    message: str


AlertCallback = Callable[[DecayAlert], None]


def _status_for(validity: float) -> DecayStatus:
    if validity <= 0:
        return "expired"
    if validity <= 0.5:
        return "decaying"
    return "active"


def _message(record: DecayRecord, alert_type: AlertType, remaining: float) -> str:
    if alert_type == "half_life":
        return (
            f"{record.asset} signal at half-life. Edge decayed to {remaining:.2f}% "
            f"(was {record.initial_edge:.2f}%)"
        )
    if alert_type == "quarter_life":
        return (
            f"{record.asset} signal at quarter-life. Edge decayed to {remaining:.2f}%. "
            "Consider exiting."
        )
    return f"{record.asset} signal expired. Edge effectively zero."


class EdgeDecayTracker:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, DecayRecord] = {}
        self._callbacks: list[AlertCallback] = []

    def register(
        self,
        signal: Signal,
        edge: EdgeCalculation,
        now: datetime | None = None,
    ) -> DecayRecord:
        now = now or datetime.now(timezone.utc)
        record = DecayRecord(
            signal_id=signal.id,
            asset=signal.asset,
            initial_edge=edge.expected_value,
            current_edge=edge.expected_value,
            registered_at=now,
            last_update=now,
            half_life=edge.half_life,
        )
        with self._lock:
            self._records[signal.id] = record
        log.debug("decay_registered", signal_id=signal.id, half_life=edge.half_life)
        return record

    def on_alert(self, callback: AlertCallback) -> None:
        self._callbacks.append(callback)

    def update_all(self, now: datetime | None = None) -> list[DecayAlert]:
        """Refresh every live record and return the alerts crossed since last time."""
        now = now or datetime.now(timezone.utc)
        alerts: list[DecayAlert] = []
        with self._lock:
            for record in self._records.values():
                if record.status == "expired":
                    continue
                validity = record.validity(now)
                age = record.age_hours(now)
                record.current_edge = record.initial_edge * validity
                record.last_update = now
                record.status = _status_for(validity)

                for alert_type, multiple in ALERT_THRESHOLDS:
                    if alert_type in record.alerts_sent:
                        continue
                    if age < record.half_life * multiple:
                        break
                    record.alerts_sent.add(alert_type)
                    alerts.append(
                        DecayAlert(
                            signal_id=record.signal_id,
                            asset=record.asset,
                            alert_type=alert_type,
                            remaining_edge=record.current_edge,
                            message=_message(record, alert_type, record.current_edge),
                        )
                    )

        for alert in alerts:
            log.info(
                "decay_alert",
                signal_id=alert.signal_id,
                alert_type=alert.alert_type,
                remaining_edge=round(alert.remaining_edge, 4),
            )
            for callback in self._callbacks:
                callback(alert)
        return alerts

    def validity(self, signal_id: str, now: datetime | None = None) -> float | None:
        record = self._records.get(signal_id)
        if record is None:
            return None
        return record.validity(now or datetime.now(timezone.utc))

    def current_edge(self, signal_id: str, now: datetime | None = None) -> float | None:
        record = self._records.get(signal_id)
        if record is None:
            return None
        return record.initial_edge * record.validity(now or datetime.now(timezone.utc))

    def active_edges(self, now: datetime | None = None) -> list[DecayRecord]:
        """Records with validity left at *now*."""
        now = now or datetime.now(timezone.utc)
        with self._lock:
            return [
                r for r in self._records.values()
                if r.status != "expired" and r.validity(now) > 0
            ]

    def cleanup_expired(self, now: datetime | None = None) -> int:
        """Drop expired records and return how many went.

        Without *now* only records update_all has marked expired are dropped;
        with it, any record whose validity has run out at *now* goes too.
        """
        with self._lock:
            expired = [
                sid for sid, r in self._records.items()
                if r.status == "expired" or (now is not None and r.validity(now) <= 0)
            ]
            for sid in expired:
                del self._records[sid]
        return len(expired)
