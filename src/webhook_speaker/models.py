"""Data models for Webhook Speaker."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


DEFAULT_EVENT = "default"


class AmountUnit(str, Enum):
    CENTS = "cents"
    DECIMAL = "decimal"


@dataclass(frozen=True)
class EventSound:
    sound: str
    message: str


@dataclass(frozen=True)
class NotificationData:
    amount: str | None = None
    customer_name: str | None = None
    raw_event: str = DEFAULT_EVENT


def new_notification_id() -> str:
    return uuid.uuid4().hex


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat()


@dataclass(frozen=True)
class Notification:
    sound: str
    message: str
    event_type: str | None = None
    data: NotificationData | None = None
    id: str = field(default_factory=new_notification_id)
    timestamp: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id, "timestamp": self.timestamp}
        if self.event_type is not None:
            d["event_type"] = self.event_type
        d["sound"] = self.sound
        d["message"] = self.message
        if self.data is not None:
            d["data"] = {
                "amount": self.data.amount,
                "customer_name": self.data.customer_name,
                "raw_event": self.data.raw_event,
            }
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Notification:
        data = d.get("data")
        return cls(
            id=d["id"], timestamp=d["timestamp"],
            event_type=d.get("event_type"),
            sound=d["sound"], message=d["message"],
            data=NotificationData(**data) if data else None,
        )
