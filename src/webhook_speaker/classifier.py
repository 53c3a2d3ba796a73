"""Webhook payload classification into speaker notifications."""

from __future__ import annotations

from typing import Any, Mapping

from webhook_speaker.amounts import extract_amount, extract_customer_name
from webhook_speaker.events import EVENT_SOUNDS, lookup
from webhook_speaker.models import DEFAULT_EVENT, EventSound, Notification, NotificationData

EVENT_KEY_FIELDS = ("event_type", "type", "topic", "event")
EVENT_QUERY_PARAM = "event"
MESSAGE_OVERRIDES = ("message", "custom_message")
SOUND_OVERRIDES = ("sound", "custom_sound")

SINGLE_SOUND = "new-order.mp3"
SINGLE_MESSAGE = "You have a new order"


def _first_text(source: Mapping[str, Any] | None, fields: tuple[str, ...]) -> str | None:
    if not source:
        return None
    for name in fields:
        value = source.get(name)
        if isinstance(value, str) and value:
            return value
    return None


def _first_key(source: Mapping[str, Any], fields: tuple[str, ...]) -> str | None:
    # Numeric event ids count as keys; they never match the table.
    for name in fields:
        value = source.get(name)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value:
            return str(value)
    return None


def resolve_event_key(body: Mapping[str, Any], query: Mapping[str, Any] | None = None) -> str:
    """First non-empty of body event_type/type/topic/event, then ?event=, else default."""
    return (
        _first_key(body, EVENT_KEY_FIELDS)
        or _first_text(query, (EVENT_QUERY_PARAM,))
        or DEFAULT_EVENT
    )


class Classifier:
    """Maps a webhook body to a notification through the event table."""

    def __init__(self, table: Mapping[str, EventSound] | None = None, divide_all_by_100: bool = False):
        self._table = dict(table) if table is not None else dict(EVENT_SOUNDS)
        self._divide_all = divide_all_by_100

    @property
    def table(self) -> dict[str, EventSound]:
        return self._table

    def classify(self, body: Mapping[str, Any], query: Mapping[str, Any] | None = None) -> Notification:
        raw_event = resolve_event_key(body, query)
        _, entry = lookup(self._table, raw_event)
        body = dict(body)
        return Notification(
            event_type=raw_event,
            sound=_first_text(body, SOUND_OVERRIDES) or entry.sound,
            message=_first_text(body, MESSAGE_OVERRIDES) or entry.message,
            data=NotificationData(
                amount=extract_amount(body, self._divide_all),
                customer_name=extract_customer_name(body),
                raw_event=raw_event,
            ),
        )


class SingleMessageClassifier:
    """Every webhook produces the same sound and message."""

    def __init__(self, sound: str = SINGLE_SOUND, message: str = SINGLE_MESSAGE):
        self._entry = EventSound(sound, message)

    @property
    def table(self) -> dict[str, EventSound]:
        return {DEFAULT_EVENT: self._entry}

    def classify(self, body: Mapping[str, Any], query: Mapping[str, Any] | None = None) -> Notification:
        return Notification(sound=self._entry.sound, message=self._entry.message)
