"""Mutation notifications published by the ledger."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, NamedTuple

__all__ = [
    "ALL_EVENTS",
    "CATEGORY_ADDED",
    "CATEGORY_DELETED",
    "CURRENCY_CHANGED",
    "Event",
    "EventBus",
    "LEDGER_CLEARED",
    "TRANSACTION_ADDED",
    "TRANSACTION_DELETED",
]

logger = logging.getLogger(__name__)

TRANSACTION_ADDED = "transaction_added"
TRANSACTION_DELETED = "transaction_deleted"
CATEGORY_ADDED = "category_added"
CATEGORY_DELETED = "category_deleted"
CURRENCY_CHANGED = "currency_changed"
LEDGER_CLEARED = "ledger_cleared"

# Subscribing under this name receives every event.
ALL_EVENTS = "*"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event], Any]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def publish(self, name: str, payload: dict) -> List[Any]:
        handlers = self._subscribers.get(name, []) + self._subscribers.get(ALL_EVENTS, [])
        if not handlers:
            return []

        event = Event(
            name=name,
            ts=datetime.now(timezone.utc).isoformat(timespec="seconds"),
            payload=payload,
        )
        results = []
        for handler in handlers:
            # The change is already persisted; a failing subscriber is only logged.
            try:
                results.append(handler(event))
            except Exception:
                logger.exception("Handler %r failed for event %s", handler, name)
        return results
