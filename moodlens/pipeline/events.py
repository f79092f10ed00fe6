from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

MOOD_CLASSIFIED = "mood.classified"
MOOD_RECORDED = "mood.recorded"

Handler = Callable[["Event"], None]


@dataclass(slots=True)
class Event:
    name: str
    payload: dict[str, Any]
    timestamp: str


class EventBus:
    """Synchronous in-process publish/subscribe."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: Handler) -> None:
        self._subscribers[event_name].append(handler)

    def publish(self, event_name: str, payload: dict[str, Any]) -> Event:
        event = Event(
            name=event_name,
            payload=payload,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        for handler in list(self._subscribers.get(event_name, [])):
            handler(event)
        return event
