"""Change notifications for habitlog stores.

Stores publish an event after every persisted mutation. Anything that wants to
react (a UI, a cache, a test) subscribes; the computations in the core never
depend on it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

HABIT_ADDED = "habit_added"
HABIT_UPDATED = "habit_updated"
HABIT_DELETED = "habit_deleted"
ENTRY_CHANGED = "entry_changed"
ENTRIES_DELETED = "entries_deleted"


@dataclass
class Event:
    """A single change notification."""
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


Subscriber = Callable[[Event], None]


class EventBus:
    """Synchronous publish/subscribe channel."""

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, name: str, **payload: Any) -> Event:
        event = Event(name, payload)
        logger.debug("Event %s %s", name, payload)
        for callback in list(self._subscribers):
            callback(event)
        return event
