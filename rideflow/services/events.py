"""Synchronous publish/subscribe notifications between RideFlow services."""

import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

SESSION_CHANGED = "session_changed"
RIDE_CREATED = "ride_created"
RIDE_UPDATED = "ride_updated"
RIDE_COMPLETED = "ride_completed"
RIDE_CANCELLED = "ride_cancelled"
RIDE_DELETED = "ride_deleted"
ANALYTICS_UPDATED = "analytics_updated"

RIDE_EVENTS = (RIDE_CREATED, RIDE_UPDATED, RIDE_COMPLETED, RIDE_CANCELLED, RIDE_DELETED)


class EventBus:
    """
    Observer list keyed by event name.

    Callbacks run in subscription order on the publishing thread. A failing
    callback is logged and the remaining callbacks still run.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event: str, callback: Callable) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def publish(self, event: str, **payload) -> None:
        for callback in list(self._subscribers.get(event, [])):
            try:
                callback(event, **payload)
            except Exception as e:
                logger.error(f"Error in '{event}' subscriber {callback!r}: {str(e)}")
