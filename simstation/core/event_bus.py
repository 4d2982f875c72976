"""EventBus — pub/sub between the orchestrator and whoever renders its state."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable

from simstation.core.events import Event, EventType

logger = logging.getLogger(__name__)

Handler = Callable[[Event], None]


class EventBus:
    """Synchronous pub/sub bus; handlers run in the publisher's thread/loop."""

    def __init__(self):
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Handler) -> None:
        try:
            self._handlers[event_type].remove(handler)
        except ValueError:
            pass

    def publish(self, event: Event) -> None:
        """Dispatch to a copy of the handler list; a failing handler does not stop the rest."""
        for handler in list(self._handlers.get(event.type, [])):
            try:
                handler(event)
            except Exception:
                logger.exception("EventBus handler error for %s", event.type)
