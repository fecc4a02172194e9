"""
Event publication shared by the registry and the gradebook.
"""

import threading
from typing import Any, Dict, List

from ..core.entities import EnrollmentEvent
from ..core.enums import EventType
from ..core.interfaces import EventHandler
from ..logging import get_logger

logger = get_logger("events")


class EventPublisher:
    """Holds event handlers and delivers events to them.

    Services build events while holding their own lock and deliver them
    afterwards, so handlers never run under a service lock.
    """

    def __init__(self):
        self._event_handlers: List[EventHandler] = []
        self._handlers_lock = threading.Lock()

    def add_event_handler(self, handler: EventHandler) -> None:
        """Add an event handler."""
        with self._handlers_lock:
            self._event_handlers.append(handler)

    @property
    def handler_count(self) -> int:
        with self._handlers_lock:
            return len(self._event_handlers)

    def _build_event(self, event_type: EventType, event_data: Dict[str, Any]) -> EnrollmentEvent:
        return EnrollmentEvent(
            event_type=event_type,
            stream_id=f"{event_type.value}_{event_data.get('course_code') or 'unknown'}",
            event_data=event_data
        )

    def _publish(self, event: EnrollmentEvent) -> None:
        """Deliver an event to every handler that accepts its type."""
        with self._handlers_lock:
            handlers = list(self._event_handlers)

        for handler in handlers:
            if handler.can_handle(event.event_type.value):
                try:
                    handler.handle_event(event)
                except Exception:
                    logger.exception("Error in event handler %s", handler.__class__.__name__)
