"""EventBus — synchronous pub/sub between the frame loop and its listeners."""

from __future__ import annotations

import time
from collections import defaultdict
from collections.abc import Callable
from typing import TYPE_CHECKING

from .base import Event, EventType

if TYPE_CHECKING:
    from ..mood.base import MoodDescriptor
    from ..mood.settings import Settings

EventHandler = Callable[[Event], None]


class EventBus:
    """Dispatches app events on the caller's thread, stamped with ``clock``.

    The ``mood_changed``/``settings_changed``/``microphone_denied`` helpers
    build the event with its payload and publish it in one call.

    Usage::

        bus = EventBus()
        bus.subscribe(EventType.MOOD_CHANGED, lambda e: print(e.descriptor.text))
        bus.mood_changed(descriptor, stress=12.0)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._handlers: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: EventType | None, handler: EventHandler) -> None:
        """Subscribe to one event type, or to every event with ``None``."""
        self._handlers[event_type].append(handler)

    def publish(self, event: Event) -> None:
        # type-specific handlers run before wildcard ones
        for key in (event.type, None):
            for handler in self._handlers.get(key, ()):
                handler(event)

    def _emit(self, event_type: EventType, value: float = 0.0, **metadata) -> Event:
        event = Event(event_type, timestamp=self.clock(), value=value, metadata=metadata)
        self.publish(event)
        return event

    def mood_changed(self, descriptor: MoodDescriptor, stress: float) -> Event:
        return self._emit(EventType.MOOD_CHANGED, stress, descriptor=descriptor)

    def settings_changed(self, settings: Settings, stress: float = 0.0) -> Event:
        return self._emit(EventType.SETTINGS_CHANGED, stress, settings=settings)

    def microphone_denied(self, error: str) -> Event:
        return self._emit(EventType.MICROPHONE_DENIED, error=error)
