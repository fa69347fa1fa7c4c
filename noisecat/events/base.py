"""Application event types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..mood.base import MoodDescriptor
    from ..mood.settings import Settings


class EventType(Enum):
    MOOD_CHANGED = auto()
    SETTINGS_CHANGED = auto()
    MICROPHONE_DENIED = auto()


@dataclass
class Event:
    type: EventType
    timestamp: float
    value: float = 0.0        # stress at the time of the event, where relevant
    metadata: dict = field(default_factory=dict)

    @property
    def descriptor(self) -> MoodDescriptor | None:
        return self.metadata.get("descriptor")

    @property
    def settings(self) -> Settings | None:
        return self.metadata.get("settings")

    def __repr__(self) -> str:
        return f"Event({self.type.name}, value={self.value:.1f})"
