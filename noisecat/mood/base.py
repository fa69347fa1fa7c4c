"""Mood states, their display descriptors, and per-frame readings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Mood(Enum):
    SLEEPING = 0
    CALM = 1
    ANXIOUS = 2
    IRRITATED = 3
    PANICKED = 4


@dataclass(frozen=True)
class MoodDescriptor:
    """What the presentation layer needs to draw a mood."""
    mood: Mood
    image: str        # asset file name under the cats directory
    text: str         # speech-bubble caption
    css_class: str    # background style class
    shake: bool = False


@dataclass(frozen=True)
class MoodReading:
    stress: float
    mood: Mood

    def __repr__(self) -> str:
        return f"MoodReading({self.mood.name}, stress={self.stress:.2f})"


MOOD_DESCRIPTORS: dict[Mood, MoodDescriptor] = {
    Mood.SLEEPING: MoodDescriptor(Mood.SLEEPING, "sleep.png", "Zzz...", "state-sleep"),
    Mood.CALM: MoodDescriptor(Mood.CALM, "calm.png", "Meow", "state-calm"),
    Mood.ANXIOUS: MoodDescriptor(Mood.ANXIOUS, "anxious.png", "O_O", "state-anxious"),
    Mood.IRRITATED: MoodDescriptor(
        Mood.IRRITATED, "irritated.png", "Grrr!", "state-irritated", shake=True
    ),
    Mood.PANICKED: MoodDescriptor(
        Mood.PANICKED, "panic.png", "AAAAH!!!", "state-panic", shake=True
    ),
}

# Highest band first; classification walks this order.
MOODS_DESCENDING = [Mood.PANICKED, Mood.IRRITATED, Mood.ANXIOUS, Mood.CALM]
