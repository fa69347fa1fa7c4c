"""TerminalView — draws the cat's mood and the meters on a text console."""

from __future__ import annotations

import sys
from typing import TextIO

from ..events.base import Event, EventType
from ..mood.base import MoodDescriptor, MoodReading

MICROPHONE_NOTICE = "Could not access microphone."


def meter_bar(percent: float, width: int = 30) -> str:
    """``[#####-----]`` style bar for a 0-100 value."""
    percent = min(100.0, max(0.0, percent))
    filled = int(round(percent / 100.0 * width))
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def loudness_percent(loudness: float, boost: float = 3.0) -> float:
    """Loudness meter fill; quiet rooms barely register without the boost."""
    return min(100.0, max(0.0, loudness / 255.0 * 100.0 * boost))


class TerminalView:
    """Presentation layer for a terminal.

    Mood changes print a caption line; every frame redraws a single status
    line in place. Subscribe :meth:`handle_event` to an ``EventBus``.
    """

    def __init__(
        self,
        out: TextIO | None = None,
        meter_width: int = 30,
        meter_boost: float = 3.0,
        assets_dir: str = "assets/cats",
    ):
        self.out = out or sys.stdout
        self.meter_width = meter_width
        self.meter_boost = meter_boost
        self.assets_dir = assets_dir
        self.current: MoodDescriptor | None = None
        self._notice_shown = False

    def show_mood(self, descriptor: MoodDescriptor) -> None:
        self.current = descriptor
        shake = "  ~shaking~" if descriptor.shake else ""
        print(
            f"\n  {descriptor.text:<10} {descriptor.mood.name:<9} "
            f"[{descriptor.css_class}] {self.assets_dir}/{descriptor.image}{shake}",
            file=self.out,
        )

    def render(
        self,
        reading: MoodReading,
        loudness: float,
        band: tuple[float, float] | None = None,
    ) -> None:
        stress = meter_bar(reading.stress, self.meter_width)
        level = meter_bar(loudness_percent(loudness, self.meter_boost), self.meter_width)
        span = f" {band[0]:g}-{band[1]:g}" if band else ""
        print(
            f"  stress {stress} {reading.stress:5.1f}{span}  "
            f"volume {level} {round(loudness):3d}",
            end="\r",
            file=self.out,
        )

    def show_notice(self, message: str) -> None:
        print(f"\n  ! {message}", file=self.out)

    def handle_event(self, event: Event) -> None:
        if event.type == EventType.MOOD_CHANGED:
            self.show_mood(event.descriptor)
        elif event.type == EventType.MICROPHONE_DENIED:
            if not self._notice_shown:
                self._notice_shown = True
                self.show_notice(MICROPHONE_NOTICE)
        elif event.type == EventType.SETTINGS_CHANGED:
            s = event.settings
            thresholds = ", ".join(f"{t:g}" for t in s.thresholds.as_tuple())
            print(
                f"\n  settings: sensitivity={s.sensitivity:.1f} "
                f"transition={s.transition_duration:.1f}s thresholds=({thresholds})",
                file=self.out,
            )
