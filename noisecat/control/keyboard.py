"""KeyboardTuner — adjust sensitivity and transition time while the cat runs.

Keys (terminal in cbreak mode, one key per action):

    - / +   sensitivity down / up by 0.1
    [ / ]   transition time down / up by 1 s
    0       back to the configured defaults
    s       print the active settings
    q       stop
"""

from __future__ import annotations

import asyncio
import sys
import termios
import tty
from typing import TextIO

from ..app import NoiseCatApp, default_settings

SENSITIVITY_STEP = 0.1
SENSITIVITY_RANGE = (0.1, 5.0)
TRANSITION_STEP = 1.0         # seconds
TRANSITION_RANGE = (1.0, 10.0)

KEY_HELP = "Keys: -/+ sensitivity  [/] transition  0=defaults  s=show  q=quit"


def _step(value: float, delta: float, bounds: tuple[float, float], digits: int) -> float:
    low, high = bounds
    return round(min(high, max(low, value + delta)), digits)


class KeyboardTuner:
    """Maps single key presses to ``NoiseCatApp.apply_settings`` calls.

    :meth:`attach` registers the stream with the event loop, so keys are
    handled between frames without a reader thread.
    """

    def __init__(self, app: NoiseCatApp, stream: TextIO | None = None):
        self.app = app
        self.stream = stream or sys.stdin
        self._saved_mode: list | None = None
        self._fd: int | None = None

    def handle_key(self, ch: str) -> bool:
        """Apply one key press. Returns False for keys with no binding."""
        settings = self.app.machine.settings
        ch = ch.lower()
        if ch in ("+", "="):
            self.app.apply_settings(
                sensitivity=_step(settings.sensitivity, SENSITIVITY_STEP, SENSITIVITY_RANGE, 1)
            )
        elif ch == "-":
            self.app.apply_settings(
                sensitivity=_step(settings.sensitivity, -SENSITIVITY_STEP, SENSITIVITY_RANGE, 1)
            )
        elif ch == "]":
            self.app.apply_settings(
                transition_duration=_step(
                    settings.transition_duration, TRANSITION_STEP, TRANSITION_RANGE, 0
                )
            )
        elif ch == "[":
            self.app.apply_settings(
                transition_duration=_step(
                    settings.transition_duration, -TRANSITION_STEP, TRANSITION_RANGE, 0
                )
            )
        elif ch == "0":
            defaults = default_settings(self.app.config)
            self.app.apply_settings(
                defaults.sensitivity, defaults.transition_duration, defaults.thresholds
            )
        elif ch == "s":
            self.app.show_settings()
        elif ch == "q":
            self.app.request_stop()
        else:
            return False
        return True

    def _on_readable(self) -> None:
        ch = self.stream.read(1)
        if ch:
            self.handle_key(ch)

    def attach(self, loop: asyncio.AbstractEventLoop) -> bool:
        if not self.stream.isatty():
            print("NOTE: live tuning needs a TTY; keys are disabled.")
            return False
        self._fd = self.stream.fileno()
        self._saved_mode = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        loop.add_reader(self._fd, self._on_readable)
        print(KEY_HELP)
        return True

    def detach(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._fd is None:
            return
        loop.remove_reader(self._fd)
        termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_mode)
        self._fd = None
        self._saved_mode = None
