"""StateMachine — integrate loudness into stress and classify it into a mood."""

from __future__ import annotations

import math
from collections.abc import Callable

from .base import MOOD_DESCRIPTORS, MOODS_DESCENDING, Mood, MoodDescriptor, MoodReading
from .rates import BandRelativeRate, RateModel, band_for
from .settings import MAX_STRESS, Settings, Thresholds

MAX_LOUDNESS = 255.0

StateChangeCallback = Callable[[MoodDescriptor], None]


def classify(stress: float, thresholds: Thresholds | None = None) -> Mood:
    """Map stress to a mood, checking the highest band first."""
    thresholds = thresholds or Thresholds()
    bounds = dict(zip(MOODS_DESCENDING, reversed(thresholds.as_tuple())))
    for mood in MOODS_DESCENDING:
        if stress >= bounds[mood]:
            return mood
    return Mood.SLEEPING


def _sanitize_loudness(loudness: float) -> float:
    loudness = float(loudness)
    if not math.isfinite(loudness):
        return 0.0
    return min(max(loudness, 0.0), MAX_LOUDNESS)


class StateMachine:
    """Stress accumulator driving the cat's mood.

    One :meth:`update` call is one animation frame. The registered callback
    fires exactly once per mood change, with the new mood's descriptor,
    before ``update`` returns.

    Usage::

        machine = StateMachine(on_state_change=lambda d: print(d.text))
        reading = machine.update(loudness=120.0)
        machine.set_settings(transition_duration=5.0)
    """

    def __init__(
        self,
        on_state_change: StateChangeCallback | None = None,
        settings: Settings | None = None,
        rate_model: RateModel | None = None,
    ):
        self.on_state_change = on_state_change
        self._rates = rate_model or BandRelativeRate()
        self._settings = Settings()
        self._stress = 0.0
        self._mood = Mood.SLEEPING
        self._rates.configure(self._settings)
        if settings is not None:
            self.set_settings(
                settings.sensitivity, settings.transition_duration, settings.thresholds
            )

    @property
    def stress(self) -> float:
        return self._stress

    @property
    def mood(self) -> Mood:
        return self._mood

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def rate_model(self) -> RateModel:
        return self._rates

    @property
    def descriptor(self) -> MoodDescriptor:
        return MOOD_DESCRIPTORS[self._mood]

    def classify(self, stress: float) -> Mood:
        return classify(stress, self._settings.thresholds)

    def band(self, stress: float | None = None) -> tuple[float, float]:
        """Band containing ``stress`` (defaults to the current stress)."""
        return band_for(self._stress if stress is None else stress, self._settings.thresholds)

    def update(self, loudness: float) -> MoodReading:
        """Advance one frame with the latest loudness sample (0-255)."""
        loudness = _sanitize_loudness(loudness)

        if loudness > self._rates.volume_threshold:
            self._stress += self._rates.rise(self._stress, loudness)
        else:
            self._stress -= self._rates.decay(self._stress)

        self._stress = min(max(self._stress, 0.0), MAX_STRESS)

        mood = self.classify(self._stress)
        if mood is not self._mood:
            self._mood = mood
            if self.on_state_change is not None:
                self.on_state_change(MOOD_DESCRIPTORS[mood])

        return MoodReading(self._stress, self._mood)

    def set_settings(
        self,
        sensitivity: float | None = None,
        transition_duration: float | None = None,
        thresholds: Thresholds | tuple[float, ...] | list[float] | None = None,
    ) -> Settings:
        """Replace any subset of the settings; takes effect on the next update."""
        self._settings = self._settings.merged(sensitivity, transition_duration, thresholds)
        self._rates.configure(self._settings)
        return self._settings

    def reset(self) -> None:
        """Back to zero stress and SLEEPING, without notifying."""
        self._stress = 0.0
        self._mood = Mood.SLEEPING
