"""Tunable accumulator settings and the sanitising rules applied to them."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np

MAX_STRESS = 100.0
MIN_TRANSITION_DURATION = 0.1   # seconds
MIN_SENSITIVITY = 0.1

THRESHOLD_KEYS = ("calm", "anxious", "irritated", "panicked")


@dataclass(frozen=True)
class Thresholds:
    """Lower stress bounds of the four moods above SLEEPING.

    Always construct through :meth:`normalized` when values come from the
    outside: boundaries are clamped to [0, 100] and forced non-decreasing.
    """
    calm: float = 10.0
    anxious: float = 30.0
    irritated: float = 60.0
    panicked: float = 90.0

    @classmethod
    def normalized(cls, values: Sequence[float]) -> Thresholds:
        arr = np.clip(np.asarray(values, dtype=np.float64), 0.0, MAX_STRESS)
        arr = np.maximum.accumulate(arr)
        return cls(*(float(v) for v in arr))

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.calm, self.anxious, self.irritated, self.panicked)

    def edges(self) -> list[float]:
        """Band edges from 0 to 100 inclusive (six values, five bands)."""
        return [0.0, *self.as_tuple(), MAX_STRESS]


@dataclass(frozen=True)
class Settings:
    sensitivity: float = 1.0
    transition_duration: float = 3.0
    thresholds: Thresholds = field(default_factory=Thresholds)

    def merged(
        self,
        sensitivity: Any = None,
        transition_duration: Any = None,
        thresholds: Any = None,
    ) -> Settings:
        """Return a copy with every valid, non-None field replaced.

        Invalid values are skipped and the current value is kept.
        """
        changes: dict[str, Any] = {}

        value = _as_number(sensitivity)
        if value is not None:
            changes["sensitivity"] = max(MIN_SENSITIVITY, value)

        value = _as_number(transition_duration)
        if value is not None:
            changes["transition_duration"] = max(MIN_TRANSITION_DURATION, value)

        parsed = _as_thresholds(thresholds)
        if parsed is not None:
            changes["thresholds"] = parsed

        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Any, base: Settings | None = None) -> Settings:
        """Build settings from a persisted record, falling back field-by-field."""
        base = base or cls()
        if not isinstance(data, Mapping):
            return base
        duration = data.get("transition_duration")
        if _as_number(duration) is None:
            duration = data.get("transitionTime")
        return base.merged(
            sensitivity=data.get("sensitivity"),
            transition_duration=duration,
            thresholds=data.get("thresholds"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sensitivity": self.sensitivity,
            "transition_duration": self.transition_duration,
            "thresholds": list(self.thresholds.as_tuple()),
        }


def _as_number(value: Any) -> float | None:
    # bool is an int subclass; a stray true/false in JSON is not a number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


def _as_thresholds(value: Any) -> Thresholds | None:
    if isinstance(value, Thresholds):
        return Thresholds.normalized(value.as_tuple())
    if isinstance(value, Mapping):
        value = [value.get(key) for key in THRESHOLD_KEYS]
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return None
    if len(value) != len(THRESHOLD_KEYS):
        return None
    numbers = [_as_number(v) for v in value]
    if any(n is None for n in numbers):
        return None
    return Thresholds.normalized(numbers)
