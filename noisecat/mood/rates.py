"""Rate models — how far stress moves in one frame."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .settings import MAX_STRESS, Settings, Thresholds

MIN_BAND_WIDTH = 1.0  # stress units; keeps a degenerate band from stalling the rate


def band_for(stress: float, thresholds: Thresholds) -> tuple[float, float]:
    """Return the ``[low, high)`` mood band containing ``stress``.

    The top band is closed at 100. Zero-width bands never contain anything.
    """
    edges = thresholds.edges()
    for low, high in reversed(list(zip(edges[:-1], edges[1:]))):
        if low <= stress < high:
            return low, high
    return edges[-2], MAX_STRESS


class RateModel(ABC):
    """Per-frame stress deltas for one machine.

    ``configure`` is called whenever settings change so subclasses can cache
    per-frame constants; ``rise``/``decay`` return non-negative magnitudes.
    """

    def __init__(self, frame_rate: float = 60.0, volume_threshold: float = 10.0):
        self.frame_rate = frame_rate
        self.volume_threshold = volume_threshold
        self.configure(Settings())

    def configure(self, settings: Settings) -> None:
        self.settings = settings

    @abstractmethod
    def rise(self, stress: float, loudness: float) -> float:
        ...

    @abstractmethod
    def decay(self, stress: float) -> float:
        ...


class BandRelativeRate(RateModel):
    """Every band takes ``transition_duration`` seconds to cross.

    The rate is recomputed from the band the stress currently sits in, so
    narrow and wide bands feel equally responsive. Sensitivity scales the
    rise only.
    """

    def configure(self, settings: Settings) -> None:
        super().configure(settings)
        self._frames_per_band = settings.transition_duration * self.frame_rate

    def band_rate(self, stress: float) -> float:
        low, high = band_for(stress, self.settings.thresholds)
        return max(high - low, MIN_BAND_WIDTH) / self._frames_per_band

    def rise(self, stress: float, loudness: float) -> float:
        return self.band_rate(stress) * self.settings.sensitivity

    def decay(self, stress: float) -> float:
        return self.band_rate(stress)


class LinearExcessRate(RateModel):
    """Rise proportional to loudness above the floor; constant decay.

    Decay empties the full 0-100 range in ``transition_duration`` seconds.
    """

    def __init__(
        self,
        frame_rate: float = 60.0,
        volume_threshold: float = 10.0,
        gain: float = 0.005,
    ):
        super().__init__(frame_rate, volume_threshold)
        self.gain = gain

    def configure(self, settings: Settings) -> None:
        super().configure(settings)
        self._decay = MAX_STRESS / (settings.transition_duration * self.frame_rate)

    def rise(self, stress: float, loudness: float) -> float:
        excess = max(0.0, loudness - self.volume_threshold)
        return excess * self.settings.sensitivity * self.gain

    def decay(self, stress: float) -> float:
        return self._decay


RATE_MODELS: dict[str, type[RateModel]] = {
    "band": BandRelativeRate,
    "linear": LinearExcessRate,
}
