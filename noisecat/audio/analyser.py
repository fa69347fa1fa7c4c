"""SpectrumAnalyser — byte frequency data the way a browser analyser node computes it."""

from __future__ import annotations

import numpy as np
from scipy.signal import get_window


class SpectrumAnalyser:
    """Turns the latest ``fft_size`` samples into ``fft_size // 2`` bytes (0-255).

    Blackman window, magnitude spectrum scaled by 1/N, exponential smoothing
    across calls, then a linear map of decibels between ``min_decibels`` and
    ``max_decibels`` onto 0-255.

    Usage::

        analyser = SpectrumAnalyser(fft_size=256)
        loudness = analyser.volume(block)  # mean byte value, 0-255
    """

    def __init__(
        self,
        fft_size: int = 256,
        smoothing: float = 0.8,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
    ):
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        if max_decibels <= min_decibels:
            raise ValueError("max_decibels must be greater than min_decibels")
        self.fft_size = fft_size
        self.smoothing = float(np.clip(smoothing, 0.0, 1.0))
        self.min_decibels = min_decibels
        self.max_decibels = max_decibels

        self.window = get_window("blackman", fft_size, fftbins=True)
        self._previous = np.zeros(self.frequency_bin_count, dtype=np.float64)

    @property
    def frequency_bin_count(self) -> int:
        return self.fft_size // 2

    def _frame(self, samples: np.ndarray) -> np.ndarray:
        x = np.asarray(samples, dtype=np.float64)[-self.fft_size:]
        if len(x) < self.fft_size:
            x = np.concatenate([np.zeros(self.fft_size - len(x)), x])
        return x

    def magnitudes(self, samples: np.ndarray) -> np.ndarray:
        """Smoothed linear magnitudes; updates the smoothing state."""
        spectrum = np.fft.rfft(self._frame(samples) * self.window)
        mag = np.abs(spectrum[: self.frequency_bin_count]) / self.fft_size
        self._previous = self.smoothing * self._previous + (1.0 - self.smoothing) * mag
        return self._previous.copy()

    def byte_frequency_data(self, samples: np.ndarray) -> np.ndarray:
        mag = self.magnitudes(samples)
        db = 20.0 * np.log10(np.maximum(mag, 1e-12))
        scale = 255.0 / (self.max_decibels - self.min_decibels)
        return np.clip(np.floor(scale * (db - self.min_decibels)), 0, 255).astype(np.uint8)

    def volume(self, samples: np.ndarray) -> float:
        """Average of the byte frequency data, 0-255."""
        return float(np.mean(self.byte_frequency_data(samples)))

    def reset(self) -> None:
        self._previous[:] = 0.0
