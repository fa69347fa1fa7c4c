"""NoiseCat configuration — dataclass-based config with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class NoiseCatConfig:
    # Frame loop
    frame_rate: float = 60.0            # assumed frames per second

    # Stress accumulator
    volume_threshold: float = 10.0      # loudness (0-255) below which noise is ignored
    stress_gain: float = 0.005          # loudness excess -> stress, "linear" model only
    rate_model: str = "band"            # "band" | "linear"

    # Default settings (overridden by the persisted record)
    sensitivity: float = 1.0
    transition_duration: float = 3.0    # seconds to cross one mood band
    thresholds: tuple[float, float, float, float] = (10.0, 30.0, 60.0, 90.0)

    # Audio capture
    sample_rate: int = 44100
    fft_size: int = 256                 # 128 frequency bins
    smoothing: float = 0.8              # analyser time smoothing
    min_decibels: float = -100.0
    max_decibels: float = -30.0
    input_device: int | str | None = None

    # Persistence
    settings_path: str = "~/.noisecat/settings.json"
    settings_namespace: str = "noise_cat_settings"

    # View
    meter_boost: float = 3.0            # loudness meter gain, purely visual
    meter_width: int = 30
    assets_dir: str = "assets/cats"
