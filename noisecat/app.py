"""NoiseCatApp — wires microphone → stress accumulator → view, and settings → storage."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from .audio.base import LoudnessSource, MicrophoneUnavailableError, UnavailableSource
from .config import NoiseCatConfig
from .events.bus import EventBus
from .mood.base import MoodDescriptor, MoodReading
from .mood.machine import StateMachine
from .mood.rates import RATE_MODELS, LinearExcessRate, RateModel
from .mood.settings import Settings, Thresholds
from .storage.repository import JsonFileSettingsRepository, SettingsRepository
from .view.terminal import TerminalView


def build_rate_model(config: NoiseCatConfig) -> RateModel:
    try:
        cls = RATE_MODELS[config.rate_model]
    except KeyError:
        raise ValueError(
            f"Unknown rate model {config.rate_model!r}; "
            f"expected one of {sorted(RATE_MODELS)}"
        ) from None
    if cls is LinearExcessRate:
        return LinearExcessRate(config.frame_rate, config.volume_threshold, config.stress_gain)
    return cls(config.frame_rate, config.volume_threshold)


def default_settings(config: NoiseCatConfig) -> Settings:
    return Settings().merged(
        config.sensitivity, config.transition_duration, Thresholds.normalized(config.thresholds)
    )


def build_microphone(config: NoiseCatConfig) -> LoudnessSource:
    """The sounddevice monitor, or a silent source if PortAudio cannot load."""
    try:
        from .audio.monitor import AudioMonitor
    except (ImportError, OSError) as e:
        return UnavailableSource(f"Audio backend unavailable: {e}")
    return AudioMonitor(
        sample_rate=config.sample_rate,
        fft_size=config.fft_size,
        smoothing=config.smoothing,
        min_decibels=config.min_decibels,
        max_decibels=config.max_decibels,
        device=config.input_device,
    )


class NoiseCatApp:
    """Application context: one accumulator, one loudness source, one store.

    Usage::

        app = NoiseCatApp(NoiseCatConfig())
        await app.start()  # runs until stop() is called
    """

    def __init__(
        self,
        config: NoiseCatConfig | None = None,
        *,
        source: LoudnessSource | None = None,
        repository: SettingsRepository | None = None,
        view: TerminalView | None = None,
        bus: EventBus | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or NoiseCatConfig()
        c = self.config

        self.source = source or build_microphone(c)
        self.repository = repository or JsonFileSettingsRepository(
            c.settings_path, c.settings_namespace
        )
        self.view = view or TerminalView(
            meter_width=c.meter_width, meter_boost=c.meter_boost, assets_dir=c.assets_dir
        )
        self.bus = bus or EventBus(clock)
        self.bus.subscribe(None, self.view.handle_event)

        settings = Settings.from_mapping(self.repository.load(), base=default_settings(c))
        self.machine = StateMachine(
            on_state_change=self._on_state_change,
            settings=settings,
            rate_model=build_rate_model(c),
        )

        self.last_loudness = 0.0
        self.microphone_denied = False
        self._running = False
        self._source_open = False

    @property
    def running(self) -> bool:
        return self._running

    def _on_state_change(self, descriptor: MoodDescriptor) -> None:
        self.bus.mood_changed(descriptor, self.machine.stress)

    def apply_settings(
        self,
        sensitivity: float | None = None,
        transition_duration: float | None = None,
        thresholds: Thresholds | tuple[float, ...] | list[float] | None = None,
    ) -> Settings:
        """Push settings into the accumulator and persist the result.

        Safe while the frame loop runs; the next tick uses the new values.
        """
        settings = self.machine.set_settings(sensitivity, transition_duration, thresholds)
        self.repository.save(settings)
        self.bus.settings_changed(settings, self.machine.stress)
        return settings

    def show_settings(self) -> None:
        """Announce the active settings without saving them."""
        self.bus.settings_changed(self.machine.settings, self.machine.stress)

    def tick(self) -> MoodReading:
        """Run one frame: sample, accumulate, repaint."""
        self.last_loudness = self.source.sample()
        reading = self.machine.update(self.last_loudness)
        self.view.render(reading, self.last_loudness, self.machine.band())
        return reading

    def open_source(self) -> bool:
        """Start capturing; on refusal, notify once and carry on in silence."""
        try:
            self.source.start()
        except MicrophoneUnavailableError as e:
            if not self.microphone_denied:
                self.microphone_denied = True
                self.bus.microphone_denied(str(e))
            return False
        self._source_open = True
        return True

    async def start(self) -> None:
        """Open the microphone and tick at ``frame_rate`` until stopped."""
        self.machine.reset()
        self.view.show_mood(self.machine.descriptor)
        self.show_settings()
        self.open_source()
        self._running = True

        print("NoiseCat listening. Press Ctrl+C to stop.")

        interval = 1.0 / self.config.frame_rate
        try:
            while self._running:
                self.tick()
                await asyncio.sleep(interval)
        except asyncio.CancelledError:
            pass
        finally:
            await self.stop()

    def request_stop(self) -> None:
        """Ask the frame loop to finish after the current frame."""
        self._running = False

    async def stop(self) -> None:
        self._running = False
        if not self._source_open:
            return
        self._source_open = False
        self.source.stop()
        print("\nNoiseCat stopped.")
