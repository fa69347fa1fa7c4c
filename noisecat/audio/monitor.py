"""AudioMonitor — microphone loudness via a sounddevice InputStream."""

from __future__ import annotations

from collections import deque

import numpy as np
import sounddevice as sd

from .analyser import SpectrumAnalyser
from .base import LoudnessSource, MicrophoneUnavailableError


class AudioMonitor(LoudnessSource):
    """Wraps a sounddevice InputStream and reports average spectrum level.

    The PortAudio callback only queues blocks; :meth:`sample` drains the
    queue on the caller's thread and analyses the newest ``fft_size`` samples.

    Usage::

        mic = AudioMonitor()
        mic.start()
        loudness = mic.sample()
        ...
        mic.stop()
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        fft_size: int = 256,
        smoothing: float = 0.8,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
        device: int | str | None = None,
        buffer_blocks: int = 32,
    ):
        self.sample_rate = sample_rate
        self.device = device
        self.analyser = SpectrumAnalyser(fft_size, smoothing, min_decibels, max_decibels)
        self._blocks: deque[np.ndarray] = deque(maxlen=buffer_blocks)
        self._window = np.zeros(fft_size, dtype=np.float64)
        self._stream: sd.InputStream | None = None

    @property
    def listening(self) -> bool:
        return self._stream is not None

    def _callback(
        self,
        indata: np.ndarray,
        frames: int,
        time_info: object,
        status: sd.CallbackFlags,
    ) -> None:
        self._blocks.append(indata[:, 0].copy())

    def start(self) -> None:
        """Open the default (or configured) input device and start capturing."""
        if self.listening:
            return
        try:
            stream = sd.InputStream(
                samplerate=self.sample_rate,
                blocksize=self.analyser.fft_size,
                channels=1,
                dtype="float32",
                device=self.device,
                callback=self._callback,
            )
            stream.start()
        except (sd.PortAudioError, ValueError) as e:
            raise MicrophoneUnavailableError(f"Error accessing microphone: {e}") from e
        self._stream = stream
        print("Audio monitor started")

    def _drain(self) -> None:
        if not self._blocks:
            return
        blocks = [self._window]
        while self._blocks:
            blocks.append(self._blocks.popleft())
        self._window = np.concatenate(blocks)[-self.analyser.fft_size:]

    def sample(self) -> float:
        if not self.listening:
            return 0.0
        self._drain()
        return self.analyser.volume(self._window)

    def stop(self) -> None:
        """Stop and close the input stream."""
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
        self._blocks.clear()
        self.analyser.reset()
