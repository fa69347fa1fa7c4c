"""Loudness source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class MicrophoneUnavailableError(RuntimeError):
    """The input stream could not be opened (no device, or access denied)."""


class LoudnessSource(ABC):
    """Supplies one loudness reading per frame."""

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    @abstractmethod
    def sample(self) -> float:
        """Return the current loudness in [0, 255]; 0 when not capturing."""
        ...


class UnavailableSource(LoudnessSource):
    """Stands in for a microphone that cannot be used at all; always silent."""

    def __init__(self, reason: str):
        self.reason = reason

    def start(self) -> None:
        raise MicrophoneUnavailableError(self.reason)

    def sample(self) -> float:
        return 0.0
