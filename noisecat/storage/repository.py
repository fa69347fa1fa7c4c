"""Settings persistence — a namespaced key-value record on disk."""

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..mood.settings import Settings


class SettingsRepository(ABC):
    """Loads and saves the accumulator settings."""

    @abstractmethod
    def load(self) -> dict[str, Any] | None:
        """Return the raw persisted record, or ``None`` when there is none.

        The record is not validated here; pass it through
        :meth:`Settings.from_mapping`, which skips malformed fields.
        """
        ...

    @abstractmethod
    def save(self, settings: Settings) -> None:
        ...


class MemorySettingsRepository(SettingsRepository):
    """Keeps the record in a dict; used in tests and with ``--no-save``."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self.record = initial

    def load(self) -> dict[str, Any] | None:
        return dict(self.record) if isinstance(self.record, dict) else None

    def save(self, settings: Settings) -> None:
        self.record = settings.to_dict()


class JsonFileSettingsRepository(SettingsRepository):
    """Stores settings under ``namespace`` in a JSON object file.

    Other namespaces in the same file are left untouched. Writes go to a
    temporary file in the same directory and replace the target in one step.

    Usage::

        repo = JsonFileSettingsRepository("~/.noisecat/settings.json")
        settings = Settings.from_mapping(repo.load())
        repo.save(settings)
    """

    def __init__(self, path: str | Path, namespace: str = "noise_cat_settings"):
        self.path = Path(path).expanduser()
        self.namespace = namespace

    def _read_all(self) -> dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            # Unreadable or corrupt; treat as empty so startup uses defaults
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> dict[str, Any] | None:
        record = self._read_all().get(self.namespace)
        return record if isinstance(record, dict) else None

    def save(self, settings: Settings) -> None:
        data = self._read_all()
        data[self.namespace] = settings.to_dict()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".settings-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise
