from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from markforge.domain.interfaces import ISettingsStore

logger = logging.getLogger(__name__)

DEFAULT_APP_DIR = "MarkForge"
DEFAULT_FILE = "settings.json"


def default_settings_path() -> Path:
    return Path(user_config_dir(DEFAULT_APP_DIR)) / DEFAULT_FILE


class JsonSettingsStore(ISettingsStore):
    """
    One JSON object of arbitrary settings, loaded once and saved on every write.

    Failures never propagate: a missing, unreadable or corrupt file loads as an
    empty object, and a failed save is logged and the in-memory value kept.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_settings_path()
        self._data: dict[str, Any] = {}
        self._loaded = False

    def load(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        self._data = {}
        if not self.path.exists():
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Error loading settings from %s: %s", self.path, e)
            return
        if isinstance(raw, dict):
            self._data = raw
        else:
            logger.warning("Ignoring settings file %s: top level is not an object", self.path)

    def save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Error saving settings to %s: %s", self.path, e)

    # ----- ISettingsStore -----

    def get(self, key: str, default: Any = None) -> Any:
        self.load()
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.load()
        self._data[key] = value
        self.save()

    def delete(self, key: str) -> None:
        self.load()
        self._data.pop(key, None)
        self.save()

    def clear(self) -> None:
        self.load()
        self._data = {}
        self.save()

    def as_dict(self) -> dict[str, Any]:
        self.load()
        return dict(self._data)
