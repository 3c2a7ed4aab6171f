# markforge/services/config/ini_config_service.py
from __future__ import annotations

import configparser
import logging
import sys
from collections.abc import Mapping
from pathlib import Path

from platformdirs import user_config_dir

from markforge.domain.interfaces import IConfigService
from markforge.utils.constants import APP_NAME, DEFAULT_MATH_STYLESHEET

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, dict[str, str]] = {
    "math": {"error_color": "#ff6b6b"},
    "export": {"math_stylesheet": DEFAULT_MATH_STYLESHEET},
    "pdf": {"margin_mm": "20", "timeout_ms": "30000"},
    "markdown": {"sanitize": "true"},
}


def project_root() -> Path:
    """
    Directory holding the optional ``config/config.ini``:
      - PyInstaller bundles use ``sys._MEIPASS``
      - otherwise the checkout root above the ``markforge`` package
    """
    meipass = getattr(sys, "_MEIPASS", None)  # type: ignore[attr-defined]
    if meipass:
        return Path(meipass)
    # markforge/services/config/ini_config_service.py -> parents[3]
    return Path(__file__).resolve().parents[3]


class IniConfigService(IConfigService):
    r"""
    INI-backed configuration reader.

    Load order (first hit wins):
      1. Explicit path provided at construction
      2. User config dir (e.g., ~/.config/MarkForge/config.ini or %APPDATA%\MarkForge\config.ini)
      3. Project default at <repo>/config/config.ini  (optional)

    Keys missing from the file fall back to ``DEFAULTS``.
    """

    DEFAULT_APP_DIR = APP_NAME
    DEFAULT_FILE = "config.ini"

    def __init__(self, explicit_path: Path | None = None, project_root: Path | None = None):
        self._parser = configparser.ConfigParser(interpolation=None)
        self._parser.read_dict(DEFAULTS)
        self._loaded_from: Path | None = None

        candidates: list[Path] = []
        if explicit_path:
            candidates.append(explicit_path)
        candidates.append(Path(user_config_dir(self.DEFAULT_APP_DIR)) / self.DEFAULT_FILE)
        if project_root:
            candidates.append(project_root / "config" / self.DEFAULT_FILE)

        for path in candidates:
            if not path.exists():
                continue
            try:
                with path.open("r", encoding="utf-8") as fh:
                    self._parser.read_file(fh)
            except (OSError, UnicodeDecodeError, configparser.Error) as e:
                logger.warning("Ignoring config file %s: %s", path, e)
                # A half-read file may have left partial values behind.
                self._parser = configparser.ConfigParser(interpolation=None)
                self._parser.read_dict(DEFAULTS)
                continue
            self._loaded_from = path
            logger.debug("Loaded config from %s", path)
            break

    # ----- IConfigService -----

    def get(self, section: str, key: str, default: str | None = None) -> str | None:
        if section not in self._parser:
            return default
        return self._parser[section].get(key, default)

    def get_int(self, section: str, key: str, default: int | None = None) -> int | None:
        val = self.get(section, key, None)
        if val is None:
            return default
        try:
            return int(val.strip())
        except ValueError:
            return default

    def get_float(self, section: str, key: str, default: float | None = None) -> float | None:
        val = self.get(section, key, None)
        if val is None:
            return default
        try:
            return float(val.strip())
        except ValueError:
            return default

    def get_bool(self, section: str, key: str, default: bool | None = None) -> bool | None:
        val = self.get(section, key, None)
        if val is None:
            return default
        truth = {"1", "true", "yes", "y", "on"}
        falsy = {"0", "false", "no", "n", "off"}
        s = val.strip().lower()
        if s in truth:
            return True
        if s in falsy:
            return False
        return default

    def as_dict(self) -> Mapping[str, Mapping[str, str]]:
        return {sect: dict(self._parser[sect]) for sect in self._parser.sections()}

    @property
    def loaded_from(self) -> Path | None:
        """For diagnostics."""
        return self._loaded_from
