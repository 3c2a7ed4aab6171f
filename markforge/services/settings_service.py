from __future__ import annotations

import base64
import binascii
from typing import Iterable

from markforge.domain.interfaces import ISettingsService, ISettingsStore
from markforge.utils.constants import (
    MAX_RECENTS,
    SETTINGS_GEOMETRY,
    SETTINGS_RECENTS,
    SETTINGS_SPLITTER,
)


class SettingsService(ISettingsService):
    """Persist small UI bits like geometry, splitter position, and recent files."""

    def __init__(self, store: ISettingsStore) -> None:
        self._s = store

    def get_geometry(self) -> bytes | None:
        return self._get_blob(SETTINGS_GEOMETRY)

    def set_geometry(self, blob: bytes) -> None:
        self._set_blob(SETTINGS_GEOMETRY, blob)

    def get_splitter(self) -> bytes | None:
        return self._get_blob(SETTINGS_SPLITTER)

    def set_splitter(self, blob: bytes) -> None:
        self._set_blob(SETTINGS_SPLITTER, blob)

    def get_recent(self) -> list[str]:
        v = self._s.get(SETTINGS_RECENTS, [])
        return [str(x) for x in v] if isinstance(v, list) else []

    def set_recent(self, recent: Iterable[str]) -> None:
        self._s.set(SETTINGS_RECENTS, list(recent)[:MAX_RECENTS])

    # QByteArray blobs are stored base64-encoded; JSON has no bytes type.
    def _get_blob(self, key: str) -> bytes | None:
        v = self._s.get(key)
        if not isinstance(v, str):
            return None
        try:
            return base64.b64decode(v.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError):
            return None

    def _set_blob(self, key: str, blob: bytes) -> None:
        self._s.set(key, base64.b64encode(bytes(blob)).decode("ascii"))
