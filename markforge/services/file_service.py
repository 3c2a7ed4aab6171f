from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QIODevice, QSaveFile

from markforge.domain.interfaces import IFileService

logger = logging.getLogger(__name__)


class FileService(IFileService):
    """UTF-8 reads and atomic writes (via QSaveFile) for documents and exports."""

    def read_text(self, path: Path) -> str:
        # newline="" keeps line endings exactly as stored on disk.
        with path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()

    def write_text_atomic(self, path: Path, text: str) -> None:
        self.write_bytes_atomic(path, text.encode("utf-8"))

    def write_bytes_atomic(self, path: Path, data: bytes) -> None:
        sf = QSaveFile(str(path))
        if not sf.open(QIODevice.OpenModeFlag.WriteOnly):
            raise OSError(f"Cannot open for write: {path}")
        sf.write(data)
        if not sf.commit():
            raise OSError(f"Commit failed for: {path}")
        logger.debug("Wrote %d bytes to %s", len(data), path)
