from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from markforge.domain.interfaces import IExporter, IExporterRegistry

logger = logging.getLogger(__name__)

TEMP_PREFIX = "markforge-"


@dataclass
class ExporterRegistryInst(IExporterRegistry):
    """
    Instance-based exporter registry (no globals, no side-effects).
    Keeps registry local to the DI container for testability and clarity.
    """

    _reg: dict[str, IExporter] = field(default_factory=dict)

    def register(self, e: IExporter) -> None:
        self._reg[e.name] = e

    def get(self, name: str) -> IExporter:
        return self._reg[name]

    def all(self) -> list[IExporter]:
        return list(self._reg.values())


@contextmanager
def staged_file(suffix: str, data: bytes = b"") -> Iterator[Path]:
    """Temporary file that is removed when the block exits, whether it raised or not."""
    fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=suffix)
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove temporary file %s: %s", path, e)


def staged_html(html: str) -> AbstractContextManager[Path]:
    return staged_file(".html", html.encode("utf-8"))
