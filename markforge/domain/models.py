from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class DocumentState(Enum):
    CLEAN = "clean"
    MODIFIED = "modified"


@dataclass
class Document:
    path: Path | None
    text: str
    modified: bool = False
    # Line ending found on disk; editor text arrives with "\n" and is converted back on save.
    newline: str = "\n"

    @property
    def state(self) -> DocumentState:
        return DocumentState.MODIFIED if self.modified else DocumentState.CLEAN


@dataclass(frozen=True)
class SessionSnapshot:
    """What a view needs after each session transition."""

    title: str
    preview_html: str
    word_count: int
    state: DocumentState
    path: Path | None
