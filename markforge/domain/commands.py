"""Typed commands posted by the UI shell and consumed by the document session."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class NewDocument:
    text: str = ""


@dataclass(frozen=True)
class OpenDocument:
    path: Path


@dataclass(frozen=True)
class SaveDocument:
    pass


@dataclass(frozen=True)
class SaveDocumentAs:
    path: Path


@dataclass(frozen=True)
class ExportHtml:
    path: Path


@dataclass(frozen=True)
class ExportPdf:
    path: Path


Command = Union[NewDocument, OpenDocument, SaveDocument, SaveDocumentAs, ExportHtml, ExportPdf]


@dataclass(frozen=True)
class CommandResult:
    command: Command
    ok: bool
    message: str = ""
    path: Path | None = None
