from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from markforge.domain.commands import (
    Command,
    CommandResult,
    ExportHtml,
    ExportPdf,
    NewDocument,
    OpenDocument,
    SaveDocument,
    SaveDocumentAs,
)
from markforge.domain.errors import DocumentError, ExportError, NoFilePathError
from markforge.domain.interfaces import IExporterRegistry, IFileService, IMarkdownRenderer
from markforge.domain.models import Document, DocumentState, SessionSnapshot
from markforge.utils.constants import APP_NAME

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"

Listener = Callable[[SessionSnapshot], None]


def _detect_newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def word_count(text: str) -> int:
    """Number of whitespace-delimited tokens; empty or blank text counts 0."""
    return len(text.split())


class DocumentSession:
    """
    Owns the single open Document and its Clean/Modified lifecycle.

    Every transition (new, load, edit, save) re-renders the preview from scratch
    and pushes a SessionSnapshot to subscribers. File and export failures raise
    from the direct methods; ``handle`` turns them into failed CommandResults.
    """

    def __init__(
        self,
        pipeline: IMarkdownRenderer,
        files: IFileService,
        exporters: IExporterRegistry,
        *,
        app_title: str = APP_NAME,
    ) -> None:
        self.pipeline = pipeline
        self.files = files
        self.exporters = exporters
        self.app_title = app_title
        self._doc = Document(path=None, text="")
        self._listeners: list[Listener] = []
        self._snapshot = self._build_snapshot()
        self._handlers: dict[type, Callable[[Command], CommandResult]] = {
            NewDocument: self._on_new,
            OpenDocument: self._on_open,
            SaveDocument: self._on_save,
            SaveDocumentAs: self._on_save_as,
            ExportHtml: self._on_export_html,
            ExportPdf: self._on_export_pdf,
        }

    # ---------- read side ----------

    @property
    def document(self) -> Document:
        return self._doc

    @property
    def state(self) -> DocumentState:
        return self._doc.state

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def title(self) -> str:
        return self._snapshot.title

    @property
    def preview(self) -> str:
        return self._snapshot.preview_html

    @property
    def word_count(self) -> int:
        return self._snapshot.word_count

    @property
    def display_name(self) -> str:
        return self._doc.path.name if self._doc.path else UNTITLED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register for snapshots; returns a callable that unsubscribes."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---------- transitions ----------

    def new(self, text: str = "") -> None:
        self._doc = Document(path=None, text=text)
        self._changed()

    def load(self, path: Path) -> None:
        text = self.files.read_text(path)
        self._doc = Document(path=path, text=text, newline=_detect_newline(text))
        logger.info("Opened %s", path)
        self._changed()

    def edit(self, text: str) -> None:
        if text == self._doc.text:
            return
        self._doc.text = text
        self._doc.modified = True
        self._changed()

    def save(self) -> Path:
        if self._doc.path is None:
            raise NoFilePathError("Document has no file path; use Save As")
        return self._write(self._doc.path)

    def save_as(self, path: Path) -> Path:
        return self._write(path)

    def _write(self, path: Path) -> Path:
        # Document is left untouched (still modified) if the write raises.
        self.files.write_text_atomic(path, self._disk_text())
        self._doc.path = path
        self._doc.modified = False
        logger.info("Saved %s", path)
        self._changed()
        return path

    def _disk_text(self) -> str:
        text = self._doc.text
        # Text edited in the view comes back with "\n" only; restore the file's endings.
        if self._doc.newline != "\n" and "\r" not in text:
            text = text.replace("\n", self._doc.newline)
        return text

    # ---------- export ----------

    def export_html(self, path: Path) -> Path:
        return self._export("html", path)

    def export_pdf(self, path: Path) -> Path:
        return self._export("pdf", path)

    def _export(self, name: str, path: Path) -> Path:
        try:
            exporter = self.exporters.get(name)
        except KeyError as e:
            raise ExportError(f"No exporter registered for '{name}'") from e
        html = self.pipeline.to_html(self._doc.text, title=self._export_title())
        exporter.export(html, path)
        logger.info("Exported %s to %s", name.upper(), path)
        return path

    def suggested_export_path(self, ext: str) -> Path:
        ext = ext.lstrip(".")
        if self._doc.path is not None:
            return self._doc.path.with_suffix(f".{ext}")
        return Path(f"untitled.{ext}")

    def _export_title(self) -> str:
        return self._doc.path.stem if self._doc.path else UNTITLED

    # ---------- commands ----------

    def handle(self, command: Command) -> CommandResult:
        handler = self._handlers.get(type(command))
        if handler is None:
            return CommandResult(command, ok=False, message=f"Unsupported command: {command!r}")
        try:
            return handler(command)
        except (OSError, UnicodeDecodeError, DocumentError, RuntimeError) as e:
            logger.warning("%s failed: %s", type(command).__name__, e)
            return CommandResult(command, ok=False, message=str(e))

    def _on_new(self, cmd: NewDocument) -> CommandResult:
        self.new(cmd.text)
        return CommandResult(cmd, ok=True, message="New document")

    def _on_open(self, cmd: OpenDocument) -> CommandResult:
        self.load(cmd.path)
        return CommandResult(cmd, ok=True, message=f"Opened: {cmd.path}", path=cmd.path)

    def _on_save(self, cmd: SaveDocument) -> CommandResult:
        path = self.save()
        return CommandResult(cmd, ok=True, message=f"Saved: {path}", path=path)

    def _on_save_as(self, cmd: SaveDocumentAs) -> CommandResult:
        path = self.save_as(cmd.path)
        return CommandResult(cmd, ok=True, message=f"Saved: {path}", path=path)

    def _on_export_html(self, cmd: ExportHtml) -> CommandResult:
        path = self.export_html(cmd.path)
        return CommandResult(cmd, ok=True, message=f"Exported HTML: {path}", path=path)

    def _on_export_pdf(self, cmd: ExportPdf) -> CommandResult:
        path = self.export_pdf(cmd.path)
        return CommandResult(cmd, ok=True, message=f"Exported PDF: {path}", path=path)

    # ---------- internals ----------

    def _build_snapshot(self) -> SessionSnapshot:
        text = self._doc.text
        return SessionSnapshot(
            title=f"{self.display_name}[*] — {self.app_title}",
            preview_html=self.pipeline.to_html(text, title=self._export_title()),
            word_count=word_count(text),
            state=self._doc.state,
            path=self._doc.path,
        )

    def _changed(self) -> None:
        self._snapshot = self._build_snapshot()
        for listener in list(self._listeners):
            listener(self._snapshot)
