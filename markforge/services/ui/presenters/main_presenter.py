from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

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
from markforge.domain.interfaces import ISettingsService
from markforge.domain.models import DocumentState, SessionSnapshot
from markforge.services.command_queue import CommandQueue
from markforge.services.document_session import DocumentSession
from markforge.services.ui.ports.dialogs import IFileDialogService
from markforge.services.ui.ports.messages import IMessageService
from markforge.utils.constants import (
    ABOUT_TEXT,
    APP_NAME,
    MARKDOWN_OPEN_FILTER,
    MARKDOWN_SAVE_FILTER,
    MAX_RECENTS,
)

_ERROR_TITLES: dict[type, str] = {
    NewDocument: "New Document Error",
    OpenDocument: "Open Error",
    SaveDocument: "Save Error",
    SaveDocumentAs: "Save Error",
    ExportHtml: "Export Error",
    ExportPdf: "Export Error",
}

_EXPORTS: dict[str, tuple[str, str, type]] = {
    # ext: (caption, filter, command)
    "html": ("Export HTML", "HTML (*.html)", ExportHtml),
    "pdf": ("Export PDF", "PDF (*.pdf)", ExportPdf),
}


@runtime_checkable
class IMainView(Protocol):
    """Passive view surface (implemented by the Qt MainWindow)."""

    # editor/preview
    def set_editor_text(self, text: str) -> None: ...
    def set_preview_html(self, html: str) -> None: ...

    # window chrome
    def set_title(self, title: str) -> None: ...
    def set_modified(self, modified: bool) -> None: ...
    def set_word_count(self, count: int) -> None: ...

    # recents
    def set_recents(self, items: list[str]) -> None: ...

    # status
    def show_status(self, text: str, msec: int = 3000) -> None: ...


class MainPresenter:
    """
    Turns user intents into commands and session snapshots into view updates.

    Dialogs run here, before a command is posted; the queue is drained into
    ``DocumentSession.handle`` straight away, so every request is synchronous.
    """

    def __init__(
        self,
        view: IMainView,
        session: DocumentSession,
        queue: CommandQueue,
        dialogs: IFileDialogService,
        messages: IMessageService,
        settings: ISettingsService,
    ) -> None:
        self.view = view
        self.session = session
        self.queue = queue
        self.dialogs = dialogs
        self.messages = messages
        self.settings = settings
        self.recents: list[str] = settings.get_recent()
        self._unsubscribe = session.subscribe(self._on_snapshot)

    def attach(self) -> None:
        """Push the current session state into a freshly built view."""
        self.view.set_editor_text(self.session.document.text)
        self._on_snapshot(self.session.snapshot)
        self.view.set_recents(list(self.recents))

    def detach(self) -> None:
        self._unsubscribe()

    # ---------- editor ----------

    def on_text_changed(self, text: str) -> None:
        self.session.edit(text)

    # ---------- File menu ----------

    def request_new(self) -> list[CommandResult]:
        if not self.confirm_discard():
            return []
        return self._run(NewDocument())

    def request_open(self) -> list[CommandResult]:
        if not self.confirm_discard():
            return []
        path = self.dialogs.get_open_file(
            self.view, "Open Markdown", self._start_dir(), MARKDOWN_OPEN_FILTER
        )
        if path is None:
            return []
        return self._run(OpenDocument(path))

    def open_path(self, path: Path) -> list[CommandResult]:
        """Open without a dialog (recent files, drag and drop, command line)."""
        if not self.confirm_discard():
            return []
        return self._run(OpenDocument(path))

    def request_save(self) -> list[CommandResult]:
        if self.session.document.path is None:
            return self.request_save_as()
        return self._run(SaveDocument())

    def request_save_as(self) -> list[CommandResult]:
        current = self.session.document.path
        path = self.dialogs.get_save_file(
            self.view, "Save As", str(current) if current else "untitled.md", MARKDOWN_SAVE_FILTER
        )
        if path is None:
            return []
        return self._run(SaveDocumentAs(path))

    def request_export(self, ext: str) -> list[CommandResult]:
        caption, filter_str, command = _EXPORTS[ext]
        start = str(self.session.suggested_export_path(ext))
        path = self.dialogs.get_save_file(self.view, caption, start, filter_str)
        if path is None:
            return []
        return self._run(command(path))

    def request_export_html(self) -> list[CommandResult]:
        return self.request_export("html")

    def request_export_pdf(self) -> list[CommandResult]:
        return self.request_export("pdf")

    def confirm_discard(self) -> bool:
        if self.session.state is DocumentState.CLEAN:
            return True
        return self.messages.ask(
            self.view, "Discard changes?", "You have unsaved changes. Discard them?"
        )

    # ---------- Help menu ----------

    def show_about(self) -> None:
        self.messages.info(self.view, f"About {APP_NAME}", ABOUT_TEXT)

    # ---------- plumbing ----------

    def _run(self, command: Command) -> list[CommandResult]:
        self.queue.post(command)
        results = self.queue.drain(self.session.handle)
        for result in results:
            self._report(result)
        return results

    def _report(self, result: CommandResult) -> None:
        cmd = result.command
        if not result.ok:
            self.messages.error(self.view, _ERROR_TITLES.get(type(cmd), "Error"), result.message)
            return
        if isinstance(cmd, (NewDocument, OpenDocument)):
            self.view.set_editor_text(self.session.document.text)
        if isinstance(cmd, (OpenDocument, SaveDocumentAs)) and result.path is not None:
            self._add_recent(result.path)
        self.view.show_status(result.message)

    def _on_snapshot(self, snap: SessionSnapshot) -> None:
        self.view.set_title(snap.title)
        self.view.set_modified(snap.state is DocumentState.MODIFIED)
        self.view.set_preview_html(snap.preview_html)
        self.view.set_word_count(snap.word_count)

    def _add_recent(self, path: Path) -> None:
        s = str(path)
        if s in self.recents:
            self.recents.remove(s)
        self.recents.insert(0, s)
        self.recents = self.recents[:MAX_RECENTS]
        self.settings.set_recent(self.recents)
        self.view.set_recents(list(self.recents))

    def _start_dir(self) -> str | None:
        path = self.session.document.path
        return str(path.parent) if path else None
