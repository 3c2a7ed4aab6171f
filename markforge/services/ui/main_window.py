from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QByteArray, Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QLabel,
    QMainWindow,
    QMenu,
    QSplitter,
    QStatusBar,
    QTextBrowser,
    QTextEdit,
    QToolBar,
)

from markforge.domain.interfaces import ISettingsService
from markforge.services.command_queue import CommandQueue
from markforge.services.document_session import DocumentSession
from markforge.services.ui.adapters import QtFileDialogService, QtMessageService
from markforge.services.ui.ports.dialogs import IFileDialogService
from markforge.services.ui.ports.messages import IMessageService
from markforge.services.ui.presenters.main_presenter import MainPresenter
from markforge.utils.constants import APP_NAME

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Editor on the left, preview on the right; all file work goes through the presenter."""

    def __init__(
        self,
        session: DocumentSession,
        queue: CommandQueue,
        settings: ISettingsService,
        *,
        dialogs: IFileDialogService | None = None,
        messages: IMessageService | None = None,
        start_path: Path | None = None,
    ) -> None:
        super().__init__()
        self.resize(1100, 700)
        self.settings = settings

        # Widgets
        self.editor = QTextEdit(self)
        self.editor.setAcceptRichText(False)
        self.editor.setTabStopDistance(4 * self.editor.fontMetrics().horizontalAdvance(" "))

        self.preview = self._create_preview_widget()

        self.splitter = QSplitter(self)
        self.splitter.setOrientation(Qt.Orientation.Horizontal)
        self.splitter.addWidget(self.editor)
        self.splitter.addWidget(self.preview)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 1)
        self.setCentralWidget(self.splitter)

        self.word_label = QLabel(self)
        self.setStatusBar(QStatusBar(self))
        self.statusBar().addPermanentWidget(self.word_label)

        self.presenter = MainPresenter(
            self,
            session,
            queue,
            dialogs or QtFileDialogService(),
            messages or QtMessageService(),
            settings,
        )

        self._build_actions()
        self._build_toolbar()
        self._build_menu()

        # Restore UI state
        geo = self.settings.get_geometry()
        if geo:
            self.restoreGeometry(QByteArray(geo))
        split = self.settings.get_splitter()
        if split:
            self.splitter.restoreState(QByteArray(split))

        self.presenter.attach()
        self.editor.textChanged.connect(self._on_text_changed)

        if start_path:
            self.presenter.open_path(start_path)

        self.setAcceptDrops(True)

    # ---------- UI creation ----------
    def _build_actions(self) -> None:
        p = self.presenter
        self.act_new = QAction(
            "New", self, shortcut=QKeySequence.StandardKey.New, triggered=p.request_new
        )
        self.act_open = QAction(
            "Open…", self, shortcut=QKeySequence.StandardKey.Open, triggered=p.request_open
        )
        self.act_save = QAction(
            "Save", self, shortcut=QKeySequence.StandardKey.Save, triggered=p.request_save
        )
        self.act_save_as = QAction(
            "Save As…",
            self,
            shortcut=QKeySequence.StandardKey.SaveAs,
            triggered=p.request_save_as,
        )
        self.act_export_html = QAction("Export HTML…", self, triggered=p.request_export_html)
        self.act_export_pdf = QAction("Export PDF…", self, triggered=p.request_export_pdf)
        self.act_exit = QAction("&Exit", self, shortcut="Ctrl+Q", triggered=self.close)
        self.act_exit.setStatusTip("Exit application")

        # Edit actions act on the editor widget directly
        ed = self.editor
        self.act_undo = QAction(
            "Undo", self, shortcut=QKeySequence.StandardKey.Undo, triggered=ed.undo
        )
        self.act_redo = QAction(
            "Redo", self, shortcut=QKeySequence.StandardKey.Redo, triggered=ed.redo
        )
        self.act_cut = QAction(
            "Cut", self, shortcut=QKeySequence.StandardKey.Cut, triggered=ed.cut
        )
        self.act_copy = QAction(
            "Copy", self, shortcut=QKeySequence.StandardKey.Copy, triggered=ed.copy
        )
        self.act_paste = QAction(
            "Paste", self, shortcut=QKeySequence.StandardKey.Paste, triggered=ed.paste
        )
        self.act_select_all = QAction(
            "Select All", self, shortcut=QKeySequence.StandardKey.SelectAll, triggered=ed.selectAll
        )
        for a, available in (
            (self.act_undo, ed.undoAvailable),
            (self.act_redo, ed.redoAvailable),
            (self.act_cut, ed.copyAvailable),
            (self.act_copy, ed.copyAvailable),
        ):
            a.setEnabled(False)
            available.connect(a.setEnabled)

        self.act_about = QAction(f"About {APP_NAME}", self, triggered=p.show_about)

        self.recent_menu = QMenu("Open Recent", self)

    def _build_toolbar(self) -> None:
        tb = QToolBar("Main", self)
        tb.setMovable(False)
        for a in (self.act_new, self.act_open, self.act_save, self.act_save_as):
            tb.addAction(a)
        tb.addSeparator()
        tb.addAction(self.act_export_html)
        tb.addAction(self.act_export_pdf)
        self.addToolBar(tb)

    def _build_menu(self) -> None:
        filem = self.menuBar().addMenu("&File")
        filem.addAction(self.act_new)
        filem.addAction(self.act_open)
        filem.addMenu(self.recent_menu)
        filem.addSeparator()
        filem.addAction(self.act_save)
        filem.addAction(self.act_save_as)
        filem.addSeparator()
        filem.addAction(self.act_export_html)
        filem.addAction(self.act_export_pdf)
        filem.addSeparator()
        filem.addAction(self.act_exit)

        self.edit_menu = self.menuBar().addMenu("&Edit")
        self.edit_menu.addAction(self.act_undo)
        self.edit_menu.addAction(self.act_redo)
        self.edit_menu.addSeparator()
        self.edit_menu.addAction(self.act_cut)
        self.edit_menu.addAction(self.act_copy)
        self.edit_menu.addAction(self.act_paste)
        self.edit_menu.addSeparator()
        self.edit_menu.addAction(self.act_select_all)

        helpm = self.menuBar().addMenu("&Help")
        helpm.addAction(self.act_about)

    # ---------- IMainView ----------
    def set_editor_text(self, text: str) -> None:
        # Programmatic loads must not count as user edits.
        self.editor.blockSignals(True)
        try:
            self.editor.setPlainText(text)
        finally:
            self.editor.blockSignals(False)
        # setPlainText clears the undo history while signals are blocked
        doc = self.editor.document()
        self.act_undo.setEnabled(doc.isUndoAvailable())
        self.act_redo.setEnabled(doc.isRedoAvailable())
        self.act_cut.setEnabled(False)
        self.act_copy.setEnabled(False)

    def set_preview_html(self, html: str) -> None:
        # Both QWebEngineView and QTextBrowser implement setHtml(html).
        self.preview.setHtml(html)

    def set_title(self, title: str) -> None:
        self.setWindowTitle(title)

    def set_modified(self, modified: bool) -> None:
        self.setWindowModified(modified)

    def set_word_count(self, count: int) -> None:
        self.word_label.setText(f"{count} word{'' if count == 1 else 's'}")

    def set_recents(self, items: list[str]) -> None:
        self.recent_menu.clear()
        if not items:
            na = QAction("(empty)", self)
            na.setEnabled(False)
            self.recent_menu.addAction(na)
            return
        for p in items:
            self.recent_menu.addAction(
                QAction(p, self, triggered=lambda chk=False, x=p: self.presenter.open_path(Path(x)))
            )

    def show_status(self, text: str, msec: int = 3000) -> None:
        self.statusBar().showMessage(text, msec)

    # ---------- Helpers ----------
    def _on_text_changed(self) -> None:
        self.presenter.on_text_changed(self.editor.toPlainText())

    # ---------- DnD ----------
    def dragEnterEvent(self, e):
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e):
        urls = e.mimeData().urls()
        if not urls:
            return
        local = urls[0].toLocalFile()
        if local:
            self.presenter.open_path(Path(local))

    # ---------- Close ----------
    def closeEvent(self, event):
        if not self.presenter.confirm_discard():
            event.ignore()
            return
        self.settings.set_geometry(bytes(self.saveGeometry()))
        self.settings.set_splitter(bytes(self.splitter.saveState()))
        self.presenter.detach()
        super().closeEvent(event)

    # ---------- Internal: preview creation ----------
    def _create_preview_widget(self):
        """
        Prefer QWebEngineView (renders MathML and the full stylesheet), fall back to
        QTextBrowser when Qt WebEngine isn't installed.
        """
        try:
            from PyQt6.QtWebEngineWidgets import QWebEngineView  # type: ignore

            return QWebEngineView(self)
        except ImportError as e:
            logger.warning("Qt WebEngine unavailable, using QTextBrowser preview: %s", e)
            w = QTextBrowser(self)
            w.setOpenExternalLinks(True)
            return w

