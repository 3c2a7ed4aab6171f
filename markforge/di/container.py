from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from markforge.domain.interfaces import (
    IConfigService,
    IExporter,
    IExporterRegistry,
    IFileService,
    ISettingsService,
    ISettingsStore,
)
from markforge.services.code_highlighter import CodeHighlighter
from markforge.services.command_queue import CommandQueue
from markforge.services.config.ini_config_service import IniConfigService, project_root
from markforge.services.document_session import DocumentSession
from markforge.services.exporters.base import ExporterRegistryInst
from markforge.services.exporters.html_exporter import HtmlExporter
from markforge.services.file_service import FileService
from markforge.services.markdown_renderer import MarkdownRenderer
from markforge.services.math_renderer import MathRenderer
from markforge.services.render_pipeline import RenderPipeline
from markforge.services.settings_service import SettingsService
from markforge.services.settings_store import JsonSettingsStore
from markforge.utils.constants import APP_NAME, DEFAULT_MATH_STYLESHEET

if TYPE_CHECKING:
    from markforge.services.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


class Container:
    """
    Lightweight DI container:
      - Wires default services if not provided
      - Registers the built-in exporters (html, pdf) in its own registry
      - Builds the main window on demand, so non-GUI callers never import QtWidgets
    """

    def __init__(
        self,
        config: IConfigService | None = None,
        store: ISettingsStore | None = None,
        files: IFileService | None = None,
        settings: ISettingsService | None = None,
        exporters: IExporterRegistry | None = None,
        *,
        app_title: str = APP_NAME,
    ) -> None:
        self.config: IConfigService = config or IniConfigService()
        self.store: ISettingsStore = store or JsonSettingsStore()
        self.file_service: IFileService = files or FileService()
        self.settings_service: ISettingsService = settings or SettingsService(self.store)

        cfg = self.config
        math = MathRenderer(error_color=cfg.get("math", "error_color", "#ff6b6b") or "#ff6b6b")
        renderer = MarkdownRenderer(
            math,
            CodeHighlighter(),
            sanitize=bool(cfg.get_bool("markdown", "sanitize", True)),
        )
        self.pipeline = RenderPipeline(
            renderer,
            math_stylesheet=cfg.get("export", "math_stylesheet", DEFAULT_MATH_STYLESHEET)
            or DEFAULT_MATH_STYLESHEET,
        )

        self.exporters: IExporterRegistry = exporters or ExporterRegistryInst()
        self._ensure_builtin_exporters()

        self.session = DocumentSession(
            self.pipeline, self.file_service, self.exporters, app_title=app_title
        )
        self.queue = CommandQueue()

    @staticmethod
    def default(config_path: Path | None = None, root: Path | None = None) -> Container:
        return Container(
            config=IniConfigService(explicit_path=config_path, project_root=root or project_root())
        )

    # ---------- Internals ----------

    def _ensure_builtin_exporters(self) -> None:
        try:
            self.exporters.get("html")
        except KeyError:
            self.exporters.register(HtmlExporter(self.file_service))  # type: ignore[arg-type]

        try:
            self.exporters.get("pdf")
        except KeyError:
            self.exporters.register(self._build_pdf_exporter())

    def _build_pdf_exporter(self) -> IExporter:
        margin = self.config.get_float("pdf", "margin_mm", 20.0) or 20.0
        timeout = self.config.get_int("pdf", "timeout_ms", 30000) or 30000
        try:
            from markforge.services.exporters.web_pdf_exporter import WebEnginePdfExporter
        except (ImportError, RuntimeError) as e:
            logger.warning("Falling back to QTextDocument PDF export: %s", e)
            from markforge.services.exporters.pdf_exporter import PdfExporter

            return PdfExporter(self.file_service, margin_mm=margin)  # type: ignore[arg-type]
        return WebEnginePdfExporter(
            self.file_service,  # type: ignore[arg-type]
            margins_mm=(margin, margin, margin, margin),
            timeout_ms=timeout,
        )

    # ---------- UI factories ----------

    def build_main_window(self, *, start_path: Path | None = None) -> MainWindow:
        from markforge.services.ui.main_window import MainWindow

        return MainWindow(
            self.session,
            self.queue,
            self.settings_service,
            start_path=start_path,
        )
