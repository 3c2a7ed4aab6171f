# markforge/services/exporters/web_pdf_exporter.py
from __future__ import annotations

try:
    from PyQt6.QtWebEngineCore import QWebEngineSettings  # type: ignore
    from PyQt6.QtWebEngineWidgets import QWebEngineView  # type: ignore
except Exception as e:
    raise RuntimeError(
        "Qt WebEngine is not available. Install PyQt6-WebEngine to enable Web PDF export."
    ) from e

import logging
from pathlib import Path

from PyQt6.QtCore import QEventLoop, QMarginsF, QTimer, QUrl
from PyQt6.QtGui import QPageLayout, QPageSize

from markforge.domain.errors import ExportError
from markforge.domain.interfaces import IExporter
from markforge.services.exporters.base import staged_html
from markforge.services.file_service import FileService

logger = logging.getLogger(__name__)


class WebEnginePdfExporter(IExporter):
    """
    Render HTML to PDF via Qt WebEngine for output that matches the preview.

    The document is written to a temporary file and loaded from there (setHtml
    caps content at 2 MB). The temporary file is removed whether or not printing
    succeeds, and the destination is only replaced once the PDF bytes exist.
    """

    name = "pdf"
    label = "Export PDF…"
    file_ext = "pdf"

    def __init__(
        self,
        files: FileService | None = None,
        page_size: QPageSize | None = None,
        margins_mm: tuple[float, float, float, float] = (20.0, 20.0, 20.0, 20.0),
        orientation: QPageLayout.Orientation = QPageLayout.Orientation.Portrait,
        timeout_ms: int = 30000,
    ) -> None:
        self._files = files or FileService()
        self._page_size = page_size or QPageSize(QPageSize.PageSizeId.A4)
        self._margins = QMarginsF(*margins_mm)
        self._orientation = orientation
        self._timeout_ms = timeout_ms

    def export(self, html: str, out_path: Path) -> None:
        with staged_html(html) as tmp_html:
            data = self._print(tmp_html)
        self._files.write_bytes_atomic(out_path, data)
        logger.info("PDF written to %s (%d bytes)", out_path, len(data))

    def _print(self, html_path: Path) -> bytes:
        view = QWebEngineView()
        view.page().settings().setAttribute(
            QWebEngineSettings.WebAttribute.PrintElementBackgrounds, True
        )
        loop = QEventLoop()
        result: dict[str, object] = {}

        # Safety timeout
        def on_timeout():
            if loop.isRunning():
                result["error"] = ExportError("Timed out while rendering PDF")
                loop.quit()

        timer = QTimer()
        timer.setSingleShot(True)
        timer.timeout.connect(on_timeout)
        timer.start(self._timeout_ms)

        # After load, print to PDF
        def on_load_finished(ok: bool):
            if not ok:
                result["error"] = ExportError("Failed to load HTML into WebEngine page")
                loop.quit()
                return

            layout = QPageLayout(
                self._page_size, self._orientation, self._margins, QPageLayout.Unit.Millimeter
            )

            def on_pdf_ready(data):
                pdf = bytes(data)
                if pdf:
                    result["data"] = pdf
                else:
                    result["error"] = ExportError("WebEngine produced an empty PDF")
                loop.quit()

            # Qt ≥ 6.6 supports pageLayout kwarg
            try:
                view.page().printToPdf(on_pdf_ready, pageLayout=layout)
            except TypeError:
                # Older bindings may not support the kwarg name; try the positional form
                view.page().printToPdf(on_pdf_ready, layout)

        view.loadFinished.connect(on_load_finished)

        # IMPORTANT: connect signals before loading
        view.load(QUrl.fromLocalFile(str(html_path)))
        loop.exec()
        timer.stop()
        view.deleteLater()

        if "error" in result:
            raise result["error"]  # type: ignore[misc]
        if "data" not in result:
            raise ExportError("PDF rendering finished without output")
        return result["data"]  # type: ignore[return-value]
