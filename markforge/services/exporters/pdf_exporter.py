from __future__ import annotations

from pathlib import Path

from PyQt6.QtCore import QMarginsF
from PyQt6.QtGui import QPageLayout, QPageSize, QTextDocument
from PyQt6.QtPrintSupport import QPrinter

from markforge.domain.interfaces import IExporter
from markforge.services.exporters.base import staged_file
from markforge.services.file_service import FileService


class PdfExporter(IExporter):
    """
    QTextDocument/QPrinter PDF export. Used when Qt WebEngine is unavailable;
    the rich-text engine ignores most CSS and cannot show MathML.
    """

    name = "pdf"
    label = "Export PDF…"
    file_ext = "pdf"

    def __init__(self, files: FileService | None = None, margin_mm: float = 20.0) -> None:
        self._files = files or FileService()
        self._margin_mm = margin_mm

    def export(self, html: str, out_path: Path) -> None:
        with staged_file(".pdf") as tmp_pdf:
            printer = QPrinter(QPrinter.PrinterMode.HighResolution)
            printer.setOutputFormat(QPrinter.OutputFormat.PdfFormat)
            printer.setOutputFileName(str(tmp_pdf))
            m = self._margin_mm
            layout = QPageLayout(
                QPageSize(QPageSize.PageSizeId.A4),
                QPageLayout.Orientation.Portrait,
                QMarginsF(m, m, m, m),
                QPageLayout.Unit.Millimeter,
            )
            printer.setPageLayout(layout)

            doc = QTextDocument()
            doc.setHtml(html)
            doc.print(printer)
            data = tmp_pdf.read_bytes()

        # Only replace the destination once the whole PDF exists.
        self._files.write_bytes_atomic(out_path, data)
