"""Domain layer: interfaces, commands and simple models (dataclasses)."""

from .commands import (
    Command,
    CommandResult,
    ExportHtml,
    ExportPdf,
    NewDocument,
    OpenDocument,
    SaveDocument,
    SaveDocumentAs,
)
from .errors import DocumentError, ExportError, NoFilePathError
from .interfaces import (
    IConfigService,
    IExporter,
    IExporterRegistry,
    IFileService,
    IMarkdownRenderer,
    ISettingsService,
    ISettingsStore,
)
from .models import Document, DocumentState, SessionSnapshot

__all__ = [
    "IMarkdownRenderer",
    "IFileService",
    "ISettingsStore",
    "ISettingsService",
    "IConfigService",
    "IExporter",
    "IExporterRegistry",
    "Document",
    "DocumentState",
    "SessionSnapshot",
    "Command",
    "CommandResult",
    "NewDocument",
    "OpenDocument",
    "SaveDocument",
    "SaveDocumentAs",
    "ExportHtml",
    "ExportPdf",
    "DocumentError",
    "NoFilePathError",
    "ExportError",
]
