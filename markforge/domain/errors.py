from __future__ import annotations


class DocumentError(Exception):
    """Base class for document session failures."""


class NoFilePathError(DocumentError):
    """Save was requested for a document that has never been given a path."""


class ExportError(RuntimeError):
    """An exporter could not produce its output file."""
