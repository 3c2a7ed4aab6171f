"""Concrete service implementations and export strategies."""

from .command_queue import CommandQueue
from .document_session import DocumentSession
from .file_service import FileService
from .html_sanitizer import HtmlSanitizer
from .markdown_renderer import MarkdownRenderer
from .math_renderer import MathRenderer
from .render_pipeline import RenderPipeline
from .settings_service import SettingsService
from .settings_store import JsonSettingsStore

__all__ = [
    "CommandQueue",
    "DocumentSession",
    "FileService",
    "HtmlSanitizer",
    "JsonSettingsStore",
    "MarkdownRenderer",
    "MathRenderer",
    "RenderPipeline",
    "SettingsService",
]
