"""Exporter strategies and registry.

The PDF exporters import Qt GUI/WebEngine modules and are loaded on demand by the
DI container, not from here.
"""

from .base import ExporterRegistryInst, staged_file, staged_html
from .html_exporter import HtmlExporter

__all__ = ["ExporterRegistryInst", "HtmlExporter", "staged_file", "staged_html"]
