"""App constants and utilities."""

from .constants import (
    APP_NAME,
    APP_ORG,
    CSS_PREVIEW,
    DEFAULT_MATH_STYLESHEET,
    HTML_TEMPLATE,
    MARKDOWN_OPEN_FILTER,
    MARKDOWN_SAVE_FILTER,
    MAX_RECENTS,
    SETTINGS_GEOMETRY,
    SETTINGS_RECENTS,
    SETTINGS_SPLITTER,
    WELCOME_TEXT,
)

__all__ = [
    "APP_ORG",
    "APP_NAME",
    "CSS_PREVIEW",
    "DEFAULT_MATH_STYLESHEET",
    "HTML_TEMPLATE",
    "MARKDOWN_OPEN_FILTER",
    "MARKDOWN_SAVE_FILTER",
    "SETTINGS_GEOMETRY",
    "SETTINGS_SPLITTER",
    "SETTINGS_RECENTS",
    "MAX_RECENTS",
    "WELCOME_TEXT",
]
