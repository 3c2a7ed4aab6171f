from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from PyQt6.QtWidgets import QApplication

from markforge.di.container import Container
from markforge.utils.constants import APP_NAME, APP_ORG, WELCOME_TEXT

LOG_LEVEL_ENV = "MARKFORGE_LOG_LEVEL"
CONFIG_ENV = "MARKFORGE_CONFIG"


def configure_logging(level: str | None = None) -> None:
    name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_app(argv: Sequence[str]) -> int:
    """
    Bootstraps Qt, composes the application via the DI container,
    and launches the main window.
    """
    configure_logging()
    QApplication.setOrganizationName(APP_ORG)
    QApplication.setApplicationName(APP_NAME)
    app = QApplication(list(argv))

    config_path = os.environ.get(CONFIG_ENV)
    container = Container.default(Path(config_path) if config_path else None)

    # Optional file path to open passed as first CLI argument
    start_path = Path(argv[1]) if len(argv) > 1 else None
    if start_path is None:
        container.session.new(WELCOME_TEXT)

    win = container.build_main_window(start_path=start_path)
    win.show()

    return app.exec()
