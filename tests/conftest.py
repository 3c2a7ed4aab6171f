from __future__ import annotations

import os
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from markforge.domain.errors import ExportError  # noqa: E402
from markforge.domain.interfaces import IExporter  # noqa: E402
from markforge.services.document_session import DocumentSession  # noqa: E402
from markforge.services.exporters.base import ExporterRegistryInst  # noqa: E402
from markforge.services.file_service import FileService  # noqa: E402
from markforge.services.render_pipeline import RenderPipeline  # noqa: E402
from markforge.services.settings_service import SettingsService  # noqa: E402
from markforge.services.settings_store import JsonSettingsStore  # noqa: E402
from markforge.services.ui.ports.messages import Question  # noqa: E402


# --- Fallback QApplication fixture (works with or without pytest-qt) ---
@pytest.fixture(scope="session")
def qapp():
    """Provide a QApplication for tests that need Qt.
    Creates one if not present; reuses existing otherwise.
    """
    app = QApplication.instance()
    created = False
    if app is None:
        app = QApplication([])
        created = True
    try:
        yield app
    finally:
        # Don't forcibly quit a shared app; only close if we created it here.
        if created:
            app.quit()


# --- In-memory fakes ---


class FakeFiles:
    """Dict-backed IFileService; ``fail_writes`` makes every write raise OSError."""

    def __init__(self) -> None:
        self.files: dict[Path, str] = {}
        self.fail_writes = False

    def read_text(self, path: Path) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(f"No such file: {path}") from None

    def write_text_atomic(self, path: Path, text: str) -> None:
        if self.fail_writes:
            raise OSError(f"Disk full: {path}")
        self.files[path] = text


class FakeExporter(IExporter):
    def __init__(self, name: str, *, fail: bool = False) -> None:
        self.name = name
        self.label = f"Export {name.upper()}…"
        self.file_ext = name
        self.fail = fail
        self.calls: list[tuple[str, Path]] = []

    def export(self, html: str, out_path: Path) -> None:
        if self.fail:
            raise ExportError(f"{self.name} export failed")
        self.calls.append((html, out_path))


class FakeDialogs:
    """IFileDialogService returning ``next_path``; records every call."""

    def __init__(self) -> None:
        self.next_path: Path | None = None
        self.calls: list[tuple[str, str | None, str]] = []

    def get_open_file(self, parent, caption, start_dir, filter_str):
        self.calls.append((caption, start_dir, filter_str))
        return self.next_path

    def get_save_file(self, parent, caption, start_path, filter_str):
        self.calls.append((caption, start_path, filter_str))
        return self.next_path


class FakeMessages:
    """IMessageService answering ``answer`` to every question."""

    def __init__(self) -> None:
        self.answer = True
        self.asked: list[str] = []
        self.errors: list[tuple[str, str]] = []
        self.infos: list[tuple[str, str]] = []

    def info(self, parent, title, text):
        self.infos.append((title, text))

    def warning(self, parent, title, text):
        pass

    def error(self, parent, title, text):
        self.errors.append((title, text))

    def ask(self, parent, title, text, kind=Question.YES_NO):
        self.asked.append(title)
        return self.answer


# --- Common fixtures ---


@pytest.fixture()
def file_service() -> FileService:
    return FileService()


@pytest.fixture()
def pipeline() -> RenderPipeline:
    return RenderPipeline()


@pytest.fixture()
def fake_files() -> FakeFiles:
    return FakeFiles()


@pytest.fixture()
def fake_exporters() -> ExporterRegistryInst:
    reg = ExporterRegistryInst()
    reg.register(FakeExporter("html"))
    reg.register(FakeExporter("pdf"))
    return reg


@pytest.fixture()
def session(pipeline, fake_files, fake_exporters) -> DocumentSession:
    return DocumentSession(pipeline, fake_files, fake_exporters, app_title="MarkForge")


@pytest.fixture()
def tmp_settings_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.json"


@pytest.fixture()
def settings_store(tmp_settings_path: Path) -> JsonSettingsStore:
    return JsonSettingsStore(tmp_settings_path)


@pytest.fixture()
def settings_service(settings_store: JsonSettingsStore) -> SettingsService:
    return SettingsService(settings_store)


@pytest.fixture()
def dialogs() -> FakeDialogs:
    return FakeDialogs()


@pytest.fixture()
def messages() -> FakeMessages:
    return FakeMessages()
