from __future__ import annotations

from pathlib import Path

import pytest

from markforge.domain.commands import ExportPdf, OpenDocument, SaveDocumentAs
from markforge.domain.models import DocumentState
from markforge.services.command_queue import CommandQueue
from markforge.services.ui.presenters.main_presenter import IMainView, MainPresenter
from markforge.utils.constants import ABOUT_TEXT, MARKDOWN_OPEN_FILTER, MAX_RECENTS


class FakeView:
    def __init__(self) -> None:
        self.editor_text: str | None = None
        self.preview = ""
        self.title = ""
        self.modified = False
        self.words = -1
        self.recents: list[str] = []
        self.status: list[str] = []

    def set_editor_text(self, text: str) -> None:
        self.editor_text = text

    def set_preview_html(self, html: str) -> None:
        self.preview = html

    def set_title(self, title: str) -> None:
        self.title = title

    def set_modified(self, modified: bool) -> None:
        self.modified = modified

    def set_word_count(self, count: int) -> None:
        self.words = count

    def set_recents(self, items: list[str]) -> None:
        self.recents = items

    def show_status(self, text: str, msec: int = 3000) -> None:
        self.status.append(text)


@pytest.fixture
def view() -> FakeView:
    return FakeView()


@pytest.fixture
def presenter(view, session, dialogs, messages, settings_service) -> MainPresenter:
    p = MainPresenter(view, session, CommandQueue(), dialogs, messages, settings_service)
    p.attach()
    return p


def test_fake_view_satisfies_protocol(view):
    assert isinstance(view, IMainView)


def test_attach_pushes_state(presenter, view):
    assert view.editor_text == ""
    assert view.title == "Untitled[*] — MarkForge"
    assert view.words == 0
    assert view.preview.lower().startswith("<!doctype html>")
    assert view.recents == []


def test_typing_updates_view(presenter, view, session):
    presenter.on_text_changed("one two three")
    assert session.state is DocumentState.MODIFIED
    assert view.modified is True
    assert view.words == 3
    assert "<p>one two three</p>" in view.preview


def test_open_flow(presenter, view, dialogs, fake_files, tmp_path):
    p = tmp_path / "a.md"
    fake_files.files[p] = "# A"
    dialogs.next_path = p

    results = presenter.request_open()

    assert [r.command for r in results] == [OpenDocument(p)]
    assert dialogs.calls[0] == ("Open Markdown", None, MARKDOWN_OPEN_FILTER)
    assert view.editor_text == "# A"
    assert view.title == "a.md[*] — MarkForge"
    assert view.modified is False
    assert view.recents == [str(p)]
    assert view.status[-1] == f"Opened: {p}"


def test_open_cancelled_does_nothing(presenter, dialogs, session):
    dialogs.next_path = None
    assert presenter.request_open() == []
    assert session.document.path is None


def test_unsaved_changes_declined_blocks_open(presenter, dialogs, messages):
    presenter.on_text_changed("draft")
    messages.answer = False
    assert presenter.request_open() == []
    assert messages.asked == ["Discard changes?"]
    assert dialogs.calls == []


def test_unsaved_changes_declined_blocks_new(presenter, messages, session):
    presenter.on_text_changed("draft")
    messages.answer = False
    assert presenter.request_new() == []
    assert session.document.text == "draft"


def test_new_accepted_resets_editor(presenter, view, session):
    presenter.on_text_changed("draft")
    presenter.request_new()
    assert view.editor_text == ""
    assert session.state is DocumentState.CLEAN


def test_save_without_path_asks_for_one(presenter, dialogs, fake_files, view, tmp_path):
    presenter.on_text_changed("body")
    target = tmp_path / "new.md"
    dialogs.next_path = target

    results = presenter.request_save()

    assert [r.command for r in results] == [SaveDocumentAs(target)]
    assert dialogs.calls[0][0] == "Save As"
    assert fake_files.files[target] == "body"
    assert view.modified is False
    assert view.recents == [str(target)]


def test_save_with_path_does_not_ask(presenter, dialogs, fake_files, tmp_path):
    target = tmp_path / "x.md"
    dialogs.next_path = target
    presenter.request_save_as()
    dialogs.calls.clear()

    presenter.on_text_changed("more")
    presenter.request_save()

    assert dialogs.calls == []
    assert fake_files.files[target] == "more"


def test_save_failure_shows_error_and_stays_modified(
    presenter, dialogs, messages, fake_files, session, tmp_path
):
    presenter.on_text_changed("x")
    fake_files.fail_writes = True
    dialogs.next_path = tmp_path / "x.md"

    presenter.request_save_as()

    assert messages.errors and messages.errors[0][0] == "Save Error"
    assert "Disk full" in messages.errors[0][1]
    assert session.state is DocumentState.MODIFIED


def test_open_failure_shows_error(presenter, dialogs, messages, tmp_path):
    dialogs.next_path = tmp_path / "gone.md"
    presenter.request_open()
    assert messages.errors[0][0] == "Open Error"


def test_export_suggests_path_next_to_document(
    presenter, dialogs, fake_files, fake_exporters, tmp_path
):
    src = tmp_path / "notes.md"
    fake_files.files[src] = "hi"
    presenter.open_path(src)

    dialogs.next_path = tmp_path / "out.pdf"
    results = presenter.request_export_pdf()

    assert dialogs.calls[-1] == ("Export PDF", str(tmp_path / "notes.pdf"), "PDF (*.pdf)")
    assert [r.command for r in results] == [ExportPdf(tmp_path / "out.pdf")]
    html, out = fake_exporters.get("pdf").calls[0]
    assert out == tmp_path / "out.pdf"
    assert "<title>notes</title>" in html


def test_export_html_untitled_default(presenter, dialogs):
    dialogs.next_path = None
    presenter.request_export_html()
    assert dialogs.calls[-1] == ("Export HTML", "untitled.html", "HTML (*.html)")


def test_export_failure_shows_error(presenter, dialogs, messages, fake_exporters, tmp_path):
    fake_exporters.get("html").fail = True
    dialogs.next_path = tmp_path / "x.html"
    presenter.request_export_html()
    assert messages.errors == [("Export Error", "html export failed")]


def test_recents_deduplicated_and_capped(presenter, fake_files, view, settings_service, tmp_path):
    paths = [tmp_path / f"{i}.md" for i in range(MAX_RECENTS + 2)]
    for p in paths:
        fake_files.files[p] = ""
        presenter.open_path(p)
    presenter.open_path(paths[3])

    assert view.recents[0] == str(paths[3])
    assert len(view.recents) == MAX_RECENTS
    assert len(set(view.recents)) == MAX_RECENTS
    assert settings_service.get_recent() == view.recents


def test_confirm_discard_when_clean_does_not_ask(presenter, messages):
    assert presenter.confirm_discard() is True
    assert messages.asked == []


def test_detach_stops_updates(presenter, view):
    presenter.detach()
    presenter.on_text_changed("ignored by view")
    assert view.words == 0


def test_show_about_uses_info_message(presenter, messages):
    presenter.show_about()
    assert messages.infos == [("About MarkForge", ABOUT_TEXT)]
    assert ABOUT_TEXT.startswith("MarkForge v")
