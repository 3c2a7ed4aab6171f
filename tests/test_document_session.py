from pathlib import Path

import pytest

from markforge.domain.commands import (
    ExportHtml,
    ExportPdf,
    NewDocument,
    OpenDocument,
    SaveDocument,
    SaveDocumentAs,
)
from markforge.domain.errors import ExportError, NoFilePathError
from markforge.domain.models import DocumentState
from markforge.services.document_session import DocumentSession, word_count
from markforge.services.exporters.base import ExporterRegistryInst


@pytest.fixture
def snapshots(session: DocumentSession):
    seen = []
    session.subscribe(seen.append)
    return seen


@pytest.mark.parametrize(
    "text, expected",
    [("", 0), ("   \n\t ", 0), ("a b  c", 3), ("one\ntwo\tthree", 3), ("# Title", 2)],
)
def test_word_count(text, expected):
    assert word_count(text) == expected


def test_initial_state(session: DocumentSession):
    assert session.state is DocumentState.CLEAN
    assert session.title == "Untitled[*] — MarkForge"
    assert session.word_count == 0
    assert session.document.path is None


def test_edit_marks_modified_and_notifies(session, snapshots):
    session.edit("hello world")
    assert session.state is DocumentState.MODIFIED
    assert len(snapshots) == 1
    snap = snapshots[0]
    assert snap.state is DocumentState.MODIFIED
    assert snap.word_count == 2
    assert "<p>hello world</p>" in snap.preview_html


def test_identical_edit_is_noop(session, snapshots):
    session.edit("same")
    session.edit("same")
    assert len(snapshots) == 1


def test_save_without_path_raises_and_stays_modified(session):
    session.edit("x")
    with pytest.raises(NoFilePathError):
        session.save()
    assert session.state is DocumentState.MODIFIED


def test_save_as_writes_and_cleans(session, fake_files, tmp_path):
    target = tmp_path / "notes.md"
    session.edit("# Notes\r\nü")
    assert session.save_as(target) == target
    assert fake_files.files[target] == "# Notes\r\nü"
    assert session.state is DocumentState.CLEAN
    assert session.document.path == target
    assert session.title == "notes.md[*] — MarkForge"


def test_save_reuses_path(session, fake_files, tmp_path):
    target = tmp_path / "a.md"
    session.save_as(target)
    session.edit("changed")
    session.save()
    assert fake_files.files[target] == "changed"
    assert session.state is DocumentState.CLEAN


def test_failed_save_keeps_modified_and_path(session, fake_files, tmp_path):
    session.edit("draft")
    fake_files.fail_writes = True
    with pytest.raises(OSError):
        session.save_as(tmp_path / "x.md")
    assert session.state is DocumentState.MODIFIED
    assert session.document.path is None


def test_load_resets_to_clean(session, fake_files, tmp_path, snapshots):
    p = tmp_path / "in.md"
    fake_files.files[p] = "loaded text"
    session.edit("unsaved")
    session.load(p)
    assert session.document.text == "loaded text"
    assert session.state is DocumentState.CLEAN
    assert snapshots[-1].path == p
    assert snapshots[-1].title == "in.md[*] — MarkForge"


def test_load_failure_leaves_document_unchanged(session, tmp_path):
    session.edit("keep me")
    with pytest.raises(FileNotFoundError):
        session.load(tmp_path / "missing.md")
    assert session.document.text == "keep me"
    assert session.state is DocumentState.MODIFIED


def test_new_resets(session, tmp_path):
    session.save_as(tmp_path / "a.md")
    session.edit("x")
    session.new("fresh")
    assert session.document.path is None
    assert session.document.text == "fresh"
    assert session.state is DocumentState.CLEAN


def test_export_html_uses_stem_title(session, fake_exporters, tmp_path):
    session.save_as(tmp_path / "report.md")
    session.edit("<script>alert(1)</script>\n\nbody")
    out = tmp_path / "report.html"
    session.export_html(out)
    html, path = fake_exporters.get("html").calls[0]
    assert path == out
    assert "<title>report</title>" in html
    assert "<script" not in html.lower()
    # exporting does not save
    assert session.state is DocumentState.MODIFIED


def test_export_pdf_goes_to_pdf_exporter(session, fake_exporters, tmp_path):
    session.export_pdf(tmp_path / "a.pdf")
    html, _ = fake_exporters.get("pdf").calls[0]
    assert "<title>Untitled</title>" in html


def test_export_without_exporter_raises(pipeline, fake_files, tmp_path):
    s = DocumentSession(pipeline, fake_files, ExporterRegistryInst())
    with pytest.raises(ExportError):
        s.export_pdf(tmp_path / "a.pdf")


def test_suggested_export_path(session, tmp_path):
    assert session.suggested_export_path("pdf") == Path("untitled.pdf")
    session.save_as(tmp_path / "doc.md")
    assert session.suggested_export_path(".html") == tmp_path / "doc.html"


def test_unsubscribe(session):
    seen = []
    unsubscribe = session.subscribe(seen.append)
    unsubscribe()
    session.edit("x")
    assert seen == []


# ---------- commands ----------


def test_handle_open_and_save_as(session, fake_files, tmp_path):
    src = tmp_path / "src.md"
    fake_files.files[src] = "text"
    r = session.handle(OpenDocument(src))
    assert r.ok and r.path == src

    dst = tmp_path / "dst.md"
    r = session.handle(SaveDocumentAs(dst))
    assert r.ok and r.path == dst
    assert fake_files.files[dst] == "text"


def test_handle_new(session):
    r = session.handle(NewDocument("hi"))
    assert r.ok
    assert session.document.text == "hi"


def test_handle_open_missing_file_is_failed_result(session, tmp_path):
    r = session.handle(OpenDocument(tmp_path / "nope.md"))
    assert not r.ok
    assert "nope.md" in r.message


def test_handle_save_without_path_is_failed_result(session):
    r = session.handle(SaveDocument())
    assert not r.ok
    assert "Save As" in r.message


def test_handle_write_failure_is_failed_result(session, fake_files, tmp_path):
    session.edit("x")
    fake_files.fail_writes = True
    r = session.handle(SaveDocumentAs(tmp_path / "x.md"))
    assert not r.ok
    assert session.state is DocumentState.MODIFIED


def test_handle_export_failure_is_failed_result(session, fake_exporters, tmp_path):
    fake_exporters.get("pdf").fail = True
    r = session.handle(ExportPdf(tmp_path / "x.pdf"))
    assert not r.ok
    assert "pdf export failed" in r.message


def test_handle_export_html(session, tmp_path):
    r = session.handle(ExportHtml(tmp_path / "x.html"))
    assert r.ok and r.path == tmp_path / "x.html"


def test_handle_unknown_command(session):
    r = session.handle("bogus")  # type: ignore[arg-type]
    assert not r.ok


def test_handle_undecodable_file_is_failed_result(pipeline, fake_exporters, tmp_path):
    class BinaryFiles:
        def read_text(self, path):
            return b"\xff".decode("utf-8")

        def write_text_atomic(self, path, text):
            pass

    s = DocumentSession(pipeline, BinaryFiles(), fake_exporters)
    r = s.handle(OpenDocument(tmp_path / "bin.md"))
    assert not r.ok
    assert s.document.path is None


def test_crlf_file_keeps_crlf_after_editor_edit(session, fake_files, tmp_path):
    p = tmp_path / "dos.md"
    fake_files.files[p] = "# Title\r\n\r\nbody\r\n"
    session.load(p)
    assert session.document.newline == "\r\n"

    # QTextEdit hands text back with "\n" line breaks only
    session.edit("# Title\n\nbody changed\n")
    session.save()

    assert fake_files.files[p] == "# Title\r\n\r\nbody changed\r\n"
    assert session.state is DocumentState.CLEAN


def test_crlf_file_saved_unchanged_is_byte_exact(session, fake_files, tmp_path):
    p = tmp_path / "dos.md"
    fake_files.files[p] = "a\r\nb\r\n"
    session.load(p)
    session.save()
    assert fake_files.files[p] == "a\r\nb\r\n"


def test_lf_file_stays_lf(session, fake_files, tmp_path):
    p = tmp_path / "unix.md"
    fake_files.files[p] = "a\nb\n"
    session.load(p)
    session.edit("a\nb\nc\n")
    session.save()
    assert fake_files.files[p] == "a\nb\nc\n"
