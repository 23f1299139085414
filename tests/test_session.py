"""Tests for editor.session (document session, virtual file set)."""
import json
from typing import Any, Iterator

import pytest

from data_model.documents import FileRole
from editor.session import DocumentSession, DownloadSlot, UnknownFileError
from data_model.documents import VirtualFile
from extraction import ExtractionError
from pipeline.client import PipelineError


PAPER = b"Abstract\nfoo\nIntroduction\nbar\n"


class FakeUploader:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[str] = []

    def upload(self, name: str, data: bytes) -> str:
        self.calls.append(name)
        if self.fail:
            raise PipelineError("HTTP 503")
        return f"/srv/uploads/{name}"


class FakeStream:
    def __init__(self, messages: list[str]) -> None:
        self.messages = messages
        self.closed = False

    def __iter__(self) -> Iterator[str]:
        return iter(self.messages)

    def close(self) -> None:
        self.closed = True


class FakeClient:
    def __init__(self, messages: list[str], snapshot: dict[str, Any] | None = None) -> None:
        self.messages = messages
        self.snapshot = snapshot or {}
        self.streams: list[FakeStream] = []

    def open_stream(self, file_path: str) -> FakeStream:
        stream = FakeStream(self.messages)
        self.streams.append(stream)
        return stream

    def fetch_results(self, file_path: str) -> dict[str, Any]:
        return self.snapshot


@pytest.fixture
def session(tmp_path) -> Iterator[DocumentSession]:
    s = DocumentSession(download_dir=tmp_path)
    yield s
    s.close()


class TestUpload:
    def test_upload_adds_file_and_sections(self, session: DocumentSession) -> None:
        file = session.upload("paper.txt", PAPER)
        assert file is not None
        assert session.names() == [
            "paper.txt",
            "paper__Abstract.section.txt",
            "paper__Introduction.section.txt",
        ]
        assert session.get("paper__Introduction.section.txt").content == "bar"
        assert session.selected == "paper.txt"
        assert session.surface.text == PAPER.decode()

    def test_sections_grouped_by_source(self, session: DocumentSession) -> None:
        session.upload("paper.txt", PAPER)
        session.upload("other.md", b"Conclusion\nend")
        assert [f.name for f in session.sections_of("paper.txt")] == [
            "paper__Abstract.section.txt",
            "paper__Introduction.section.txt",
        ]
        assert [f.name for f in session.sections_of("other.md")] == [
            "other__Conclusion.section.txt",
        ]
        assert session.sections_of("missing.pdf") == []

    def test_duplicate_upload_rejected_with_notice(self, session: DocumentSession) -> None:
        session.upload("paper.txt", PAPER)
        before = [(f.name, f.content) for f in session.files]
        assert session.upload("paper.txt", b"other") is None
        assert session.notices == ["Plik już istnieje: paper.txt"]
        assert [(f.name, f.content) for f in session.files] == before

    def test_unsectioned_document_stays_selectable(self, session: DocumentSession) -> None:
        session.upload("notes.md", b"no headings here")
        assert session.names() == ["notes.md"]
        assert session.selected == "notes.md"

    def test_extraction_failure_substitutes_placeholder(self, tmp_path) -> None:
        def failing(name: str, data: bytes) -> str:
            raise ExtractionError("broken pdf")

        session = DocumentSession(extractor=failing, download_dir=tmp_path)
        session.upload("scan.pdf", b"%PDF-broken")
        assert session.get("scan.pdf").content.startswith("[Plik PDF: scan.pdf]")
        assert any("broken pdf" in m for m in session.chat.texts())
        session.close()

    def test_upload_failure_does_not_block_sections(self, tmp_path) -> None:
        session = DocumentSession(uploader=FakeUploader(fail=True), download_dir=tmp_path)
        session.upload("paper.txt", PAPER)
        assert session.server_path is None
        assert len(session.names(FileRole.SECTION)) == 2
        assert any("HTTP 503" in m for m in session.chat.texts())
        session.close()

    def test_upload_success_stores_server_path(self, tmp_path) -> None:
        session = DocumentSession(uploader=FakeUploader(), download_dir=tmp_path)
        session.upload("paper.txt", PAPER)
        assert session.server_path == "/srv/uploads/paper.txt"
        session.close()


class TestSelectionAndEditing:
    def test_select_loads_surface_and_outline(self, session: DocumentSession) -> None:
        session.upload("paper.txt", PAPER)
        assert session.select("paper__Abstract.section.txt")
        assert session.surface.text == "foo"
        assert session.outline.entries == []
        assert not session.surface.undo()

    def test_select_unknown_is_noop(self, session: DocumentSession) -> None:
        session.upload("paper.txt", PAPER)
        assert not session.select("missing.txt")
        assert session.selected == "paper.txt"

    def test_edits_commit_into_selected_file(self, session: DocumentSession) -> None:
        session.upload("paper.txt", PAPER)
        session.surface.handle_input(["Abstract", "foo!", "Conclusion", "end"], caret=12)
        assert session.get("paper.txt").content == "Abstract\nfoo!\nConclusion\nend"
        assert [e.title for e in session.outline.entries] == ["Abstract", "Conclusion"]

        session.surface.undo()
        assert session.get("paper.txt").content == PAPER.decode()

    def test_get_unknown_raises(self, session: DocumentSession) -> None:
        with pytest.raises(UnknownFileError):
            session.get("nope")


class TestRenameDelete:
    def test_rename_keeps_order_and_selection(self, session: DocumentSession) -> None:
        session.upload("paper.txt", PAPER)
        assert session.rename("paper.txt", "draft.txt")
        assert session.names()[0] == "draft.txt"
        assert session.selected == "draft.txt"
        assert session.surface.title == "draft.txt"

    def test_rename_collision_rejected(self, session: DocumentSession) -> None:
        session.upload("paper.txt", PAPER)
        session.upload("other.txt", b"text")
        assert not session.rename("other.txt", "paper.txt")
        assert session.notices == ["Plik już istnieje: paper.txt"]
        assert session.get("paper.txt").content == PAPER.decode()
        assert session.get("other.txt").content == "text"

    def test_delete_selected_clears_editor(self, session: DocumentSession) -> None:
        session.upload("paper.txt", PAPER)
        assert session.delete("paper.txt")
        assert session.selected is None
        assert session.surface.text == ""
        assert "paper__Abstract.section.txt" in session
        assert not session.delete("paper.txt")


class TestDownloadSlot:
    def test_selection_change_releases_previous(self, session: DocumentSession) -> None:
        session.upload("paper.txt", PAPER)
        first = session.download.path
        assert first is not None and first.read_text(encoding="utf-8") == PAPER.decode()

        session.select("paper__Abstract.section.txt")
        second = session.download.path
        assert not first.exists()
        assert second is not None and second.read_text(encoding="utf-8") == "foo"

        session.close()
        assert not second.exists()
        assert session.download.path is None

    def test_release_without_acquire(self, tmp_path) -> None:
        slot = DownloadSlot(tmp_path)
        slot.release()
        path = slot.acquire(VirtualFile("a.json", "{}"))
        assert path.suffix == ".json"


class TestGenerate:
    def test_generate_requires_upload(self, session: DocumentSession) -> None:
        assert not session.generate(FakeClient([]))  # type: ignore[arg-type]
        assert session.notices == ["Najpierw prześlij plik na serwer."]

    def test_generate_merges_stream(self, tmp_path) -> None:
        session = DocumentSession(uploader=FakeUploader(), download_dir=tmp_path)
        session.upload("paper.txt", PAPER)
        client = FakeClient(
            [
                json.dumps({"step": 0, "name": "split_tree", "content": '{"a":1}'}),
                json.dumps({"step": 5, "name": "editPass2", "content": "Shorten intro."}),
                json.dumps({"step": 7, "name": "finalize"}),
            ],
        )
        assert session.generate(client)  # type: ignore[arg-type]

        assert session.active_tree == "paper.tree.json"
        assert session.get("paper.tree.json").content == '{\n  "a": 1\n}'
        assert session.suggestion == "Shorten intro."
        assert session.get("paper.suggestion.txt").content == "Shorten intro."
        assert not session.generating
        assert client.streams[0].closed
        session.close()

    def test_upsert_of_open_file_keeps_history(self, session: DocumentSession) -> None:
        session.upload("paper.txt", PAPER)
        session.select("paper__Abstract.section.txt")
        session.upsert("paper__Abstract.section.txt", "regenerated")
        assert session.surface.text == "regenerated"
        assert session.surface.undo()
        assert session.surface.text == "foo"


class TestChat:
    def test_send_message(self, session: DocumentSession) -> None:
        assert session.send_message("hello")
        assert not session.send_message("   ")
        assert [(m.sender, m.message) for m in session.chat] == [("user", "hello")]
