"""
editor/session.py — sesja dokumentu: zbiór plików wirtualnych i spoiwo.

Sesja jest wyłącznym właścicielem zbioru plików. Pliki sekcji, drzewa i
sugestii są pochodne — mogą być regenerowane lub usuwane niezależnie od
pliku źródłowego. Wszystkie błędy są lokalne: kolizja nazw, porażka
ekstrakcji czy uploadu trafia do notices/logu czatu i nie narusza innych
plików ani historii edycji otwartego dokumentu.

Kluczowe elementy:
  DocumentSession — upload / select / rename / delete / upsert / generate
  ChatLog         — log czatu i zdarzeń pipeline'u
  DownloadSlot    — tymczasowy plik eksportu wybranej pozycji
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable, Iterator, Protocol

from data_model.documents import FileRole, VirtualFile
from data_model.events import ChatMessage, Sender
from editor.history import EditHistory
from editor.surface import EditableSurface
from extraction import extract_text, read_document
from pipeline.client import PipelineClient, PipelineError
from pipeline.stream_merge import StreamMergeController
from sections.materializer import base_name, materialize, source_of
from sections.outline import OutlineIndex, ScrollCallback


class DuplicateNameError(ValueError):
    """Nazwa pliku wirtualnego jest już zajęta."""


class UnknownFileError(KeyError):
    """Brak pliku wirtualnego o podanej nazwie."""


class Uploader(Protocol):
    def upload(self, name: str, data: bytes) -> str:
        ...


type Extractor = Callable[[str, bytes], str]


# ---------------------------------------------------------------------------
# Log czatu
# ---------------------------------------------------------------------------

class ChatLog:

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    def append(self, sender: Sender, message: str) -> ChatMessage:
        msg = ChatMessage(sender=sender, message=message)
        self._messages.append(msg)
        return msg

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    def texts(self) -> list[str]:
        return [m.message for m in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(list(self._messages))


# ---------------------------------------------------------------------------
# Slot pobierania
# ---------------------------------------------------------------------------

class DownloadSlot:
    """
    Tymczasowy plik z treścią wybranej pozycji (odpowiednik object URL).

    acquire() zwalnia poprzedni plik przed utworzeniem nowego; release()
    przy zmianie wyboru lub zamknięciu sesji.
    """

    def __init__(self, directory: str | Path | None = None) -> None:
        self._directory = str(directory) if directory is not None else None
        self._path: Path | None = None

    @property
    def path(self) -> Path | None:
        return self._path

    def acquire(self, file: VirtualFile) -> Path:
        self.release()
        suffix = "." + file.name.rpartition(".")[2] if "." in file.name else ".txt"
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            prefix="pdesk-",
            suffix=suffix,
            dir=self._directory,
            delete=False,
        ) as tmp:
            tmp.write(file.content)
        self._path = Path(tmp.name)
        return self._path

    def release(self) -> None:
        path, self._path = self._path, None
        if path is not None:
            path.unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# Sesja
# ---------------------------------------------------------------------------

class DocumentSession:

    def __init__(
        self,
        uploader: Uploader | None = None,
        extractor: Extractor = extract_text,
        scroll_to: ScrollCallback | None = None,
        on_undo: Callable[[str], None] | None = None,
        download_dir: str | Path | None = None,
    ) -> None:
        self.uploader = uploader
        self.extractor = extractor
        self._files: dict[str, VirtualFile] = {}
        self.selected: str | None = None
        self.chat = ChatLog()
        self.notices: list[str] = []
        self.suggestion: str | None = None
        self.active_tree: str | None = None
        self.server_path: str | None = None
        self._server_source: str | None = None

        self.surface = EditableSurface(
            history=EditHistory(),
            on_change=self._commit_edit,
            on_undo=on_undo,
        )
        self.outline = OutlineIndex(scroll_to)
        self.download = DownloadSlot(download_dir)
        self.merger = StreamMergeController(self)

    # -- odczyt ---------------------------------------------------------------

    @property
    def files(self) -> list[VirtualFile]:
        return list(self._files.values())

    def names(self, role: FileRole | None = None) -> list[str]:
        return [f.name for f in self._files.values() if role is None or f.role is role]

    def get(self, name: str) -> VirtualFile:
        try:
            return self._files[name]
        except KeyError:
            raise UnknownFileError(name) from None

    def sections_of(self, source: str) -> list[VirtualFile]:
        """Pliki sekcji wyprowadzone z pliku źródłowego (po nazwie, w kolejności zbioru)."""
        base = base_name(source)
        found: list[VirtualFile] = []
        for f in self._files.values():
            parsed = source_of(f.name)
            if parsed is not None and parsed[0] == base:
                found.append(f)
        return found

    def __contains__(self, name: object) -> bool:
        return name in self._files

    @property
    def generating(self) -> bool:
        return self.merger.in_progress

    # -- MergeTarget ----------------------------------------------------------

    def log(self, sender: Sender, message: str) -> None:
        self.chat.append(sender, message)

    def upsert(self, name: str, content: str) -> VirtualFile:
        """Zapis pliku pochodnego; otwarty plik dostaje treść jak zewnętrzną podmianę."""
        existing = self._files.get(name)
        if existing is None:
            file = VirtualFile(name=name, content=content)
            self._files[name] = file
            return file
        if name == self.selected:
            self.surface.replace_text(content)
        existing.content = content
        return existing

    # -- operacje na plikach --------------------------------------------------

    def add(self, name: str, content: str) -> VirtualFile:
        """
        Raises:
            DuplicateNameError: nazwa już zajęta.
        """
        if name in self._files:
            raise DuplicateNameError(name)
        file = VirtualFile(name=name, content=content)
        self._files[name] = file
        return file

    def upload(self, name: str, data: bytes) -> VirtualFile | None:
        """
        Dodaje przesłany plik, dzieli go na sekcje i wybiera go.

        Duplikat nazwy → komunikat w notices, brak zmian, zwraca None.
        Podział na sekcje działa lokalnie niezależnie od wyniku uploadu.
        """
        if name in self._files:
            self._notify(f"Plik już istnieje: {name}")
            return None

        text = self._read(name, data)
        file = self.add(name, text)
        for section in materialize(name, text):
            self.upsert(section.name, section.content)
        self.select(name)

        if self.uploader is not None:
            try:
                self.server_path = self.uploader.upload(name, data)
                self._server_source = name
                self.log("system", f"Przesłano: {name}")
            except PipelineError as exc:
                self.log("system", f"Błąd przesyłania {name}: {exc}")
        return file

    def select(self, name: str) -> bool:
        file = self._files.get(name)
        if file is None:
            return False
        self.selected = name
        self.surface.load(name, file.content)
        self.outline.refresh(file.content)
        self.download.acquire(file)
        return True

    def rename(self, old: str, new: str) -> bool:
        new = new.strip()
        if old not in self._files:
            self._notify(f"Brak pliku: {old}")
            return False
        if not new:
            self._notify("Nazwa pliku nie może być pusta.")
            return False
        if new == old:
            return True
        if new in self._files:
            self._notify(f"Plik już istnieje: {new}")
            return False

        file = self._files[old]
        file.name = new
        self._files = {(new if k == old else k): v for k, v in self._files.items()}
        if self.selected == old:
            self.selected = new
            self.surface.title = new
            self.download.acquire(file)
        if self.active_tree == old:
            self.active_tree = new
        if self._server_source == old:
            self._server_source = new
        return True

    def delete(self, name: str) -> bool:
        if self._files.pop(name, None) is None:
            return False
        if self.selected == name:
            self.selected = None
            self.surface.load("", "")
            self.outline.clear()
            self.download.release()
        if self.active_tree == name:
            self.active_tree = None
        return True

    # -- czat i generowanie ---------------------------------------------------

    def send_message(self, text: str) -> bool:
        if not text.strip():
            return False
        self.log("user", text)
        return True

    def generate(self, client: PipelineClient, final_step: int | None = None) -> bool:
        """
        Uruchamia pipeline dla ostatnio przesłanego pliku i scala zdarzenia.

        Poprzedni strumień jest zamykany zanim zostanie otwarty nowy.
        """
        if not self.server_path or self._server_source is None:
            self._notify("Najpierw prześlij plik na serwer.")
            return False

        self.merger.close()
        self.merger.results = client
        self.merger.final_step = final_step
        try:
            stream = client.open_stream(self.server_path)
        except PipelineError as exc:
            self.log("system", str(exc))
            return False
        self.merger.run(stream, base_name(self._server_source), self.server_path)
        return True

    def close(self) -> None:
        self.merger.close()
        self.download.release()

    # -- wewnętrzne -----------------------------------------------------------

    def _notify(self, message: str) -> None:
        self.notices.append(message)

    def _read(self, name: str, data: bytes) -> str:
        return read_document(
            name,
            data,
            extractor=self.extractor,
            on_error=lambda exc: self.log("system", f"Błąd ekstrakcji {name}: {exc}"),
        )


    def _commit_edit(self, text: str) -> None:
        if self.selected is not None and self.selected in self._files:
            self._files[self.selected].content = text
        self.outline.refresh(text)
