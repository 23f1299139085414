"""
pipeline/stream_merge.py — scalanie zdarzeń strumienia do sesji dokumentu.

Dla każdego zdarzenia, w kolejności:
  1. zawsze linia logu czatu "[step] name: podgląd";
  2. krok z sugestią → bieżąca sugestia + plik {base}.suggestion.txt;
  3. w przeciwnym razie krok z drzewem → JSON → plik {base}.tree.json
     (sformatowany) i aktywne drzewo; błąd parsowania jest ignorowany;
  4. krok końcowy → jednorazowo: pobranie wyników, scalenie, zamknięcie.

Rodzaj kroku pochodzi z jawnego pola "kind" koperty, a gdy go brak —
z heurystyki po nazwie kroku (classify_step).

W danej chwili otwarty jest co najwyżej jeden strumień; open() zamyka
poprzedni synchronicznie, zanim przyjmie nowy.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, Protocol

import requests

from data_model.events import EventContent, Sender, StepKind, StreamEvent
from pipeline.client import PipelineError
from pipeline.config import DEFAULT_PREVIEW_CHARS
from sections.materializer import suggestion_file_name, tree_file_name

# Słowa kluczowe porównywane z nazwą kroku po normalizacji (małe litery,
# tylko znaki alfanumeryczne), więc "globalCheck" pasuje do "global check".
SUGGESTION_KEYWORDS: tuple[str, ...] = ("audit", "global check", "editpass2", "suggest")
TREE_KEYWORDS: tuple[str, ...]       = ("split", "build", "fuse", "tree")
FINAL_KEYWORD = "finalize"

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def _norm(name: str) -> str:
    return _NON_ALNUM_RE.sub("", name.lower())


def _matches(name: str, keywords: Iterable[str]) -> bool:
    key = _norm(name)
    return any(_norm(k) in key for k in keywords)


def classify_step(event: StreamEvent, final_step: int | None = None) -> frozenset[StepKind]:
    """Zbiór rodzajów kroku; pusty zbiór = tylko wpis w logu."""
    kinds: set[StepKind] = set()
    if event.kind is not None:
        if event.kind is not StepKind.LOG:
            kinds.add(event.kind)
    elif _matches(event.name, SUGGESTION_KEYWORDS):
        kinds.add(StepKind.SUGGESTION)
    elif _matches(event.name, TREE_KEYWORDS):
        kinds.add(StepKind.TREE)

    if (final_step is not None and event.step == final_step) or (
        event.kind is None and _matches(event.name, (FINAL_KEYWORD,))
    ):
        kinds.add(StepKind.FINAL)
    return frozenset(kinds)


# ---------------------------------------------------------------------------
# Kolaboratorzy
# ---------------------------------------------------------------------------

class MergeTarget(Protocol):
    """Część sesji dokumentu, do której trafiają wyniki strumienia."""
    suggestion: str | None
    active_tree: str | None

    def log(self, sender: Sender, message: str) -> None:
        ...

    def upsert(self, name: str, content: str) -> None:
        ...


class ResultsSource(Protocol):
    def fetch_results(self, file_path: str) -> dict[str, Any]:
        ...


class StreamHandle(Protocol):
    def __iter__(self) -> Any:
        ...

    def close(self) -> None:
        ...


# ---------------------------------------------------------------------------
# Kontroler
# ---------------------------------------------------------------------------

class StreamMergeController:

    def __init__(
        self,
        target: MergeTarget,
        results: ResultsSource | None = None,
        final_step: int | None = None,
        preview_chars: int = DEFAULT_PREVIEW_CHARS,
    ) -> None:
        self.target = target
        self.results = results
        self.final_step = final_step
        self.preview_chars = preview_chars
        self._stream: StreamHandle | None = None
        self._base = ""
        self._file_path: str | None = None
        self._in_progress = False
        self._finalized = False

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    # -- cykl życia strumienia ------------------------------------------------

    def open(self, stream: StreamHandle, base: str, file_path: str | None = None) -> None:
        self.close()
        self._stream = stream
        self._base = base
        self._file_path = file_path
        self._in_progress = True
        self._finalized = False

    def close(self) -> None:
        stream, self._stream = self._stream, None
        self._in_progress = False
        if stream is not None:
            stream.close()

    def run(self, stream: StreamHandle, base: str, file_path: str | None = None) -> None:
        """Pompuje strumień do końca w wątku wywołującego, w kolejności przyjścia."""
        self.open(stream, base, file_path)
        try:
            for raw in stream:
                self.on_message(raw)
                if not self._in_progress:
                    break
        except requests.RequestException as exc:
            self.on_error(exc)
            return
        if self._in_progress:
            self.on_error(PipelineError("Strumień zakończył się bez kroku finalize."))

    # -- zdarzenia ------------------------------------------------------------

    def on_message(self, raw: str) -> None:
        """Surowe pole data; niepoprawna koperta trafia do logu dosłownie."""
        try:
            payload = json.loads(raw)
            if not isinstance(payload, dict):
                raise ValueError("koperta nie jest obiektem JSON")
            event = StreamEvent.from_payload(payload)
        except ValueError:
            self.target.log("ai", raw)
            return
        self.on_event(event)

    def on_event(self, event: StreamEvent) -> None:
        self.target.log("ai", self._log_line(event))

        kinds = classify_step(event, self.final_step)
        if StepKind.SUGGESTION in kinds:
            self._merge_suggestion(event.content)
        elif StepKind.TREE in kinds:
            self._merge_tree(event.content)

        if StepKind.FINAL in kinds:
            self._finalize()

    def on_error(self, exc: BaseException) -> None:
        """Błąd transportu: wpis w logu, flaga w toku wyczyszczona, bez ponawiania."""
        self.target.log("system", f"Błąd strumienia: {exc}")
        self.close()

    # -- wewnętrzne -----------------------------------------------------------

    def _log_line(self, event: StreamEvent) -> str:
        head = f"[{event.step}] {event.name}"
        preview = _as_text(event.content)
        if not preview:
            return head
        if len(preview) > self.preview_chars:
            preview = preview[: self.preview_chars] + "…"
        return f"{head}: {preview}"

    def _merge_suggestion(self, content: EventContent) -> None:
        if isinstance(content, dict) and isinstance(content.get("suggestion"), str):
            text = content["suggestion"]
        else:
            text = _as_text(content)
        if not text:
            return
        self.target.suggestion = text
        self.target.upsert(suggestion_file_name(self._base), text)

    def _merge_tree(self, content: EventContent) -> None:
        if isinstance(content, str):
            try:
                tree = json.loads(content)
            except ValueError:
                return
        elif isinstance(content, (dict, list)):
            tree = content
        else:
            return
        name = tree_file_name(self._base)
        self.target.upsert(name, json.dumps(tree, ensure_ascii=False, indent=2))
        self.target.active_tree = name

    def _finalize(self) -> None:
        if self._finalized:
            return
        self._finalized = True
        if self.results is not None and self._file_path:
            try:
                snapshot = self.results.fetch_results(self._file_path)
            except PipelineError as exc:
                self.target.log("system", f"Błąd pobierania wyników: {exc}")
            else:
                if snapshot.get("suggestion") is not None:
                    self._merge_suggestion(snapshot["suggestion"])
                if snapshot.get("tree") is not None:
                    self._merge_tree(snapshot["tree"])
        self.close()


def _as_text(content: EventContent) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return json.dumps(content, ensure_ascii=False)
