"""
data_model/events.py — zdarzenia strumienia pipeline'u i wiadomości czatu.

StreamEvent jest tworzony przez kolaboratora strumieniującego, konsumowany
dokładnie raz przez StreamMergeController i nigdy nie przechowywany.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal


class StepKind(StrEnum):
    """Rodzaj kroku pipeline'u (jawne pole lub heurystyka po nazwie)."""
    SUGGESTION = "suggestion"
    TREE       = "tree"
    FINAL      = "final"
    LOG        = "log"


type EventContent = str | dict[str, Any] | list[Any] | None


@dataclass(frozen=True, slots=True)
class StreamEvent:
    """
    Pojedyncza wiadomość z pipeline'u generowania.

    - step:    indeks kroku
    - name:    nazwa kroku, np. "split_tree", "audit", "finalize"
    - content: tekst, struktura JSON albo brak
    - kind:    opcjonalny, jawny rodzaj kroku podany przez producenta
    """
    step: int
    name: str
    content: EventContent = None
    kind: StepKind | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> StreamEvent:
        """Buduje zdarzenie ze zdekodowanej koperty JSON.

        Raises:
            ValueError: brak pól step/name lub niepoprawny typ.
        """
        if "step" not in payload or "name" not in payload:
            raise ValueError("Koperta zdarzenia wymaga pól 'step' i 'name'.")
        try:
            step = int(payload["step"])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Niepoprawny indeks kroku: {payload['step']!r}") from exc

        kind_raw = payload.get("kind")
        kind: StepKind | None = None
        if kind_raw is not None:
            try:
                kind = StepKind(str(kind_raw).lower())
            except ValueError:
                kind = None  # nieznany rodzaj → heurystyka po nazwie

        return cls(
            step=step,
            name=str(payload["name"]),
            content=payload.get("content"),
            kind=kind,
        )


type Sender = Literal["user", "ai", "system"]


@dataclass(frozen=True, slots=True)
class ChatMessage:
    sender: Sender
    message: str
