"""
sections/outline.py — indeks spisu treści dla wyświetlanego tekstu.

Indeks jest przeliczany w całości przy każdej zmianie tekstu (bez
aktualizacji przyrostowych). Identyfikatory wpisów są pozycyjne
("heading-{linia}") i pokrywają się z identyfikatorami bloków
EditableSurface, więc wstawienie linii przesuwa wszystkie kolejne id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal

from sections.patterns import find_headings

type ScrollBehavior = Literal["smooth", "auto"]
type ScrollCallback = Callable[[str, ScrollBehavior], None]

# Wcięcie jednego poziomu w spisie treści (px).
INDENT_PX = 16


@dataclass(frozen=True, slots=True)
class OutlineEntry:
    id: str
    level: int
    title: str
    line_index: int


class OutlineIndex:
    """Mapowanie id nagłówka → (poziom, tytuł, linia) + aktywne zaznaczenie."""

    def __init__(self, scroll_to: ScrollCallback | None = None) -> None:
        self._scroll_to = scroll_to
        self._entries: list[OutlineEntry] = []
        self._by_id: dict[str, OutlineEntry] = {}
        self._selected_id: str | None = None

    @property
    def entries(self) -> list[OutlineEntry]:
        return list(self._entries)

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def highlighted(self) -> frozenset[str]:
        """Zbiór wyróżnionych bloków — zawsze zero albo jeden element."""
        if self._selected_id is None:
            return frozenset()
        return frozenset({self._selected_id})

    def is_highlighted(self, entry_id: str) -> bool:
        return entry_id == self._selected_id

    def get(self, entry_id: str) -> OutlineEntry | None:
        return self._by_id.get(entry_id)

    def refresh(self, text: str) -> list[OutlineEntry]:
        self._entries = [
            OutlineEntry(
                id=occ.id,
                level=occ.level,
                title=occ.title,
                line_index=occ.line_index,
            )
            for occ in find_headings(text)
        ]
        self._by_id = {e.id: e for e in self._entries}
        if self._selected_id not in self._by_id:
            self._selected_id = None
        return self.entries

    def select(self, entry_id: str) -> bool:
        """
        Zaznacza nagłówek, przewija do niego i wyróżnia wyłącznie jego blok.

        Nieznane id → brak zmian, zwraca False.
        """
        if entry_id not in self._by_id:
            return False
        self._selected_id = entry_id
        if self._scroll_to is not None:
            self._scroll_to(entry_id, "smooth")
        return True

    def clear(self) -> None:
        self._entries = []
        self._by_id = {}
        self._selected_id = None


def indent(entry: OutlineEntry) -> int:
    return (entry.level - 1) * INDENT_PX
