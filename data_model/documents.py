"""
data_model/documents.py — model nagłówków, sekcji i plików wirtualnych.

HeadingOccurrence odpowiada jednej linii rozpoznanej jako nagłówek;
SectionSpan to ciągły zakres linii przypisany jednemu kanonicznemu tytułowi;
VirtualFile to nazwany artefakt tekstowy w pamięci (upload, sekcja, drzewo,
sugestia).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# Sufiksy nazw plików pochodnych: jedyny "format" widoczny na zewnątrz.
SECTION_SUFFIX    = ".section.txt"
TREE_SUFFIX       = ".tree.json"
SUGGESTION_SUFFIX = ".suggestion.txt"
SECTION_SEPARATOR = "__"


def heading_id(line_index: int) -> str:
    """Pozycyjny identyfikator bloku/nagłówka, np. 3 → "heading-3"."""
    return f"heading-{line_index}"


@dataclass(frozen=True, slots=True)
class HeadingMatch:
    title: str   # kanoniczny tytuł, np. "Related Work"
    level: int   # zawsze 1 w uproszczonym schemacie kanonicznym


@dataclass(frozen=True, slots=True)
class HeadingOccurrence:
    line_index: int   # 0-based indeks linii w bieżącym tekście
    level: int
    title: str

    @property
    def id(self) -> str:
        return heading_id(self.line_index)


@dataclass(frozen=True, slots=True)
class SectionSpan:
    title: str        # unikalny w obrębie dokumentu
    start_line: int   # linia nagłówka
    end_line: int     # wyłącznie; linia następnego nagłówka lub koniec
    body: str         # treść bez linii nagłówka, przycięta


class FileRole(StrEnum):
    """Rola pliku wirtualnego, wyprowadzana wyłącznie z nazwy."""
    UPLOAD     = "upload"
    SECTION    = "section"
    TREE       = "tree"
    SUGGESTION = "suggestion"


def role_of(name: str) -> FileRole:
    if name.endswith(SECTION_SUFFIX) and SECTION_SEPARATOR in name:
        return FileRole.SECTION
    if name.endswith(TREE_SUFFIX):
        return FileRole.TREE
    if name.endswith(SUGGESTION_SUFFIX):
        return FileRole.SUGGESTION
    return FileRole.UPLOAD


@dataclass(slots=True)
class VirtualFile:
    name: str
    content: str

    @property
    def role(self) -> FileRole:
        return role_of(self.name)


# Kolekcja spanów w kolejności dokumentu.
type SpanList = list[SectionSpan]
