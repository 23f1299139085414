"""
sections/materializer.py — zamiana spanów na wirtualne pliki sekcji.

Konwencje nazw (jedyny zewnętrzny "format", muszą być zachowane dokładnie):
  {base}__{Tytuł}.section.txt   — plik sekcji
  {base}.tree.json              — drzewo z pipeline'u
  {base}.suggestion.txt         — sugestia z pipeline'u

gdzie base = nazwa pliku źródłowego bez ostatniego rozszerzenia.
"""

from __future__ import annotations

from data_model.documents import (
    SECTION_SEPARATOR,
    SECTION_SUFFIX,
    SUGGESTION_SUFFIX,
    TREE_SUFFIX,
    VirtualFile,
)
from sections.segmenter import segment


def base_name(file_name: str) -> str:
    """"paper.v2.pdf" → "paper.v2"; nazwa bez rozszerzenia pozostaje bez zmian."""
    stem, dot, _ext = file_name.rpartition(".")
    if not dot or not stem:
        return file_name
    return stem


def section_file_name(base: str, title: str) -> str:
    return f"{base}{SECTION_SEPARATOR}{title}{SECTION_SUFFIX}"


def tree_file_name(base: str) -> str:
    return f"{base}{TREE_SUFFIX}"


def suggestion_file_name(base: str) -> str:
    return f"{base}{SUGGESTION_SUFFIX}"


def source_of(name: str) -> tuple[str, str] | None:
    """Odwrotność section_file_name(): zwraca (base, tytuł) albo None."""
    if not name.endswith(SECTION_SUFFIX):
        return None
    stem = name[: -len(SECTION_SUFFIX)]
    base, sep, title = stem.rpartition(SECTION_SEPARATOR)
    if not sep or not base or not title:
        return None
    return base, title


def materialize(base_file_name: str, text: str) -> list[VirtualFile]:
    """
    Zwraca pliki sekcji w kolejności spanów.

    Pusta lista gdy segmentacja nic nie znalazła — wywołujący MUSI wtedy
    zostawić oryginalny plik jako wybieralną pozycję.
    """
    base = base_name(base_file_name)
    return [
        VirtualFile(name=section_file_name(base, span.title), content=span.body)
        for span in segment(text)
    ]
