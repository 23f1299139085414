"""
sections/segmenter.py — podział tekstu dokumentu na spany sekcji.

Architektura:
  text → split_lines() → classify() dla każdej linii
  → deduplikacja (pierwsze wystąpienie tytułu wygrywa)
  → spany od nagłówka do następnego zachowanego nagłówka (lub końca)
  → odrzucenie spanów z pustą treścią

Funkcja czysta: ten sam tekst zawsze daje te same spany.

Kluczowe funkcje publiczne:
  segment(text) -> SpanList
"""

from __future__ import annotations

from data_model.documents import SectionSpan, SpanList
from sections.patterns import classify, split_lines


def segment(text: str) -> SpanList:
    """
    Zwraca spany sekcji w kolejności dokumentu.

    Pusta lista oznacza dokument bez rozpoznanych nagłówków — wywołujący
    traktuje wtedy cały tekst jako niepodzielony.

    Późniejsze powtórzenia tego samego tytułu nie otwierają nowego spanu;
    zostają w treści spanu poprzedzającego.
    """
    lines = split_lines(text)
    heads = _unique_heads(lines)
    if not heads:
        return []

    spans: SpanList = []
    for idx, (title, line_index) in enumerate(heads):
        end = heads[idx + 1][1] if idx + 1 < len(heads) else len(lines)
        body = "\n".join(lines[line_index + 1:end]).strip()
        if not body:
            continue
        spans.append(SectionSpan(
            title=title,
            start_line=line_index,
            end_line=end,
            body=body,
        ))
    return spans


def join_bodies(spans: SpanList) -> str:
    """Skleja treści spanów w kolejności (linie nagłówków są pominięte)."""
    return "\n".join(s.body for s in spans)


def _unique_heads(lines: list[str]) -> list[tuple[str, int]]:
    """(tytuł, indeks linii) dla pierwszego wystąpienia każdego tytułu."""
    seen: set[str] = set()
    heads: list[tuple[str, int]] = []
    for index, line in enumerate(lines):
        match = classify(line)
        if match is None or match.title in seen:
            continue
        seen.add(match.title)
        heads.append((match.title, index))
    return heads
