"""
sections — rozpoznawanie nagłówków i podział dokumentu na sekcje.

Publiczne API:
  classify(line)                    -> HeadingMatch | None
  find_headings(text)               -> list[HeadingOccurrence]
  segment(text)                     -> list[SectionSpan]
  materialize(base_file_name, text) -> list[VirtualFile]
  OutlineIndex                      — spis treści + aktywne zaznaczenie
"""

from .patterns import (
    ALIASES,
    CanonicalTitle,
    classify,
    find_headings,
    normalize_key,
    numbering_depth,
    split_lines,
)
from .segmenter import join_bodies, segment
from .materializer import (
    base_name,
    materialize,
    section_file_name,
    source_of,
    suggestion_file_name,
    tree_file_name,
)
from .outline import OutlineEntry, OutlineIndex, indent

__all__ = [
    "ALIASES",
    "CanonicalTitle",
    "classify",
    "find_headings",
    "normalize_key",
    "numbering_depth",
    "split_lines",
    "join_bodies",
    "segment",
    "base_name",
    "materialize",
    "section_file_name",
    "source_of",
    "suggestion_file_name",
    "tree_file_name",
    "OutlineEntry",
    "OutlineIndex",
    "indent",
]
