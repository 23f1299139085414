"""
sections/patterns.py — klasyfikator nagłówków sekcji artykułu.

Każdy HeadingPattern zawiera:
  - regex        : skompilowany wzorzec (dopasowanie całej linii)
  - extract_title: funkcja wyciągająca surowy tytuł z Match
  - kind         : "numbered" | "bare"

Wzorce są testowane w kolejności; pierwszy pasujący wzorzec rozstrzyga
(także negatywnie — numerowany nagłówek z nieznanym tytułem NIE przechodzi
do wzorca bez numeru).

Tytuł jest mapowany przez tablicę aliasów na jeden z kanonicznych tytułów
(CanonicalTitle). Poziom jest zawsze 1: kanonizacja spłaszcza hierarchię.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Callable, Literal, Mapping

from data_model.documents import HeadingMatch, HeadingOccurrence


class CanonicalTitle(StrEnum):
    ABSTRACT     = "Abstract"
    INTRODUCTION = "Introduction"
    RELATED_WORK = "Related Work"
    METHOD       = "Method"
    EXPERIMENT   = "Experiment"
    DISCUSSION   = "Discussion"
    CONCLUSION   = "Conclusion"


# Klucz: tytuł po normalize_key(); wartość: tytuł kanoniczny.
ALIASES: Mapping[str, CanonicalTitle] = MappingProxyType({
    "abstract":              CanonicalTitle.ABSTRACT,
    "introduction":          CanonicalTitle.INTRODUCTION,
    "relatedwork":           CanonicalTitle.RELATED_WORK,
    "method":                CanonicalTitle.METHOD,
    "methods":               CanonicalTitle.METHOD,
    "methodology":           CanonicalTitle.METHOD,
    "experiment":            CanonicalTitle.EXPERIMENT,
    "experiments":           CanonicalTitle.EXPERIMENT,
    "discussion":            CanonicalTitle.DISCUSSION,
    "resultsanddiscussion":  CanonicalTitle.DISCUSSION,
    "conclusion":            CanonicalTitle.CONCLUSION,
    "conclusions":           CanonicalTitle.CONCLUSION,
})

# Linie-szum, które wyglądają jak nagłówki, ale nimi nie są.
NOISE_LINES: frozenset[str] = frozenset({"contents", "table of contents"})

HEADING_LEVEL = 1

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_NON_ALNUM_RE  = re.compile(r"[^a-z0-9]+")


def normalize_key(text: str) -> str:
    """"Related-Work " → "relatedwork"."""
    return _NON_ALNUM_RE.sub("", text.lower())


def split_lines(text: str) -> list[str]:
    return _LINE_SPLIT_RE.split(text)


@dataclass(frozen=True, slots=True)
class HeadingPattern:
    regex: re.Pattern[str]
    extract_title: Callable[[re.Match[str]], str]
    kind: Literal["numbered", "bare"]


def _p(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE | re.UNICODE)


PATTERNS: list[HeadingPattern] = [
    # -------------------------------------------------------------------------
    # Numerowane: "2. Related Work", "3) Methods", "4.1. Experiments"
    # (kropka lub nawias po numerze jest wymagana: "2 Experiments" to treść)
    # -------------------------------------------------------------------------
    HeadingPattern(
        regex=_p(r"^(\d+(?:\.\d+)*)\s*[.)]\s*([A-Za-z][\w\s-]+?)\s*$"),
        extract_title=lambda m: m.group(2),
        kind="numbered",
    ),

    # -------------------------------------------------------------------------
    # Bez numeru: cała linia (opcjonalnie z dwukropkiem) musi być słowem
    # kluczowym, samo zawieranie słowa kluczowego nie wystarcza.
    # -------------------------------------------------------------------------
    HeadingPattern(
        regex=_p(
            r"^(Abstract|Introduction|Related\s*Work|Methods?|Methodology|"
            r"Experiments?|Discussion|Conclusions?)\s*:?$"
        ),
        extract_title=lambda m: m.group(1),
        kind="bare",
    ),
]

_NUMBER_PREFIX_RE = PATTERNS[0].regex


def classify(line: str) -> HeadingMatch | None:
    """
    Rozstrzyga, czy linia jest nagłówkiem sekcji.

    Zwraca HeadingMatch(title, level=1) albo None. Nigdy nie rzuca wyjątku —
    nierozpoznana linia po prostu zostaje treścią.
    """
    stripped = line.strip()
    if not stripped:
        return None
    if stripped.lower() in NOISE_LINES:
        return None

    for pat in PATTERNS:
        m = pat.regex.match(stripped)
        if m is None:
            continue
        canonical = ALIASES.get(normalize_key(pat.extract_title(m)))
        if canonical is None:
            return None
        return HeadingMatch(title=canonical.value, level=HEADING_LEVEL)

    return None


def numbering_depth(line: str) -> int:
    """Liczba składowych numeru nagłówka: "3.1.2. Methods" → 3, brak numeru → 0."""
    m = _NUMBER_PREFIX_RE.match(line.strip())
    if m is None:
        return 0
    return len(m.group(1).split("."))


def find_headings(text: str) -> list[HeadingOccurrence]:
    """Wszystkie rozpoznane nagłówki w kolejności dokumentu (bez deduplikacji)."""
    found: list[HeadingOccurrence] = []
    for index, line in enumerate(split_lines(text)):
        match = classify(line)
        if match is not None:
            found.append(HeadingOccurrence(
                line_index=index,
                level=match.level,
                title=match.title,
            ))
    return found
