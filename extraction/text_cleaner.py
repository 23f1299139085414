"""
extraction/text_cleaner.py — oczyszczanie tekstu wyciągniętego z dokumentu.

Co usuwamy:
  - Numery stron (izolowana cyfra/ciąg cyfr w osobnej linii)
  - Nagłówki/stopki stron (krótka linia powtarzająca się na wielu stronach)
  - Artefakty łamania wyrazów z myślnikami ("experi-\nment" → "experiment")
  - Nadmiarowe białe znaki w środku linii

Co zachowujemy:
  - Podział na linie (nagłówki sekcji muszą zostać w osobnych liniach)
  - Pojedyncze puste linie między akapitami

Format wyjściowy: plain text z \n, bez tagów HTML/Markdown.
"""

from __future__ import annotations

import re
from collections import defaultdict

from sections.patterns import classify

# ---------------------------------------------------------------------------
# Stałe
# ---------------------------------------------------------------------------

# Minimalna liczba stron, na których linia musi się powtarzać,
# żeby uznać ją za nagłówek/stopkę.
_REPEAT_MIN_PAGES = 2

# Dłuższe linie to treść, nie nagłówek/stopka strony.
_REPEAT_MAX_LEN = 80

# Wzorzec dla samotnego numeru strony.
_PAGE_NUMBER_RE = re.compile(r"^\s*\d{1,4}\s*$")

# Wzorzec łamania wyrazu z myślnikiem na końcu linii.
_HYPHEN_BREAK_RE = re.compile(r"([a-z])-\n([a-z])")

# Nadmiarowe spacje w środku linii.
_MULTI_SPACE_RE = re.compile(r"(?<=\S)[ \t]{2,}")

_BLANK_RUN_RE = re.compile(r"\n{3,}")


# ---------------------------------------------------------------------------
# Publiczne API
# ---------------------------------------------------------------------------

def collect_repeated_lines(pages: list[str]) -> set[str]:
    """
    Zbiera krótkie linie powtarzające się na co najmniej _REPEAT_MIN_PAGES
    stronach → to nagłówki/stopki do usunięcia (np. "Preprint. Under review.").

    Linie rozpoznawane jako nagłówki sekcji nigdy nie są usuwane.
    """
    line_page_count: dict[str, int] = defaultdict(int)
    for page in pages:
        seen_on_page: set[str] = set()
        for line in page.splitlines():
            text = line.strip()
            if not text or len(text) > _REPEAT_MAX_LEN or _PAGE_NUMBER_RE.match(text):
                continue
            if classify(text) is not None:
                continue
            if text not in seen_on_page:
                seen_on_page.add(text)
                line_page_count[text] += 1
    return {t for t, c in line_page_count.items() if c >= _REPEAT_MIN_PAGES}


def clean_page(page: str, repeated_lines: set[str]) -> str:
    """Usuwa numery stron i powtarzające się nagłówki/stopki z jednej strony."""
    kept: list[str] = []
    for line in page.splitlines():
        text = line.strip()
        if text in repeated_lines or _PAGE_NUMBER_RE.match(line):
            continue
        kept.append(_MULTI_SPACE_RE.sub(" ", line.rstrip()))
    return "\n".join(kept)


def join_pages(pages: list[str]) -> str:
    """Oczyszcza i scala strony w jeden tekst."""
    repeated = collect_repeated_lines(pages) if len(pages) >= _REPEAT_MIN_PAGES else set()
    return clean_text("\n".join(clean_page(p, repeated) for p in pages))


def clean_text(text: str) -> str:
    """Oczyszczanie niezależne od stron: łamanie wyrazów, puste linie."""
    text = text.replace("\r\n", "\n")
    text = _HYPHEN_BREAK_RE.sub(r"\1\2", text)
    text = "\n".join(
        "" if _PAGE_NUMBER_RE.match(line) else _MULTI_SPACE_RE.sub(" ", line.rstrip())
        for line in text.split("\n")
    )
    # Normalizuj nadmiarowe puste linie (max 1 pusta linia)
    text = _BLANK_RUN_RE.sub("\n\n", text)
    return text.strip()
