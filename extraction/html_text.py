"""extraction/html_text.py — zwykły tekst z dokumentu HTML (jeden blok na linię)."""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from extraction.errors import ExtractionError
from extraction.text_cleaner import clean_text

# Tagi blokowe (determinują granice linii tekstu)
_HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
_BLOCK_TAGS: set[str] = {
    "div", "p", "article", "section", "main", "aside", "nav",
    "header", "footer", "blockquote", "pre",
    "li", "ul", "ol",
    "td", "th", "tr", "table",
    "figcaption", "details", "summary",
} | _HEADING_TAGS

# Tagi zawierające szum (nie treść)
_NOISE_TAGS = {"script", "style", "noscript", "head"}


def _extract_blocks(body: Tag) -> list[str]:
    """
    Przechodzi drzewo DOM i zwraca spłaszczoną listę tekstów bloków.

    - Nagłówek (h1–h6): osobna linia, bez rekurencji w dzieci — dzięki temu
      "<h2>2. Related Work</h2>" zostaje rozpoznany przez klasyfikator.
    - Blok liściasty (brak blokowych dzieci): emituje cały swój tekst.
    - Kontener (blok z blokowymi dziećmi, body, elementy inline): rekuruje w
      bloki; luźny tekst pomiędzy nimi staje się osobną linią.
    """
    blocks: list[str] = []

    def walk(el: Tag) -> None:
        name = el.name
        if name in _NOISE_TAGS:
            return
        is_leaf = name in _HEADING_TAGS or not any(
            isinstance(c, Tag) and c.name in _BLOCK_TAGS for c in el.children
        )
        if name in _BLOCK_TAGS and is_leaf:
            text = el.get_text(" ", strip=True)
            if text:
                blocks.append(text)
            return

        # kontener (body, div z blokami, span itp.): luźny tekst między
        # blokami jest sklejany w osobną linię, bloki są przechodzone rekurencyjnie
        run: list[str] = []

        def flush() -> None:
            text = " ".join(run)
            if text:
                blocks.append(text)
            run.clear()

        for child in el.children:
            if isinstance(child, Tag):
                if child.name in _BLOCK_TAGS or child.find(_BLOCK_TAGS) is not None:
                    flush()
                    walk(child)
                elif child.name not in _NOISE_TAGS:
                    text = child.get_text(" ", strip=True)
                    if text:
                        run.append(text)
            elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
                text = child.strip()
                if text:
                    run.append(text)
        flush()

    walk(body)
    return blocks


def extract_html_text(data: bytes) -> str:
    """
    Raises:
        ExtractionError: dokument nie zawiera żadnego tekstu.
    """
    soup = BeautifulSoup(data, "html.parser")

    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()

    body: Tag = soup.find("body") or soup  # type: ignore[assignment]
    text = clean_text("\n".join(_extract_blocks(body)))
    if not text:
        raise ExtractionError("Dokument HTML nie zawiera tekstu.")
    return text
