"""
extraction/pdf_text.py — ekstrakcja zwykłego tekstu z dokumentów PDF.

Architektura:
  bajty PDF → fitz.open(stream=…) → tekst każdej strony (PyMuPDF "text")
  → join_pages() (numery stron, nagłówki/stopki, łamanie wyrazów)
  → jeden string z \n

Kluczowe funkcje publiczne:
  extract_pdf_text(data) -> str
"""

from __future__ import annotations

import fitz  # PyMuPDF

from extraction.errors import ExtractionError
from extraction.text_cleaner import join_pages


def extract_pdf_text(data: bytes) -> str:
    """
    Zwraca tekst dokumentu PDF (strony rozdzielone \\n).

    Raises:
        ExtractionError: plik nie jest poprawnym PDF-em albo nie ma tekstu.
    """
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as exc:  # FileDataError/EmptyFileError dziedziczą z RuntimeError
        raise ExtractionError(f"Nie można otworzyć PDF: {exc}") from exc
    try:
        pages = _extract_pages(doc)
    finally:
        doc.close()

    text = join_pages(pages)
    if not text:
        raise ExtractionError("PDF nie zawiera warstwy tekstowej.")
    return text


def _extract_pages(doc: fitz.Document) -> list[str]:
    """Zwraca listę stron jako surowy tekst (kolejność czytania PyMuPDF)."""
    pages: list[str] = []
    for page in doc:
        pages.append(page.get_text("text", sort=True))
    return pages
