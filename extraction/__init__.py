"""
extraction — kolaborator ekstrakcji: plik → zwykły tekst.

Publiczne API:
  extract_text(name, data)  -> str   (ExtractionError przy porażce)
  read_document(name, data[, extractor, on_error]) -> str   (nigdy nie rzuca)
  placeholder_for(name)     -> str
  is_text_format(name)      -> bool
"""

from __future__ import annotations

from typing import Callable

from .errors import ExtractionError
from .html_text import extract_html_text
from .pdf_text import extract_pdf_text
from .text_cleaner import clean_text, join_pages

# Formaty czytane wprost jako UTF-8.
TEXT_EXTENSIONS = frozenset({"txt", "md", "json"})
HTML_EXTENSIONS = frozenset({"html", "htm"})


def extension_of(name: str) -> str:
    _stem, dot, ext = name.rpartition(".")
    return ext.lower() if dot else ""


def is_text_format(name: str) -> bool:
    return extension_of(name) in TEXT_EXTENSIONS


def placeholder_for(name: str) -> str:
    """Treść zastępcza, gdy ekstrakcja się nie udała — lista plików nie może być pusta."""
    if extension_of(name) == "pdf":
        return f"[Plik PDF: {name}] Podgląd nie jest jeszcze obsługiwany."
    return f"[Podgląd nieobsługiwany dla pliku: {name}]"


def extract_text(name: str, data: bytes) -> str:
    """
    Wyciąga tekst z pliku w formacie nietekstowym.

    Raises:
        ExtractionError: nieobsługiwany format albo błąd ekstrakcji.
    """
    ext = extension_of(name)
    if ext == "pdf":
        return extract_pdf_text(data)
    if ext in HTML_EXTENSIONS:
        return extract_html_text(data)
    raise ExtractionError(f"Nieobsługiwany format pliku: {name}")


def read_document(
    name: str,
    data: bytes,
    extractor: Callable[[str, bytes], str] = extract_text,
    on_error: Callable[[ExtractionError], None] | None = None,
) -> str:
    """
    Tekst dokumentu do edytora; nigdy nie rzuca.

    Formaty tekstowe są dekodowane wprost. Porażka ekstrakcji trafia do
    on_error (jeśli podany), a wynikiem jest placeholder_for(name).
    """
    if is_text_format(name):
        return data.decode("utf-8", errors="replace")
    try:
        return extractor(name, data)
    except ExtractionError as exc:
        if on_error is not None:
            on_error(exc)
        return placeholder_for(name)


__all__ = [
    "ExtractionError",
    "TEXT_EXTENSIONS",
    "HTML_EXTENSIONS",
    "extension_of",
    "is_text_format",
    "placeholder_for",
    "extract_text",
    "read_document",
    "extract_html_text",
    "extract_pdf_text",
    "clean_text",
    "join_pages",
]
