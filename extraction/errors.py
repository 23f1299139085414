"""Wyjątki kolaboratora ekstrakcji."""

from __future__ import annotations


class ExtractionError(RuntimeError):
    """Nie udało się wyciągnąć tekstu z pliku (format, uszkodzenie, brak tekstu)."""
