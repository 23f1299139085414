"""Wspólne wczytywanie dokumentu dla komend CLI."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from extraction import ExtractionError, extract_text, is_text_format

console = Console()


def load_document(path: Path) -> tuple[bytes, str]:
    """
    Zwraca (bajty, tekst) pliku; kończy komendę przy błędzie.

    W odróżnieniu od sesji CLI nie podstawia placeholdera — błąd ekstrakcji
    jest od razu zgłaszany użytkownikowi.
    """
    if not path.exists():
        console.print(f"[red]Plik nie istnieje:[/red] {path}")
        raise SystemExit(1)

    data = path.read_bytes()
    if is_text_format(path.name):
        return data, data.decode("utf-8", errors="replace")

    try:
        return data, extract_text(path.name, data)
    except ExtractionError as e:
        console.print(f"[red]Błąd ekstrakcji:[/red] {e}")
        raise SystemExit(1)
