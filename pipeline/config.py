"""
pipeline/config.py — konfiguracja połączenia z backendem pipeline'u.

Zmienne środowiskowe:
  PDESK_API_URL        adres backendu (domyślnie http://localhost:8000)
  PDESK_TIMEOUT        timeout HTTP w sekundach (domyślnie 30)
  PDESK_FINAL_STEP     indeks kroku kończącego strumień (opcjonalnie)
  PDESK_PREVIEW_CHARS  długość podglądu treści w logu czatu (domyślnie 120)

Opcjonalnie plik .env w katalogu głównym projektu:
  PDESK_API_URL=http://localhost:8000
"""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(pathlib.Path(__file__).resolve().parent.parent / ".env", override=True)

DEFAULT_API_URL       = "http://localhost:8000"
DEFAULT_TIMEOUT       = 30.0
DEFAULT_PREVIEW_CHARS = 120


def _int_or_none(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    return int(raw)


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    final_step: int | None = None
    preview_chars: int = DEFAULT_PREVIEW_CHARS

    @classmethod
    def from_env(cls) -> PipelineConfig:
        """
        Raises:
            ValueError: wartość liczbową nie da się sparsować.
        """
        return cls(
            api_url       = os.getenv("PDESK_API_URL", DEFAULT_API_URL).rstrip("/"),
            timeout       = float(os.getenv("PDESK_TIMEOUT", str(DEFAULT_TIMEOUT))),
            final_step    = _int_or_none(os.getenv("PDESK_FINAL_STEP")),
            preview_chars = int(os.getenv("PDESK_PREVIEW_CHARS", str(DEFAULT_PREVIEW_CHARS))),
        )
