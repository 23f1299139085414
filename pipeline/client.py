"""
pipeline/client.py — kolaboratorzy HTTP backendu pipeline'u.

Endpointy:
  POST /api/upload                          multipart "file" → {"file_path": …}
  GET  /api/pipeline/stream?file_path=…     text/event-stream z kopertami JSON
  GET  /api/pipeline/result?file_path=…     {"suggestion"?: str, "tree"?: JSON}

Publiczne API:
  PipelineClient(base_url, timeout).upload(name, data)   -> str
  PipelineClient(...).open_stream(file_path)             -> PipelineStream
  PipelineClient(...).fetch_results(file_path)           -> dict
  iter_sse_data(lines)                                   -> Iterator[str]
"""

from __future__ import annotations

import sys
from typing import Any, Iterable, Iterator

import requests

from pipeline.config import PipelineConfig


class PipelineError(RuntimeError):
    """Błąd kolaboratora HTTP (upload, strumień, wyniki)."""


# ---------------------------------------------------------------------------
# Ramkowanie SSE
# ---------------------------------------------------------------------------

def iter_sse_data(lines: Iterable[str | bytes]) -> Iterator[str]:
    """
    Zwraca pola "data" kolejnych zdarzeń SSE.

    Linie "data:" jednego zdarzenia są sklejane przez \\n; zdarzenie jest
    wysyłane na pustej linii. Komentarze (":") i pola event/id/retry są
    pomijane. Niedokończone zdarzenie na końcu strumienia jest odrzucane.
    """
    buf: list[str] = []
    for raw in lines:
        line = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        line = line.rstrip("\r")
        if not line:
            if buf:
                yield "\n".join(buf)
                buf = []
            continue
        if line.startswith(":"):
            continue
        field, _sep, value = line.partition(":")
        if field != "data":
            continue
        buf.append(value[1:] if value.startswith(" ") else value)


class PipelineStream:
    """Jednokierunkowy strumień zdarzeń; iteracja zwraca surowe pola data."""

    def __init__(self, response: requests.Response) -> None:
        self._response = response
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[str]:
        if self._closed:
            return iter(())
        return iter_sse_data(self._response.iter_lines(decode_unicode=True))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._response.close()


# ---------------------------------------------------------------------------
# Klient
# ---------------------------------------------------------------------------

class PipelineClient:

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = session or requests.Session()

    @classmethod
    def from_config(cls, config: PipelineConfig) -> PipelineClient:
        return cls(config.api_url, timeout=config.timeout)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def upload(self, name: str, data: bytes) -> str:
        """
        Wysyła plik na serwer i zwraca przydzieloną ścieżkę (file_path).

        Raises:
            PipelineError: błąd sieci, status ≥ 400 lub brak file_path.
        """
        try:
            resp = self._http.post(
                self._url("/api/upload"),
                files={"file": (name, data)},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            raise PipelineError(f"Przesyłanie pliku nie powiodło się: {exc}") from exc
        except ValueError as exc:
            raise PipelineError("Serwer zwrócił niepoprawny JSON po przesłaniu pliku.") from exc

        file_path = payload.get("file_path") if isinstance(payload, dict) else None
        if not file_path:
            raise PipelineError("Odpowiedź serwera nie zawiera file_path.")
        return str(file_path)

    def open_stream(self, file_path: str) -> PipelineStream:
        """
        Otwiera strumień SSE pipeline'u dla pliku przesłanego przez upload().

        Raises:
            ValueError:    pusty file_path (najpierw upload()).
            PipelineError: błąd połączenia lub status ≥ 400.
        """
        if not file_path:
            raise ValueError("file_path jest pusty. Najpierw prześlij plik przez upload().")
        try:
            resp = self._http.get(
                self._url("/api/pipeline/stream"),
                params={"file_path": file_path},
                headers={"Accept": "text/event-stream"},
                stream=True,
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise PipelineError(f"Nie można otworzyć strumienia: {exc}") from exc
        return PipelineStream(resp)

    def fetch_results(self, file_path: str) -> dict[str, Any]:
        """
        Pobiera skonsolidowane wyniki ({"suggestion"?, "tree"?}).

        Niepoprawny JSON nie jest błędem — zwraca {} z ostrzeżeniem na stderr.

        Raises:
            PipelineError: błąd sieci lub status ≥ 400.
        """
        try:
            resp = self._http.get(
                self._url("/api/pipeline/result"),
                params={"file_path": file_path},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise PipelineError(f"Nie można pobrać wyników: {exc}") from exc

        try:
            payload = resp.json()
        except ValueError:
            print("[warn] wyniki pipeline'u nie są poprawnym JSON-em — pomijam.", file=sys.stderr)
            return {}
        return payload if isinstance(payload, dict) else {}
