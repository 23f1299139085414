"""Komenda: pdesk generate — upload dokumentu i scalanie strumienia pipeline'u."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.text import Text

from data_model.documents import FileRole
from data_model.events import Sender
from editor.session import DocumentSession
from pdesk.commands._io import load_document
from pipeline.client import PipelineClient
from pipeline.config import PipelineConfig

console = Console()

_SENDER_STYLE = {"user": "bold", "ai": "cyan", "system": "yellow"}


class _EchoSession(DocumentSession):
    """Sesja, która wypisuje każdy wpis logu na bieżąco."""

    def log(self, sender: Sender, message: str) -> None:
        super().log(sender, message)
        console.print(Text(message, style=_SENDER_STYLE.get(sender, "")))


def _write_derived(session: DocumentSession, out_dir: Path) -> int:
    out_dir.mkdir(parents=True, exist_ok=True)
    written = 0
    for f in session.files:
        if f.role is FileRole.UPLOAD:
            continue
        (out_dir / f.name).write_text(f.content, encoding="utf-8")
        written += 1
    return written


def run(args: argparse.Namespace) -> None:
    path = Path(args.file)
    data, _text = load_document(path)

    try:
        config = PipelineConfig.from_env()
    except ValueError as e:
        console.print(f"[red]Błąd konfiguracji:[/red] {e}")
        raise SystemExit(1)

    client = PipelineClient(args.api_url or config.api_url, timeout=config.timeout)
    final_step = args.final_step if args.final_step is not None else config.final_step

    session = _EchoSession(uploader=client)
    session.merger.preview_chars = config.preview_chars
    try:
        console.print(f"Przesyłanie [bold]{path.name}[/bold] do [cyan]{client.base_url}[/cyan] …")
        session.upload(path.name, data)
        for notice in session.notices:
            console.print(f"[yellow]{notice}[/yellow]")
        sections = session.sections_of(path.name)
        if sections:
            console.print(f"Sekcje ([bold]{len(sections)}[/bold]): " + ", ".join(f.name for f in sections))
        if session.server_path is None:
            raise SystemExit(1)

        if not session.generate(client, final_step=final_step):
            raise SystemExit(1)

        out_dir = Path(args.out) if args.out else path.parent
        n = _write_derived(session, out_dir)
        console.print(f"[green]Zapisano:[/green] {out_dir}  ({n} plików pochodnych)")
        if session.active_tree:
            console.print(f"Aktywne drzewo: [cyan]{session.active_tree}[/cyan]")
    finally:
        session.close()


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "generate",
        help="Przesyła dokument do pipeline'u i scala strumień zdarzeń.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Przesyła dokument na serwer (POST /api/upload), otwiera strumień SSE
pipeline'u i zapisuje pliki pochodne: sekcje, {nazwa}.tree.json,
{nazwa}.suggestion.txt.

Zmienne środowiskowe: PDESK_API_URL, PDESK_TIMEOUT, PDESK_FINAL_STEP,
PDESK_PREVIEW_CHARS (także z pliku .env).

Przykłady:
  pdesk generate paper.pdf
  pdesk generate paper.txt --api-url http://localhost:8000 --out out/
  pdesk generate paper.txt --final-step 7
        """,
    )
    p.add_argument(
        "file",
        metavar="PLIK",
        help="Ścieżka do dokumentu.",
    )
    p.add_argument(
        "--api-url",
        metavar="URL",
        default=None,
        help="Adres backendu (domyślnie: PDESK_API_URL).",
    )
    p.add_argument(
        "--final-step",
        metavar="N",
        type=int,
        default=None,
        help="Indeks kroku kończącego strumień (domyślnie: PDESK_FINAL_STEP).",
    )
    p.add_argument(
        "--out",
        metavar="KATALOG",
        default=None,
        help="Katalog na pliki pochodne (domyślnie: katalog dokumentu).",
    )
    p.set_defaults(func=run)
