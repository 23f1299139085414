"""Komenda: pdesk sections — podział dokumentu na pliki sekcji."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich import box

from data_model.documents import SpanList, VirtualFile
from pdesk.commands._io import load_document
from sections.materializer import materialize
from sections.segmenter import segment

console = Console()


# ---------------------------------------------------------------------------
# Zapis plików sekcji
# ---------------------------------------------------------------------------

def _write_files(files: list[VirtualFile], out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    for f in files:
        (out_dir / f.name).write_text(f.content, encoding="utf-8")
    console.print(f"[green]Zapisano:[/green] {out_dir}  ({len(files)} plików sekcji)")


# ---------------------------------------------------------------------------
# Wyświetlanie w terminalu
# ---------------------------------------------------------------------------

def _show_table(spans: SpanList) -> None:
    if not spans:
        console.print("[yellow]Brak sekcji.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("SEKCJA", no_wrap=True, style="bold cyan")
    table.add_column("LINIE",  justify="center", no_wrap=True)
    table.add_column("LEN",    justify="right", no_wrap=True)
    table.add_column("POCZĄTEK", no_wrap=False, max_width=60)

    for span in spans:
        first_line = span.body.split("\n", 1)[0]
        table.add_row(
            span.title,
            f"{span.start_line}–{span.end_line}",
            str(len(span.body)),
            first_line[:80],
        )

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(spans)} sekcji[/dim]\n")


# ---------------------------------------------------------------------------
# Główna logika komendy
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    path = Path(args.file)
    _data, text = load_document(path)

    spans = segment(text)
    if not spans:
        console.print(
            "[yellow]Nie znaleziono nagłówków sekcji — dokument pozostaje niepodzielony.[/yellow]"
        )
        return

    console.print(f"Znaleziono [bold]{len(spans)}[/bold] sekcji w [bold]{path.name}[/bold].")

    if not args.dry_run:
        out_dir = Path(args.out) if args.out else path.parent
        _write_files(materialize(path.name, text), out_dir)

    if args.show:
        _show_table(spans)


# ---------------------------------------------------------------------------
# Rejestracja parsera
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "sections",
        help="Dzieli dokument na pliki sekcji (__Tytuł.section.txt).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Dzieli dokument (.txt, .md, .json, .pdf, .html) na sekcje kanoniczne i
zapisuje każdą jako {nazwa}__{Tytuł}.section.txt.

Przykłady:
  pdesk sections paper.pdf --show
  pdesk sections paper.txt --out sections/
  pdesk sections paper.txt --dry-run --show
        """,
    )
    p.add_argument(
        "file",
        metavar="PLIK",
        help="Ścieżka do dokumentu.",
    )
    p.add_argument(
        "--out",
        metavar="KATALOG",
        default=None,
        help="Katalog na pliki sekcji (domyślnie: katalog dokumentu).",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Nie zapisuj plików, tylko pokaż wynik.",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Wyświetl tabelę sekcji w terminalu.",
    )
    p.set_defaults(func=run)
