"""Komenda: pdesk outline — spis treści dokumentu."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich import box

from pdesk.commands._io import load_document
from sections.outline import OutlineIndex, indent

console = Console()


def run(args: argparse.Namespace) -> None:
    path = Path(args.file)
    _data, text = load_document(path)

    index = OutlineIndex()
    entries = index.refresh(text)
    if not entries:
        console.print("[yellow]Brak nagłówków.[/yellow]")
        return

    if args.select and not index.select(args.select):
        console.print(f"[yellow]Nieznany nagłówek:[/yellow] {args.select}")

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        expand=False,
    )
    table.add_column("ID", no_wrap=True, style="dim")
    table.add_column("LVL", justify="right", no_wrap=True)
    table.add_column("TYTUŁ", no_wrap=True)
    table.add_column("LINIA", justify="right", no_wrap=True)

    for entry in entries:
        # 8 px wcięcia na jedną spację terminala
        title = " " * (indent(entry) // 8) + entry.title
        if index.is_highlighted(entry.id):
            title = f"[bold blue]{title}[/bold blue]"
        table.add_row(entry.id, str(entry.level), title, str(entry.line_index))

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(entries)} nagłówków[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "outline",
        help="Wyświetla spis treści dokumentu.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wypisuje wszystkie rozpoznane nagłówki (bez deduplikacji) z pozycyjnymi
identyfikatorami heading-{linia}.

Przykłady:
  pdesk outline paper.txt
  pdesk outline paper.txt --select heading-12
        """,
    )
    p.add_argument(
        "file",
        metavar="PLIK",
        help="Ścieżka do dokumentu.",
    )
    p.add_argument(
        "--select",
        metavar="ID",
        default=None,
        help="Wyróżnij nagłówek o podanym id.",
    )
    p.set_defaults(func=run)
