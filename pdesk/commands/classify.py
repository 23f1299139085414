"""Komenda: pdesk classify — klasyfikacja pojedynczych linii."""

from __future__ import annotations

import argparse

from rich.console import Console
from rich.table import Table
from rich import box
from rich.text import Text

from sections.patterns import classify, numbering_depth

console = Console()


def run(args: argparse.Namespace) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        expand=False,
    )
    table.add_column("LINIA", no_wrap=False, max_width=60)
    table.add_column("NAGŁÓWEK", no_wrap=True, style="bold cyan")
    table.add_column("LVL", justify="right", no_wrap=True, style="dim")
    table.add_column("NUMER", justify="right", no_wrap=True, style="dim")

    for line in args.lines:
        match = classify(line)
        depth = numbering_depth(line)
        table.add_row(
            Text(line),
            match.title if match else "[dim]-[/dim]",
            str(match.level) if match else "-",
            str(depth) if depth else "-",
        )

    console.print()
    console.print(table)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "classify",
        help="Sprawdza, czy podane linie są nagłówkami sekcji.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Klasyfikuje każdą podaną linię: tytuł kanoniczny (Abstract, Introduction,
Related Work, Method, Experiment, Discussion, Conclusion) albo brak.

Przykłady:
  pdesk classify "2. Related Work" "Methods:" "Relatedworkish discussion"
        """,
    )
    p.add_argument(
        "lines",
        nargs="+",
        metavar="LINIA",
        help="Linie tekstu do sklasyfikowania.",
    )
    p.set_defaults(func=run)
