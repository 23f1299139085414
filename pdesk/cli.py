"""
pdesk — narzędzie CLI dla paperdesk.

Użycie:
  pdesk <komenda> [opcje]

Komendy:
  classify   Sprawdza, czy podane linie są nagłówkami sekcji.
  sections   Dzieli dokument na pliki sekcji (__Tytuł.section.txt).
  outline    Wyświetla spis treści dokumentu (id, poziom, tytuł, linia).
  generate   Przesyła dokument do pipeline'u i scala strumień zdarzeń.
"""

from __future__ import annotations

import argparse
import sys

# Windows: terminal może używać cp1252, więc wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from pdesk.commands import classify as cmd_classify
from pdesk.commands import sections as cmd_sections
from pdesk.commands import outline as cmd_outline
from pdesk.commands import generate as cmd_generate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdesk",
        description="paperdesk — podział artykułów na sekcje i scalanie sugestii.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="pdesk 0.1.0"
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_classify.add_parser(subparsers)
    cmd_sections.add_parser(subparsers)
    cmd_outline.add_parser(subparsers)
    cmd_generate.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
