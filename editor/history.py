"""
editor/history.py — liniowa historia undo/redo na migawkach pełnego tekstu.

Niezmienniki:
  - past zawiera zawsze co najmniej migawkę z chwili załadowania dokumentu
    (podłoga undo = 1 wpis), więc pierwsza edycja jest od razu odwracalna;
  - każda nowa edycja czyści future (brak rozgałęzień redo).
"""

from __future__ import annotations


class EditHistory:

    def __init__(self, initial: str = "") -> None:
        self._past: list[str] = [initial]
        self._future: list[str] = []

    @property
    def past(self) -> tuple[str, ...]:
        return tuple(self._past)

    @property
    def future(self) -> tuple[str, ...]:
        return tuple(self._future)

    @property
    def can_undo(self) -> bool:
        return len(self._past) > 1

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    def reset(self, initial: str) -> None:
        """Nowy dokument/tytuł: past = [initial], future = []."""
        self._past = [initial]
        self._future = []

    def record_change(self, previous: str) -> None:
        self._past.append(previous)
        self._future.clear()

    def undo(self, current: str) -> str | None:
        """
        Zdejmuje ostatnią migawkę z past i zwraca ją jako nowy tekst.

        Bieżący tekst trafia na początek future. Przy podłodze (≤ 1 wpis)
        zwraca None i niczego nie zmienia.
        Zwracana jest zdjęta migawka, a nie nowy wierzchołek past: ten drugi
        to stan sprzed dwóch edycji, więc każde undo pomijałoby jedną zmianę.
        """
        if len(self._past) <= 1:
            return None
        previous = self._past.pop()
        self._future.insert(0, current)
        return previous

    def redo(self, current: str) -> str | None:
        if not self._future:
            return None
        following = self._future.pop(0)
        self._past.append(current)
        return following
