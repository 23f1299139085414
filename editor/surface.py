"""
editor/surface.py — kontroler edytowalnej powierzchni tekstu.

Powierzchnia (dowolny toolkit UI) pokazuje tekst jako listę bloków — jeden
blok na linię, z pozycyjnym id "heading-{i}". Kontroler:
  - renderuje tekst do bloków (render_blocks),
  - odtwarza tekst z bloków zgłoszonych przez powierzchnię (reconstruct_text),
  - pilnuje kursora jako liniowego offsetu w tekście (caret_offset /
    locate_caret) przez każde programowe przerenderowanie,
  - przepuszcza sesje kompozycji IME (COMPOSING) bez fragmentowania historii,
  - zapisuje zmiany w EditHistory.

Offset kursora liczy separatory linii, więc jest offsetem w zwykłym tekście
zwracanym przez reconstruct_text().
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Sequence

from data_model.documents import heading_id
from editor.history import EditHistory
from sections.patterns import split_lines


class SurfaceState(StrEnum):
    IDLE      = "idle"
    COMPOSING = "composing"


@dataclass(slots=True)
class LineBlock:
    """
    Jeden blok linii.

    - id:          "heading-{i}" dla bloków z renderu; None dla bloków
                   wstawionych przez powierzchnię edycji
    - text:        tekst linii (bez "\\n")
    - placeholder: pusta linia renderowana jako jawne złamanie wiersza
    """
    id: str | None
    text: str
    placeholder: bool = False

    @property
    def is_artifact(self) -> bool:
        """Pusty akapit, który nie jest placeholderem pustej linii."""
        return not self.text and not self.placeholder


type BlockInput = LineBlock | str
type ChangeCallback = Callable[[str], None]


# ---------------------------------------------------------------------------
# Render / rekonstrukcja
# ---------------------------------------------------------------------------

def render_blocks(text: str) -> list[LineBlock]:
    blocks = [
        LineBlock(id=heading_id(i), text=line, placeholder=not line)
        for i, line in enumerate(split_lines(text))
    ]
    return prune_artifacts(blocks)


def prune_artifacts(blocks: Sequence[LineBlock]) -> list[LineBlock]:
    return [b for b in blocks if not b.is_artifact]


def coerce_blocks(blocks: Sequence[BlockInput]) -> list[LineBlock]:
    """Pozwala powierzchni zgłaszać bloki jako gołe stringi."""
    out: list[LineBlock] = []
    for b in blocks:
        if isinstance(b, LineBlock):
            out.append(b)
        else:
            out.append(LineBlock(id=None, text=b, placeholder=not b))
    return out


def reconstruct_text(blocks: Sequence[BlockInput]) -> str:
    return "\n".join(b.text for b in prune_artifacts(coerce_blocks(blocks)))


# ---------------------------------------------------------------------------
# Arytmetyka kursora
# ---------------------------------------------------------------------------

def caret_offset(blocks: Sequence[LineBlock], block_index: int, inner_offset: int) -> int:
    """(blok, offset w bloku) → liniowy offset w tekście."""
    if not blocks:
        return 0
    block_index = max(0, min(block_index, len(blocks) - 1))
    offset = sum(len(b.text) + 1 for b in blocks[:block_index])
    return offset + max(0, min(inner_offset, len(blocks[block_index].text)))


def locate_caret(blocks: Sequence[LineBlock], offset: int) -> tuple[int, int] | None:
    """
    Liniowy offset → (indeks bloku, offset w bloku).

    Przechodzi bloki w kolejności, sumując długości, aż offset wpadnie do
    bloku; offset wewnętrzny jest przycinany do długości bloku. Offset za
    końcem tekstu ląduje na końcu ostatniego bloku. Brak bloków → None.
    """
    if not blocks:
        return None
    start = 0
    for index, block in enumerate(blocks):
        length = len(block.text)
        if offset <= start + length:
            return index, max(0, min(offset - start, length))
        start += length + 1
    last = len(blocks) - 1
    return last, len(blocks[last].text)


# ---------------------------------------------------------------------------
# Kontroler
# ---------------------------------------------------------------------------

class EditableSurface:
    """Stan IDLE | COMPOSING nad buforem tekstu, blokami i historią."""

    def __init__(
        self,
        history: EditHistory | None = None,
        on_change: ChangeCallback | None = None,
        on_undo: ChangeCallback | None = None,
    ) -> None:
        self.history = history or EditHistory()
        self.on_change = on_change
        self.on_undo = on_undo
        self.title = ""
        self._text = ""
        self._blocks: list[LineBlock] = render_blocks("")
        self._state = SurfaceState.IDLE
        self._offset: int | None = None
        self._caret: tuple[int, int] | None = None

    # -- odczyt ---------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def blocks(self) -> list[LineBlock]:
        return list(self._blocks)

    @property
    def state(self) -> SurfaceState:
        return self._state

    @property
    def caret_offset(self) -> int | None:
        """Ostatnio przechwycony liniowy offset kursora (None = nigdy)."""
        return self._offset

    @property
    def caret(self) -> tuple[int, int] | None:
        """(blok, offset w bloku) po ostatnim renderze; None = pozycja domyślna."""
        return self._caret

    # -- cykl życia dokumentu -------------------------------------------------

    def load(self, title: str, text: str) -> None:
        """Nowy dokument: historia = [text], kursor niezapamiętany."""
        self.title = title
        self._text = text
        self._state = SurfaceState.IDLE
        self._offset = None
        self.history.reset(text)
        self._render()

    # -- zdarzenia wejścia ----------------------------------------------------

    def handle_input(self, blocks: Sequence[BlockInput], caret: int | None = None) -> bool:
        """
        Surowe zdarzenie input. Zwraca True gdy tekst się zmienił.

        W trakcie kompozycji IME zdarzenie jest ignorowane.
        """
        if self._state is SurfaceState.COMPOSING:
            return False
        return self._commit(blocks, caret)

    def capture_caret(self, block_index: int, inner_offset: int) -> int:
        """Zmiana zaznaczenia bez edycji: zapamiętuje liniowy offset kursora."""
        self._offset = caret_offset(self._blocks, block_index, inner_offset)
        self._caret = locate_caret(self._blocks, self._offset)
        return self._offset

    def composition_start(self) -> None:
        self._state = SurfaceState.COMPOSING

    def composition_end(self, blocks: Sequence[BlockInput], caret: int | None = None) -> bool:
        """Koniec kompozycji: zatwierdza tekst, wymusza pełny render, przywraca kursor."""
        self._state = SurfaceState.IDLE
        changed = self._commit(blocks, caret)
        if not changed:
            self._render()
        return changed

    def replace_text(self, text: str) -> bool:
        """Zewnętrzna podmiana treści (np. przyjęta sugestia); trafia do historii."""
        if text == self._text:
            return False
        self.history.record_change(self._text)
        self._adopt(text)
        return True

    # -- historia -------------------------------------------------------------

    def undo(self) -> bool:
        previous = self.history.undo(self._text)
        if previous is None:
            return False
        self._adopt(previous)
        if self.on_undo is not None:
            self.on_undo(previous)
        return True

    def redo(self) -> bool:
        following = self.history.redo(self._text)
        if following is None:
            return False
        self._adopt(following)
        return True

    # -- wewnętrzne -----------------------------------------------------------

    def _commit(self, blocks: Sequence[BlockInput], caret: int | None) -> bool:
        if caret is not None:
            self._offset = caret
        new_text = reconstruct_text(blocks)
        if new_text == self._text:
            return False
        self.history.record_change(self._text)
        self._adopt(new_text)
        return True

    def _adopt(self, text: str) -> None:
        self._text = text
        self._render()
        if self.on_change is not None:
            self.on_change(text)

    def _render(self) -> None:
        self._blocks = render_blocks(self._text)
        if self._offset is None:
            self._caret = None
        else:
            self._caret = locate_caret(self._blocks, self._offset)
