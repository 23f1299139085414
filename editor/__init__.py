"""
editor — edytowalna powierzchnia, historia undo/redo i sesja dokumentu.

Publiczne API:
  EditableSurface(history, on_change, on_undo)   — IDLE | COMPOSING
  EditHistory(initial)                           — undo/redo na migawkach
  DocumentSession(uploader, extractor, ...)      — zbiór plików wirtualnych
  render_blocks(text) / reconstruct_text(blocks) / locate_caret(blocks, offset)
"""

from .history import EditHistory
from .surface import (
    EditableSurface,
    LineBlock,
    SurfaceState,
    caret_offset,
    coerce_blocks,
    locate_caret,
    prune_artifacts,
    reconstruct_text,
    render_blocks,
)
from .session import (
    ChatLog,
    DocumentSession,
    DownloadSlot,
    DuplicateNameError,
    UnknownFileError,
    Uploader,
)

__all__ = [
    "EditHistory",
    "EditableSurface",
    "LineBlock",
    "SurfaceState",
    "caret_offset",
    "coerce_blocks",
    "locate_caret",
    "prune_artifacts",
    "reconstruct_text",
    "render_blocks",
    "ChatLog",
    "DocumentSession",
    "DownloadSlot",
    "DuplicateNameError",
    "UnknownFileError",
    "Uploader",
]
