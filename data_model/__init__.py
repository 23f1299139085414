"""
data_model — struktury danych sesji dokumentu paperdesk.

Użycie:
  from data_model import SectionSpan, VirtualFile, StreamEvent, ...

Moduły:
  documents — HeadingMatch, HeadingOccurrence, SectionSpan, VirtualFile,
              FileRole, sufiksy nazw plików pochodnych
  events    — StreamEvent, StepKind, ChatMessage
"""

from .documents import (
    SECTION_SUFFIX,
    TREE_SUFFIX,
    SUGGESTION_SUFFIX,
    SECTION_SEPARATOR,
    heading_id,
    role_of,
    HeadingMatch,
    HeadingOccurrence,
    SectionSpan,
    SpanList,
    FileRole,
    VirtualFile,
)
from .events import (
    EventContent,
    StepKind,
    StreamEvent,
    Sender,
    ChatMessage,
)

__all__ = [
    # documents
    "SECTION_SUFFIX",
    "TREE_SUFFIX",
    "SUGGESTION_SUFFIX",
    "SECTION_SEPARATOR",
    "heading_id",
    "role_of",
    "HeadingMatch",
    "HeadingOccurrence",
    "SectionSpan",
    "SpanList",
    "FileRole",
    "VirtualFile",
    # events
    "EventContent",
    "StepKind",
    "StreamEvent",
    "Sender",
    "ChatMessage",
]
