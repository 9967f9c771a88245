"""
The sequence document and its building blocks.

A SequenceDocument holds one Symbol per character, keeps logical indices in
sync under every mutation and turns host key/paste events into insertions
and removals. The SelectionMapper is the only part that knows about the
host's native selection; modes (free editing vs a bound read-only viewer)
are strategy objects chosen at construction.
"""

from .document import EditorConfig, KeyEvent, SequenceDocument
from .errors import DocumentError, DocumentModeError, ReentrantMutationError, SymbolStateError
from .modes import BoundStrategy, EditorMode, FreeEditStrategy, ModeStrategy
from .selection import (
    HostPosition,
    HostRange,
    HostSelection,
    InMemorySelectionHost,
    SelectionHost,
    SelectionMapper,
)
from .symbol import RenderedUnit, Symbol

__all__ = [
    "SequenceDocument",
    "EditorConfig",
    "KeyEvent",
    "Symbol",
    "RenderedUnit",
    "SelectionMapper",
    "SelectionHost",
    "InMemorySelectionHost",
    "HostPosition",
    "HostRange",
    "HostSelection",
    "EditorMode",
    "ModeStrategy",
    "FreeEditStrategy",
    "BoundStrategy",
    "DocumentError",
    "DocumentModeError",
    "ReentrantMutationError",
    "SymbolStateError",
]
