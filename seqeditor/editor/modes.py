"""
Editing modes of a sequence document.

A document is created either for free editing or bound to an external,
read-only source of residues (viewer mode). The mode is fixed at
construction and its behaviour lives in a small strategy object, so the
document never has to inspect what kind of Symbols it holds.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from ..core.sequence import resname_to_code
from .errors import DocumentModeError
from .symbol import Symbol

logger = logging.getLogger(__name__)

ColorFunction = Callable[[Symbol], str]


class EditorMode(str, Enum):
    """How a document relates to its data."""
    FREE_EDIT = "free_edit"  # User-editable, no back-references
    BOUND = "bound"  # Read-only view of an external residue source


def no_color(symbol: Symbol) -> str:
    return ""


class ModeStrategy(ABC):
    """
    Mode-specific behaviour of a sequence document.

    Subclasses decide which Symbols a document may hold, whether the user
    may edit it and how Symbols are coloured by default.
    """

    mode: EditorMode
    read_only: bool = False

    @abstractmethod
    def adopt(self, symbol: Symbol) -> None:
        """
        Check that a Symbol may be inserted into a document of this mode.

        Raises:
            DocumentModeError: If the Symbol does not fit the mode
        """

    @abstractmethod
    def create_symbols(self, text: str) -> list[Symbol]:
        """Build Symbols for a piece of text."""

    def default_color_function(self) -> ColorFunction:
        return no_color

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(mode={self.mode.value!r})"


class FreeEditStrategy(ModeStrategy):
    """Free editing: Symbols never carry a sequence_index."""

    mode = EditorMode.FREE_EDIT

    def adopt(self, symbol: Symbol) -> None:
        if symbol.sequence_index is not None:
            raise DocumentModeError(
                f"Free-edit documents cannot hold bound Symbols (sequence_index={symbol.sequence_index})"
            )

    def create_symbols(self, text: str) -> list[Symbol]:
        return [Symbol(char) for char in text]


class BoundStrategy(ModeStrategy):
    """
    Viewer mode bound to an external residue source.

    Args:
        proxy_resolver: Maps a sequence_index to the external domain object
        color_lookup: Maps a resolved domain object to a display colour
    """

    mode = EditorMode.BOUND
    read_only = True

    def __init__(
        self,
        proxy_resolver: Optional[Callable[[int], Any]] = None,
        color_lookup: Optional[Callable[[Any], str]] = None,
    ):
        self.proxy_resolver = proxy_resolver
        self.color_lookup = color_lookup

    def adopt(self, symbol: Symbol) -> None:
        if symbol.sequence_index is None:
            raise DocumentModeError("Bound documents require Symbols with a sequence_index")

    def create_symbols(self, text: str) -> list[Symbol]:
        raise DocumentModeError(
            "Bound documents are built from residues, use load_residues() instead"
        )

    def symbols_from_residues(self, residues: Iterable[tuple[str, int]]) -> list[Symbol]:
        """
        Build Symbols from (residue_name, sequence_index) pairs.

        Residue names that do not map to a one-letter code are skipped.
        """
        symbols = []
        for resname, sequence_index in residues:
            code = resname_to_code(resname)
            if code is None:
                logger.warning(f"Unexpected residue name {resname!r} at {sequence_index}, skipping")
                continue
            symbols.append(Symbol(code, sequence_index=sequence_index))
        return symbols

    def resolve_proxy(self, symbol: Symbol) -> Any:
        """Domain object behind a Symbol, or None if no resolver is set."""
        if self.proxy_resolver is None or symbol.sequence_index is None:
            return None
        return self.proxy_resolver(symbol.sequence_index)

    def default_color_function(self) -> ColorFunction:
        if self.color_lookup is None:
            return no_color
        lookup = self.color_lookup

        def _color(symbol: Symbol) -> str:
            proxy = self.resolve_proxy(symbol)
            if proxy is None:
                return ""
            return lookup(proxy) or ""

        return _color
