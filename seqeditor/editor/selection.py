"""
Mapping between host selections and logical document offsets.

A host surface (DOM, Qt, terminal, ...) owns the native selection. The
SelectionMapper is the only place that understands its structure: it turns
boundary points into integer offsets over the document's Symbols and writes
caret positions back. Everything else in the editor works on integers.

Host selections are modelled with three small value types:

- HostPosition: a node plus an offset inside it
- HostRange: a start and an end HostPosition
- HostSelection: zero or more ranges

Nodes are any objects with a `parent` attribute.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Protocol

from ..core.models import SelectionRange
from .symbol import Symbol

if TYPE_CHECKING:
    from .document import SequenceDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostPosition:
    """A boundary point of a host selection."""
    node: Any
    offset: int = 0


@dataclass(frozen=True)
class HostRange:
    start: HostPosition
    end: HostPosition

    @classmethod
    def collapsed(cls, position: HostPosition) -> HostRange:
        return cls(position, position)

    @property
    def is_collapsed(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class HostSelection:
    ranges: tuple[HostRange, ...] = ()

    @classmethod
    def single(cls, start: HostPosition, end: Optional[HostPosition] = None) -> HostSelection:
        return cls((HostRange(start, end if end is not None else start),))

    @property
    def range_count(self) -> int:
        return len(self.ranges)


class SelectionHost(Protocol):
    """The part of a host surface that owns the native selection."""

    def get_selection(self) -> Optional[HostSelection]:
        ...

    def set_selection(self, selection: HostSelection) -> None:
        ...


class InMemorySelectionHost:
    """
    Selection host that simply stores the last selection.

    Used by headless documents, the import flow's input surface and tests.
    """

    def __init__(self, selection: Optional[HostSelection] = None):
        self._selection = selection

    def get_selection(self) -> Optional[HostSelection]:
        return self._selection

    def set_selection(self, selection: HostSelection) -> None:
        self._selection = selection


class DocumentRoot:
    """Root node that a document's Symbols are attached to."""

    parent = None

    def __init__(self, owner: SequenceDocument):
        self.owner = owner


class SelectionMapper:
    """
    Converts host selections into logical [start, end) ranges and back.

    One mapper belongs to exactly one document. Nothing is cached: every
    call walks the current Symbol collection, so results are always
    consistent with the latest mutation.
    """

    def __init__(self, document: SequenceDocument, host: SelectionHost):
        self.document = document
        self.host = host

    def resolve(self) -> Optional[SelectionRange]:
        """
        Resolve the host selection.

        Returns:
            Ordered SelectionRange, or None ("unresolved") when the selection
            has zero or several ranges or lies outside the document
        """
        selection = self.host.get_selection()
        if selection is None or selection.range_count != 1:
            count = 0 if selection is None else selection.range_count
            logger.debug(f"Selection unresolved: {count} range(s)")
            return None

        host_range = selection.ranges[0]
        start = self.resolve_position(host_range.start)
        end = self.resolve_position(host_range.end)
        if start is None or end is None:
            logger.debug("Selection unresolved: boundary outside the document")
            return None
        return SelectionRange.ordered(start, end)

    def resolve_position(self, position: HostPosition) -> Optional[int]:
        """
        Map one boundary point to a logical offset.

        A point on the root maps to its child offset. A point inside a unit
        maps to the unit's logical index plus the intra-unit offset (0 or 1,
        since each unit renders exactly one character).
        """
        root = self.document.root
        length = len(self.document)

        if position.node is root:
            return _clamp(position.offset, 0, length)

        symbol = self._owning_symbol(position.node)
        if symbol is None:
            return None
        return _clamp(symbol.logical_index + _clamp(position.offset, 0, 1), 0, length)

    def _owning_symbol(self, node: Any) -> Optional[Symbol]:
        root = self.document.root
        seen = set()
        while node is not None and id(node) not in seen:
            seen.add(id(node))
            if isinstance(node, Symbol):
                return node if node.parent is root else None
            node = getattr(node, "parent", None)
        return None

    def to_host_position(self, index: int) -> HostPosition:
        """Host boundary point for a logical caret index (clamped)."""
        symbols = self.document.symbols
        index = _clamp(index, 0, len(symbols))
        if not symbols:
            return HostPosition(self.document.root, 0)
        if index == 0:
            return HostPosition(symbols[0], 0)
        return HostPosition(symbols[index - 1], 1)

    def place_caret(self, index: int) -> None:
        """Collapse the host selection at a logical index."""
        self.host.set_selection(HostSelection.single(self.to_host_position(index)))

    def select(self, start: int, end: int) -> None:
        """Select the logical range [start, end) on the host."""
        self.host.set_selection(
            HostSelection.single(self.to_host_position(start), self.to_host_position(end))
        )


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))
