"""
Character units of a sequence document.

Each Symbol is one displayable character. The document attaches Symbols to
its root node, keeps their logical index in sync with their position and
disposes them when they are removed. A host renders one focusable unit per
Symbol using `render()`.
"""

from __future__ import annotations

from typing import Any, Callable, NamedTuple, Optional


class RenderedUnit(NamedTuple):
    """What a host surface needs to draw one Symbol."""
    text: str
    color: str
    highlighted: bool
    valid: bool


class SymbolText:
    """
    The text node inside a rendered Symbol.

    Host selections usually point into the text rather than at the unit
    itself; the parent link lets the selection mapper climb back up.
    """

    __slots__ = ("parent",)

    def __init__(self, parent: Symbol):
        self.parent = parent


class Symbol:
    """
    One character-sized unit of a sequence.

    Attributes:
        logical_index: Position within the owning document (-1 while detached)
        highlighted: Highlight state set by the host
        color_override: Colour that wins over the computed colour
        color: Colour computed by the document's element colour function
        valid: Display-copy marking; False renders the unit as invalid
        parent: Node the unit is attached to (None while detached)
    """

    def __init__(self, value: str, sequence_index: Optional[int] = None, valid: bool = True):
        if len(value) != 1:
            raise ValueError(f"Symbol value must be a single character, got {value!r}")
        if sequence_index is not None and sequence_index < 0:
            raise ValueError("sequence_index must be >= 0")

        self._value = value
        self._sequence_index = sequence_index
        self.logical_index = -1
        self.highlighted = False
        self.color_override: Optional[str] = None
        self.color = ""
        self.valid = valid
        self.parent: Any = None
        self.text_node = SymbolText(self)

        self._disposed = False
        self._click_callbacks: list[Callable[[Symbol], None]] = []
        self._hover_callbacks: list[Callable[[Symbol], None]] = []

    def __repr__(self) -> str:
        return (
            f"Symbol(value={self._value!r}, logical_index={self.logical_index}, "
            f"sequence_index={self._sequence_index})"
        )

    @property
    def value(self) -> str:
        return self._value

    @property
    def sequence_index(self) -> Optional[int]:
        """Back-reference into an external read-only source (bound mode only)."""
        return self._sequence_index

    @property
    def attached(self) -> bool:
        return self.parent is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def display_color(self) -> str:
        return self.color_override if self.color_override is not None else self.color

    def render(self) -> RenderedUnit:
        return RenderedUnit(self._value, self.display_color, self.highlighted, self.valid)

    # Pointer events

    def add_on_click_callback(self, callback: Callable[[Symbol], None]) -> Symbol:
        self._click_callbacks.append(callback)
        return self

    def add_on_hover_callback(self, callback: Callable[[Symbol], None]) -> Symbol:
        self._hover_callbacks.append(callback)
        return self

    def click(self) -> None:
        """Deliver a pointer click from the host."""
        for callback in list(self._click_callbacks):
            callback(self)

    def hover(self) -> None:
        """Deliver a pointer move from the host."""
        for callback in list(self._hover_callbacks):
            callback(self)

    # Lifecycle, driven by the owning document

    def attach(self, parent: Any) -> None:
        if self._disposed:
            raise RuntimeError("Cannot attach a disposed Symbol")
        self.parent = parent

    def detach(self) -> None:
        self.parent = None
        self.logical_index = -1

    def dispose(self) -> None:
        """Detach and release callbacks. A disposed Symbol cannot be reused."""
        self.detach()
        self._click_callbacks.clear()
        self._hover_callbacks.clear()
        self._disposed = True
