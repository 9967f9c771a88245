"""
The sequence document: an ordered collection of Symbols with a live caret.

These are the most important pieces of the editor. `insert`, `remove`,
`clear` and `replace` define how Symbols enter and leave the document; the
keyboard and paste handlers translate host events into exactly one of those
mutations, resolving the caret through the document's SelectionMapper first.

Invariants kept after every mutation:
- document[i].logical_index == i
- every Symbol in the document is attached to the document root, removed
  Symbols are detached and disposed
- positions and counts are clamped to the document bounds
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Optional, Union

from ..core.models import ImportResult, SelectionRange
from ..core.sequence import accepted_characters, is_accepted
from .errors import DocumentError, DocumentModeError, ReentrantMutationError, SymbolStateError
from .modes import BoundStrategy, ColorFunction, EditorMode, FreeEditStrategy, ModeStrategy
from .selection import DocumentRoot, InMemorySelectionHost, SelectionHost, SelectionMapper
from .symbol import Symbol

if TYPE_CHECKING:
    from ..importing.flow import PasteImportFlow

logger = logging.getLogger(__name__)

SymbolRun = Union[str, Iterable[Symbol]]
FlowFactory = Callable[[str, Optional[SelectionRange]], "PasteImportFlow"]
FlowPresenter = Callable[["PasteImportFlow"], None]
PasteHandler = Callable[[str, SelectionRange], None]

# Keys the host handles natively (caret movement, focus changes)
NAVIGATION_KEYS = frozenset({
    "ArrowLeft", "ArrowRight", "ArrowUp", "ArrowDown",
    "PageUp", "PageDown", "Tab", "Escape",
})


@dataclass
class EditorConfig:
    """
    Configuration for a sequence document.

    Mirrors what a host panel decides when it creates an editing surface.
    """
    editable: bool = True
    paste_enabled: bool = True

    # Accepted alphabets (typed keys and the paste classifier)
    accept_protein: bool = True
    accept_dna: bool = True

    placeholder: str = "Sequence"
    strip_fasta_headers: bool = True  # Drop '>' header lines from pasted FASTA


@dataclass(frozen=True)
class KeyEvent:
    """A key press delivered by the host."""
    key: str
    ctrl: bool = False
    meta: bool = False
    alt: bool = False
    shift: bool = False

    @property
    def modified(self) -> bool:
        return self.ctrl or self.meta or self.alt


class SequenceDocument:
    """
    Ordered collection of single-character Symbols.

    Args:
        config: Editor configuration (defaults to a free-edit surface
            accepting protein and DNA)
        strategy: Mode strategy, FreeEditStrategy if None
        selection_host: Host owning the native selection, an
            InMemorySelectionHost if None
        flow_factory: Builds the import flow for a paste; the default
            creates a PasteImportFlow with the document's alphabets
        flow_presenter: Called with each opened flow so the host can show it
        paste_handler: Replaces the import flow entirely; receives the pasted
            text and the pre-paste selection

    Example:
        >>> doc = SequenceDocument()
        >>> doc.insert("ATGC", 0).remove(1, 2).get_sequence()
        'AC'
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        strategy: Optional[ModeStrategy] = None,
        selection_host: Optional[SelectionHost] = None,
        flow_factory: Optional[FlowFactory] = None,
        flow_presenter: Optional[FlowPresenter] = None,
        paste_handler: Optional[PasteHandler] = None,
    ):
        self.config = config or EditorConfig()
        self.strategy = strategy or FreeEditStrategy()
        self.root = DocumentRoot(self)
        self.selection_mapper = SelectionMapper(self, selection_host or InMemorySelectionHost())

        self._symbols: list[Symbol] = []
        self._color_function: ColorFunction = self.strategy.default_color_function()
        self._enabled = True
        self._busy = False
        self._disposed = False

        self._flow_factory = flow_factory or self._create_flow
        self._flow_presenter = flow_presenter
        self._paste_handler = paste_handler
        self._active_flow: Optional[PasteImportFlow] = None

        self._change_callbacks: list[Callable[[], None]] = []
        self._hovered_callbacks: list[Callable[[Symbol], None]] = []
        self._clicked_callbacks: list[Callable[[Symbol], None]] = []

        self.selection_mapper.place_caret(0)

    def __repr__(self) -> str:
        return (
            f"SequenceDocument(mode={self.mode.value!r}, length={len(self._symbols)}, "
            f"sequence={self.get_sequence()[:20]!r})"
        )

    def __len__(self) -> int:
        return len(self._symbols)

    def __getitem__(self, index: int) -> Symbol:
        return self._symbols[index]

    def __iter__(self) -> Iterator[Symbol]:
        return iter(list(self._symbols))

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def mode(self) -> EditorMode:
        return self.strategy.mode

    @property
    def symbols(self) -> tuple[Symbol, ...]:
        return tuple(self._symbols)

    @property
    def editable(self) -> bool:
        """Whether the user may edit (always False in bound mode)."""
        return self.config.editable and not self.strategy.read_only

    @property
    def paste_enabled(self) -> bool:
        return self.config.paste_enabled and self.editable

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def placeholder(self) -> str:
        return self.config.placeholder

    @property
    def placeholder_visible(self) -> bool:
        return not self._symbols and bool(self.config.placeholder)

    @property
    def accepted_characters(self) -> frozenset[str]:
        """Upper-case characters accepted from the keyboard."""
        if not self.editable:
            return frozenset()
        return accepted_characters(self.config.accept_protein, self.config.accept_dna)

    @property
    def active_flow(self) -> Optional[PasteImportFlow]:
        return self._active_flow

    def set_editable(self, editable: bool) -> SequenceDocument:
        self.config.editable = editable
        return self

    def set_paste_enabled(self, paste_enabled: bool) -> SequenceDocument:
        self.config.paste_enabled = paste_enabled
        return self

    def set_enabled(self, enabled: bool) -> SequenceDocument:
        self._enabled = enabled
        return self

    def set_placeholder(self, text: str) -> SequenceDocument:
        self.config.placeholder = text
        return self

    def get_sequence(self) -> str:
        return "".join(s.value for s in self._symbols)

    def get_value(self) -> str:
        return self.get_sequence()

    def get_sequence_length(self) -> int:
        return len(self._symbols)

    # -------------------------------------------------------------------------
    # Callbacks
    # -------------------------------------------------------------------------

    def add_on_change_callback(self, callback: Callable[[], None]) -> SequenceDocument:
        self._change_callbacks.append(callback)
        return self

    def add_on_element_hovered_callback(self, callback: Callable[[Symbol], None]) -> SequenceDocument:
        self._hovered_callbacks.append(callback)
        return self

    def add_on_element_clicked_callback(self, callback: Callable[[Symbol], None]) -> SequenceDocument:
        self._clicked_callbacks.append(callback)
        return self

    def _emit_change(self) -> None:
        for callback in list(self._change_callbacks):
            callback()

    def _emit_element_hovered(self, symbol: Symbol) -> None:
        for callback in list(self._hovered_callbacks):
            callback(symbol)

    def _emit_element_clicked(self, symbol: Symbol) -> None:
        for callback in list(self._clicked_callbacks):
            callback(symbol)

    # -------------------------------------------------------------------------
    # Rendering hooks
    # -------------------------------------------------------------------------

    def set_element_color_function(self, color_function: Optional[ColorFunction]) -> SequenceDocument:
        """
        Set the function that colours each Symbol.

        Passing None restores the mode's default colouring.
        """
        if color_function is None:
            color_function = self.strategy.default_color_function()
        self._color_function = color_function
        for symbol in self._symbols:
            symbol.color = color_function(symbol)
        return self

    def set_highlighted(self, start: int, end: int) -> SequenceDocument:
        """Highlight [start, end) and clear the highlight everywhere else."""
        start, end = self._clamp_range(start, end)
        for i, symbol in enumerate(self._symbols):
            symbol.highlighted = start <= i < end
        return self

    def clear_highlight(self) -> SequenceDocument:
        for symbol in self._symbols:
            symbol.highlighted = False
        return self

    def resolve_proxy(self, symbol: Symbol):
        """Domain object behind a Symbol in bound mode, None otherwise."""
        if isinstance(self.strategy, BoundStrategy):
            return self.strategy.resolve_proxy(symbol)
        return None

    # -------------------------------------------------------------------------
    # Caret
    # -------------------------------------------------------------------------

    def get_selection(self) -> Optional[SelectionRange]:
        """Current logical selection, None when unresolved."""
        return self.selection_mapper.resolve()

    def set_caret_position(self, position: int) -> SequenceDocument:
        self.selection_mapper.place_caret(position)
        return self

    def select(self, start: int, end: int) -> SequenceDocument:
        self.selection_mapper.select(start, end)
        return self

    @property
    def selected_symbols(self) -> list[Symbol]:
        selection = self.get_selection()
        if selection is None:
            return []
        return self._symbols[selection.start:selection.end]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def insert(
        self,
        symbols: SymbolRun,
        position: Optional[int] = None,
        silent: bool = False,
    ) -> SequenceDocument:
        """
        Insert a run of Symbols.

        Args:
            symbols: Symbols, or text turned into Symbols by the mode strategy
            position: Insert position (default: end), clamped to [0, len]
            silent: Suppress the change notification

        Returns:
            self; the caret is placed right after the inserted run
        """
        if position is None:
            position = len(self._symbols)
        position = self._clamp(position)
        self._splice(position, position, symbols, silent)
        return self

    def remove(self, position: int, count: int = 1, silent: bool = False) -> SequenceDocument:
        """
        Remove and dispose `count` Symbols starting at `position`.

        Out-of-range requests remove only what exists. The caret is placed at
        `position`.
        """
        position = self._clamp(position)
        end = self._clamp(position + max(count, 0))
        self._splice(position, end, [], silent)
        return self

    def clear(self, silent: bool = False) -> SequenceDocument:
        """Remove everything. An empty document is left untouched."""
        if not self._symbols:
            self._check_usable()
            return self
        self._splice(0, len(self._symbols), [], silent)
        return self

    def replace(
        self,
        start: int,
        end: int,
        symbols: SymbolRun,
        silent: bool = False,
    ) -> SequenceDocument:
        """
        Replace [start, end) with a run of Symbols as a single mutation.

        Emits at most one change notification.
        """
        start, end = self._clamp_range(start, end)
        self._splice(start, end, symbols, silent)
        return self

    def set_sequence(self, sequence: str, silent: bool = False) -> SequenceDocument:
        return self.replace(0, len(self._symbols), sequence, silent)

    def add_sequence(self, sequence: str, silent: bool = False) -> SequenceDocument:
        return self.insert(sequence, silent=silent)

    def load_residues(self, residues: Iterable[tuple[str, int]]) -> SequenceDocument:
        """
        Replace the content with residues of a bound source.

        Args:
            residues: (residue_name, sequence_index) pairs

        Raises:
            DocumentModeError: If the document is not in bound mode
        """
        if not isinstance(self.strategy, BoundStrategy):
            raise DocumentModeError("load_residues() requires a bound document")
        symbols = self.strategy.symbols_from_residues(residues)
        return self.replace(0, len(self._symbols), symbols)

    def dispose(self) -> None:
        """Dispose all Symbols, close an open import flow and drop callbacks."""
        if self._disposed:
            return
        if self._active_flow is not None:
            self._active_flow.dispose()
        if self._symbols:
            self.clear(silent=True)
        self._change_callbacks.clear()
        self._hovered_callbacks.clear()
        self._clicked_callbacks.clear()
        self._disposed = True
        logger.debug("Sequence document disposed")

    @contextmanager
    def _mutation(self):
        self._check_usable()
        if self._busy:
            raise ReentrantMutationError(
                "Document mutated from inside one of its own mutations or change callbacks"
            )
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _check_usable(self) -> None:
        if self._disposed:
            raise DocumentError("Document has been disposed")

    def _splice(self, start: int, end: int, run: SymbolRun, silent: bool) -> None:
        with self._mutation():
            symbols = self._prepare(run)

            removed = self._symbols[start:end]
            for symbol in removed:
                symbol.dispose()

            self._symbols[start:end] = symbols
            for symbol in symbols:
                self._attach(symbol)

            for i in range(start, len(self._symbols)):
                self._symbols[i].logical_index = i

            self.selection_mapper.place_caret(start + len(symbols))

            if removed or symbols:
                logger.debug(
                    f"Spliced [{start}, {end}): removed {len(removed)}, inserted {len(symbols)}"
                )
                if not silent:
                    self._emit_change()

    def _prepare(self, run: SymbolRun) -> list[Symbol]:
        if isinstance(run, str):
            return self.strategy.create_symbols(run)

        symbols = list(run)
        seen = set()
        for symbol in symbols:
            if symbol.disposed:
                raise SymbolStateError(f"Cannot insert a disposed Symbol: {symbol!r}")
            if symbol.attached or id(symbol) in seen:
                raise SymbolStateError(f"Symbol is already part of a document: {symbol!r}")
            seen.add(id(symbol))
            self.strategy.adopt(symbol)
        return symbols

    def _attach(self, symbol: Symbol) -> None:
        symbol.attach(self.root)
        symbol.add_on_click_callback(self._emit_element_clicked)
        symbol.add_on_hover_callback(self._emit_element_hovered)
        symbol.color = self._color_function(symbol)

    def _clamp(self, position: int) -> int:
        return max(0, min(position, len(self._symbols)))

    def _clamp_range(self, start: int, end: int) -> tuple[int, int]:
        start, end = self._clamp(start), self._clamp(end)
        return min(start, end), max(start, end)

    # -------------------------------------------------------------------------
    # Host events
    # -------------------------------------------------------------------------

    def handle_key_down(self, event: KeyEvent) -> bool:
        """
        Apply the keyboard policy to one key press.

        Returns:
            True if the event was consumed (the host must suppress its
            default action), False if it should pass through
        """
        key = event.key

        # A disabled document (import flow open) ignores everything
        if not self._enabled:
            return True
        if event.modified or key in NAVIGATION_KEYS:
            return False

        if key == "Home":
            self.set_caret_position(0)
            return True
        if key == "End":
            self.set_caret_position(len(self._symbols))
            return True

        if not self.editable:
            return True

        accepted = len(key) == 1 and is_accepted(key, self.accepted_characters)
        if not (accepted or key in ("Backspace", "Delete")):
            return True

        selection = self.get_selection()
        if selection is None:
            logger.warning(f"Ignoring key {key!r}: the selection could not be resolved")
            return True

        start, end = selection.start, selection.end
        if accepted:
            self.replace(start, end, key.upper())
        elif key == "Backspace":
            if start == end and start > 0:
                start -= 1
            if start != end:
                self.remove(start, end - start)
        else:
            if start == end:
                end += 1
            self.remove(start, end - start)
        return True

    def type_text(self, text: str) -> None:
        """Send each character of text as a key press."""
        for char in text:
            self.handle_key_down(KeyEvent(char))

    def handle_paste(self, text: str) -> bool:
        """
        Apply the paste policy.

        The host's default paste is always suppressed. The text and the
        pre-paste selection go to the paste handler, or to a new import flow
        when pasting is enabled.

        Returns:
            True (the default paste must not run)
        """
        if not (self.editable and self._enabled) or not text:
            return True

        selection = self.get_selection()
        if selection is None:
            logger.warning("Ignoring paste: the selection could not be resolved")
            return True

        if self._paste_handler is not None:
            self._paste_handler(text, selection)
        elif self.config.paste_enabled:
            self._open_flow(text, selection)
        return True

    def request_import(self, text: str = "") -> Optional[PasteImportFlow]:
        """
        Explicit import action: open a flow whose result is appended.

        Returns:
            The opened flow, or None if one is already open or the document
            is not editable
        """
        if self._active_flow is not None or not self.editable:
            return None
        return self._open_flow(text, None)

    def _open_flow(self, text: str, selection: Optional[SelectionRange]) -> Optional[PasteImportFlow]:
        if not (self.config.accept_protein or self.config.accept_dna):
            logger.warning("Import ignored: the document accepts neither protein nor DNA")
            return None

        flow = self._flow_factory(text, selection)
        self._active_flow = flow
        self.set_enabled(False)
        flow.add_on_resolved_callback(self._finish_import)
        try:
            flow.show()
            if self._flow_presenter is not None:
                self._flow_presenter(flow)
        except BaseException:
            # Cancelling re-enables the document through _finish_import
            flow.dispose()
            raise
        return flow

    def _finish_import(self, result: ImportResult) -> None:
        self._active_flow = None
        self.set_enabled(True)
        if self._disposed:
            return

        if result.cancelled:
            logger.debug("Import cancelled, document unchanged")
            return

        logger.info(f"Importing {len(result.sequence)} residue(s) as {result.type.value}")
        if result.selection is None:
            self.insert(result.sequence)
        else:
            self.replace(result.selection.start, result.selection.end, result.sequence)

    def _create_flow(self, text: str, selection: Optional[SelectionRange]) -> PasteImportFlow:
        from ..importing.flow import PasteImportFlow

        return PasteImportFlow(
            text,
            accept_protein=self.config.accept_protein,
            accept_dna=self.config.accept_dna,
            selection=selection,
            strip_fasta_headers=self.config.strip_fasta_headers,
        )
