"""
Interactive import of pasted sequences.

A PasteImportFlow is opened when text is pasted into a sequence document (or
when the user explicitly asks to import). It owns a transient input surface
holding the raw text, keeps a live classification of that text and resolves
exactly once: committed with the chosen interpretation, or cancelled.

States:
    IDLE -> SHOWING -> COMMITTED
                    -> CANCELLED

The flow is disposed right after resolving and cannot be reused.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from enum import Enum
from typing import Callable, Optional

from ..classification.classifier import SequenceClassifier
from ..core.models import (
    ClassificationResult,
    ImportResult,
    InterpretationKind,
    SelectionRange,
)
from ..core.sequence import extract_sequence_text
from ..editor.document import EditorConfig, SequenceDocument

logger = logging.getLogger(__name__)


class FlowState(str, Enum):
    """Lifecycle states of an import flow."""
    IDLE = "idle"
    SHOWING = "showing"
    COMMITTED = "committed"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (FlowState.COMMITTED, FlowState.CANCELLED)


class FlowError(Exception):
    """Base exception for import flow errors."""
    pass


class FlowStateError(FlowError):
    """Raised when a flow operation is not allowed in the current state."""
    pass


class PasteImportFlow:
    """
    Short-lived flow that lets the user pick an interpretation of pasted text.

    Args:
        text: Raw pasted text
        accept_protein: Offer the protein interpretations
        accept_dna: Offer the DNA interpretation
        selection: Selection of the target document before the paste, carried
            through to the result (None for an explicit import action)
        strip_fasta_headers: Keep only the sequence of pasted FASTA

    Raises:
        ValueError: If neither protein nor DNA is accepted

    Example:
        >>> flow = PasteImportFlow("alaglycys", accept_dna=False).show()
        >>> flow.commit(InterpretationKind.PROTEIN_THREE_LETTER).sequence
        'AGC'
    """

    def __init__(
        self,
        text: str = "",
        accept_protein: bool = True,
        accept_dna: bool = True,
        selection: Optional[SelectionRange] = None,
        strip_fasta_headers: bool = True,
    ):
        self.classifier = SequenceClassifier(accept_protein, accept_dna)
        self.selection = selection
        self._state = FlowState.IDLE
        self._disposed = False
        self._future: Future[ImportResult] = Future()
        self._resolved_callbacks: list[Callable[[ImportResult], None]] = []

        # Transient input surface: typing is filtered by the alphabet, pasted
        # text is spliced in verbatim so invalid characters stay visible.
        self.input_document = SequenceDocument(
            EditorConfig(
                editable=True,
                paste_enabled=False,
                accept_protein=accept_protein,
                accept_dna=accept_dna,
                placeholder="Input sequence",
            ),
            paste_handler=self._on_input_paste,
        )
        if strip_fasta_headers:
            text = extract_sequence_text(text)
        self.input_document.insert(text, silent=True)
        self.input_document.add_on_change_callback(self._reclassify)

        self._classification: ClassificationResult = self.classifier.classify("")
        self._reclassify()

    def __repr__(self) -> str:
        return f"PasteImportFlow(state={self._state.value!r}, text={self.raw_text[:20]!r})"

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def raw_text(self) -> str:
        return self.input_document.get_sequence()

    @property
    def classification(self) -> ClassificationResult:
        """Classification of the current raw text (recomputed on every edit)."""
        return self._classification

    @property
    def available_kinds(self) -> list[InterpretationKind]:
        return self._classification.available_kinds

    def add_on_resolved_callback(self, callback: Callable[[ImportResult], None]) -> PasteImportFlow:
        """Register a callback fired once with the flow's result."""
        if self._state.terminal:
            callback(self._future.result())
        else:
            self._resolved_callbacks.append(callback)
        return self

    def wait(self) -> Future[ImportResult]:
        """Future resolved by the terminal transition."""
        return self._future

    def show(self) -> PasteImportFlow:
        """
        Enter the SHOWING state.

        Raises:
            FlowStateError: If the flow was already shown or resolved
        """
        self._require(FlowState.IDLE, "show")
        self._state = FlowState.SHOWING
        logger.debug(f"Import flow showing {len(self.raw_text)} character(s)")
        return self

    def set_text(self, text: str) -> ClassificationResult:
        """Replace the raw text; the classification follows."""
        self._require(FlowState.SHOWING, "set_text")
        self.input_document.set_sequence(text)
        return self._classification

    def commit(self, kind: InterpretationKind | str) -> ImportResult:
        """
        Commit one of the available interpretations.

        Raises:
            FlowStateError: If the flow is not showing
            FlowError: If the interpretation is not available
        """
        self._require(FlowState.SHOWING, "commit")
        kind = InterpretationKind(kind)
        try:
            interpretation = self._classification.get(kind)
        except KeyError as e:
            raise FlowError(f"Interpretation {kind.value!r} is not offered by this flow") from e

        result = ImportResult(
            sequence=interpretation.clean_sequence,
            type=kind.sequence_type,
            kind=kind,
            selection=self.selection,
        )
        self._resolve(FlowState.COMMITTED, result)
        return result

    def cancel(self) -> ImportResult:
        """Close the flow without picking an interpretation."""
        self._require(FlowState.SHOWING, "cancel")
        result = ImportResult(selection=self.selection)
        self._resolve(FlowState.CANCELLED, result)
        return result

    def dispose(self) -> None:
        """Release the input surface; an unresolved flow is cancelled first."""
        if self._disposed:
            return
        if not self._state.terminal:
            self._resolve(FlowState.CANCELLED, ImportResult(selection=self.selection))
            return
        self._disposed = True
        self._resolved_callbacks.clear()
        self.input_document.dispose()

    def _resolve(self, state: FlowState, result: ImportResult) -> None:
        self._state = state
        logger.debug(f"Import flow {state.value}")
        self._future.set_result(result)
        callbacks, self._resolved_callbacks = self._resolved_callbacks, []
        try:
            for callback in callbacks:
                callback(result)
        finally:
            self.dispose()

    def _require(self, state: FlowState, operation: str) -> None:
        if self._state is not state:
            raise FlowStateError(
                f"Cannot {operation} an import flow in state {self._state.value!r}"
            )

    def _reclassify(self) -> None:
        self._classification = self.classifier.classify(self.raw_text)
        # Mark the input surface like the display copy
        for symbol, unit in zip(self.input_document, self._classification.display):
            symbol.valid = unit.is_valid

    def _on_input_paste(self, text: str, selection: SelectionRange) -> None:
        self.input_document.replace(selection.start, selection.end, text)
