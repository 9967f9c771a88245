"""
Unit tests for the sequence document.

Covers the structural invariants (logical indices, attachment, disposal),
the keyboard and paste policies, bound mode and the handoff between a
document and its import flow.
"""

import pytest

from seqeditor.core.models import InterpretationKind, SelectionRange, SequenceType
from seqeditor.editor.document import EditorConfig, KeyEvent, SequenceDocument
from seqeditor.editor.errors import (
    DocumentError,
    DocumentModeError,
    ReentrantMutationError,
    SymbolStateError,
)
from seqeditor.editor.modes import BoundStrategy, EditorMode
from seqeditor.editor.selection import HostPosition, HostRange, HostSelection, InMemorySelectionHost
from seqeditor.editor.symbol import Symbol
from seqeditor.importing.flow import FlowState


def assert_consistent(document):
    """Every Symbol sits at its logical index and is attached to the root."""
    for i, symbol in enumerate(document):
        assert symbol.logical_index == i
        assert symbol.parent is document.root
        assert not symbol.disposed


@pytest.fixture
def changes():
    return []


@pytest.fixture
def document(changes):
    doc = SequenceDocument()
    doc.add_on_change_callback(lambda: changes.append(doc.get_sequence()))
    return doc


class TestMutations:
    """Tests for insert, remove, clear and replace."""

    def test_insert_then_remove(self, document):
        symbols = [Symbol(c) for c in "ATGC"]
        document.insert(symbols, 0)
        assert document.get_sequence() == "ATGC"

        document.remove(1, 2)
        assert document.get_sequence() == "AC"
        assert document[1].logical_index == 1
        assert_consistent(document)

    def test_removed_symbols_disposed(self, document):
        document.insert("ATGC")
        removed = document[1]
        document.remove(1)
        assert removed.disposed
        assert not removed.attached
        assert removed.logical_index == -1

    def test_insert_in_middle_renumbers(self, document):
        document.insert("AC").insert("TG", 1)
        assert document.get_sequence() == "ATGC"
        assert_consistent(document)

    def test_positions_clamped(self, document):
        document.insert("AC", 50)
        assert document.get_sequence() == "AC"
        document.insert("G", -3)
        assert document.get_sequence() == "GAC"

    def test_remove_past_end_removes_what_exists(self, document):
        document.insert("ATGC")
        document.remove(2, 10)
        assert document.get_sequence() == "AT"

    def test_remove_nothing_is_silent(self, document, changes):
        document.insert("AT")
        changes.clear()
        document.remove(5)
        document.remove(0, 0)
        assert changes == []

    def test_caret_follows_mutations(self, document):
        document.insert("ATGC")
        assert document.get_selection() == SelectionRange.caret(4)
        document.remove(1, 2)
        assert document.get_selection() == SelectionRange.caret(1)

    def test_clear_idempotent(self, document, changes):
        document.insert("ATGC")
        document.clear()
        document.clear()
        assert document.get_sequence() == ""
        assert changes == ["ATGC", ""]

    def test_replace_emits_once(self, document, changes):
        document.insert("ATGC")
        changes.clear()
        document.replace(1, 3, "AA")
        assert document.get_sequence() == "AAAC"
        assert changes == ["AAAC"]
        assert_consistent(document)

    def test_silent(self, document, changes):
        document.insert("ATGC", silent=True)
        document.set_sequence("GG", silent=True)
        assert changes == []
        assert document.get_sequence() == "GG"

    def test_reinsert_attached_symbol_rejected(self, document):
        document.insert("A")
        with pytest.raises(SymbolStateError):
            document.insert([document[0]])

    def test_duplicate_symbol_rejected(self, document):
        symbol = Symbol("A")
        with pytest.raises(SymbolStateError):
            document.insert([symbol, symbol])
        assert len(document) == 0
        assert not symbol.attached

    def test_disposed_symbol_rejected(self, document):
        symbol = Symbol("A")
        symbol.dispose()
        with pytest.raises(SymbolStateError):
            document.insert([symbol])

    def test_bound_symbol_rejected_in_free_edit(self, document):
        with pytest.raises(DocumentModeError):
            document.insert([Symbol("A", sequence_index=3)])

    def test_reentrant_mutation_rejected(self):
        document = SequenceDocument()
        document.add_on_change_callback(lambda: document.insert("A"))
        with pytest.raises(ReentrantMutationError):
            document.insert("T")
        # The failed nested call left no partial state behind
        assert document.get_sequence() == "T"
        assert_consistent(document)

    def test_disposed_document_rejects_mutations(self, document):
        document.insert("ATGC")
        symbols = document.symbols
        document.dispose()
        assert document.disposed
        assert all(s.disposed for s in symbols)
        with pytest.raises(DocumentError):
            document.insert("A")

    def test_placeholder(self, document):
        assert document.placeholder_visible
        document.insert("A")
        assert not document.placeholder_visible


class TestKeyboard:
    """Tests for the keystroke policy."""

    def test_typing_inserts_upper_case(self, document):
        document.type_text("atg")
        assert document.get_sequence() == "ATG"
        assert_consistent(document)

    def test_rejected_character_no_change(self, changes):
        document = SequenceDocument(EditorConfig(accept_protein=False, accept_dna=True))
        document.add_on_change_callback(lambda: changes.append(document.get_sequence()))
        document.insert("AC", silent=True)

        assert document.handle_key_down(KeyEvent("Z")) is True
        assert document.get_sequence() == "AC"
        assert changes == []

    def test_typing_replaces_selection(self, document):
        document.insert("ATGC").select(1, 3)
        document.handle_key_down(KeyEvent("a"))
        assert document.get_sequence() == "AAC"
        assert document.get_selection() == SelectionRange.caret(2)

    def test_backspace(self, document):
        document.insert("ATGC")
        document.handle_key_down(KeyEvent("Backspace"))
        assert document.get_sequence() == "ATG"

    def test_backspace_at_start_does_nothing(self, document, changes):
        document.insert("AT").set_caret_position(0)
        changes.clear()
        document.handle_key_down(KeyEvent("Backspace"))
        assert document.get_sequence() == "AT"
        assert changes == []

    def test_delete(self, document):
        document.insert("ATGC").set_caret_position(1)
        document.handle_key_down(KeyEvent("Delete"))
        assert document.get_sequence() == "AGC"

    def test_delete_selection(self, document):
        document.insert("ATGC").select(0, 2)
        document.handle_key_down(KeyEvent("Delete"))
        assert document.get_sequence() == "GC"

    def test_home_end(self, document):
        document.insert("ATGC")
        assert document.handle_key_down(KeyEvent("Home")) is True
        assert document.get_selection() == SelectionRange.caret(0)
        document.handle_key_down(KeyEvent("End"))
        assert document.get_selection() == SelectionRange.caret(4)

    def test_caret_frozen_while_flow_open(self):
        """Home/End and arrows are swallowed while an import flow is open."""
        document = SequenceDocument().insert("ATGC", silent=True)
        document.set_caret_position(2)
        document.request_import("AC")

        for key in ("Home", "End", "ArrowLeft"):
            assert document.handle_key_down(KeyEvent(key)) is True
        assert document.get_selection() == SelectionRange.caret(2)

        document.active_flow.cancel()
        document.handle_key_down(KeyEvent("Home"))
        assert document.get_selection() == SelectionRange.caret(0)

    def test_navigation_and_shortcuts_pass_through(self, document):
        assert document.handle_key_down(KeyEvent("ArrowLeft")) is False
        assert document.handle_key_down(KeyEvent("c", ctrl=True)) is False
        assert document.get_sequence() == ""

    def test_read_only_swallows_keys(self, document):
        document.set_editable(False)
        assert document.handle_key_down(KeyEvent("A")) is True
        assert document.get_sequence() == ""

    def test_unresolved_selection_leaves_document_unchanged(self, changes):
        host = InMemorySelectionHost()
        document = SequenceDocument(selection_host=host).insert("ATGC", silent=True)
        document.add_on_change_callback(lambda: changes.append(document.get_sequence()))
        host.set_selection(HostSelection((
            HostRange.collapsed(HostPosition(document[0], 0)),
            HostRange.collapsed(HostPosition(document[2], 0)),
        )))

        for key in ("A", "Backspace", "Delete"):
            assert document.handle_key_down(KeyEvent(key)) is True
        assert document.get_sequence() == "ATGC"
        assert changes == []
        assert_consistent(document)


class TestBoundMode:
    """Tests for documents bound to an external residue source."""

    @pytest.fixture
    def residues(self):
        return {10: "ALA", 11: "GLY", 12: "HOH", 13: "CYS"}

    @pytest.fixture
    def bound(self, residues):
        strategy = BoundStrategy(
            proxy_resolver=lambda i: residues[i],
            color_lookup=lambda name: "green" if name == "GLY" else "grey",
        )
        document = SequenceDocument(strategy=strategy)
        document.load_residues((name, i) for i, name in residues.items())
        return document

    def test_load_residues_skips_unknown(self, bound):
        assert bound.mode == EditorMode.BOUND
        assert bound.get_sequence() == "AGC"
        assert [s.sequence_index for s in bound] == [10, 11, 13]
        assert_consistent(bound)

    def test_read_only(self, bound):
        assert not bound.editable
        bound.type_text("A")
        assert bound.get_sequence() == "AGC"
        with pytest.raises(DocumentModeError):
            bound.insert("A")

    def test_resolve_proxy_and_colour(self, bound):
        assert bound.resolve_proxy(bound[1]) == "GLY"
        assert [s.color for s in bound] == ["grey", "green", "grey"]

    def test_colour_function_reset(self, bound):
        bound.set_element_color_function(lambda s: "black")
        assert bound[0].color == "black"
        bound.set_element_color_function(None)
        assert bound[1].color == "green"

    def test_unbound_symbol_rejected(self, bound):
        with pytest.raises(DocumentModeError):
            bound.insert([Symbol("A")])

    def test_load_residues_requires_bound(self, document):
        with pytest.raises(DocumentModeError):
            document.load_residues([("ALA", 0)])


class TestPointerEvents:
    """Tests for hover/click forwarding and highlighting."""

    def test_events_forwarded(self, document):
        document.insert("ATG")
        hovered, clicked = [], []
        document.add_on_element_hovered_callback(hovered.append)
        document.add_on_element_clicked_callback(clicked.append)
        document[1].hover()
        document[2].click()
        assert hovered == [document[1]]
        assert clicked == [document[2]]

    def test_highlight(self, document):
        document.insert("ATGC").set_highlighted(1, 3)
        assert [s.highlighted for s in document] == [False, True, True, False]
        document.clear_highlight()
        assert not any(s.highlighted for s in document)


class TestPaste:
    """Tests for the paste policy and the import flow handoff."""

    def test_paste_commit_replaces_selection(self, changes):
        document = SequenceDocument(
            flow_presenter=lambda flow: flow.commit(InterpretationKind.PROTEIN_THREE_LETTER),
        )
        document.insert("MKV", silent=True).select(1, 2)
        document.add_on_change_callback(lambda: changes.append(document.get_sequence()))

        assert document.handle_paste("alaglycys") is True
        assert document.get_sequence() == "MAGCV"
        assert changes == ["MAGCV"]
        assert document.enabled
        assert document.active_flow is None

    def test_paste_cancel_leaves_document_unchanged(self, changes):
        document = SequenceDocument(flow_presenter=lambda flow: flow.cancel())
        document.insert("ATGC", silent=True)
        document.add_on_change_callback(lambda: changes.append(document.get_sequence()))

        document.handle_paste("ACGT")
        assert document.get_sequence() == "ATGC"
        assert changes == []
        assert document.enabled

    def test_document_disabled_while_flow_open(self):
        document = SequenceDocument()
        document.handle_paste("ACGT")
        flow = document.active_flow

        assert flow.state == FlowState.SHOWING
        assert not document.enabled
        document.type_text("A")
        assert document.get_sequence() == ""

        flow.commit("dna")
        assert document.get_sequence() == "ACGT"
        assert document.enabled

    def test_paste_disabled(self):
        document = SequenceDocument(EditorConfig(paste_enabled=False))
        assert document.handle_paste("ACGT") is True
        assert document.active_flow is None
        assert document.get_sequence() == ""

    def test_paste_handler_overrides_flow(self):
        received = []
        document = SequenceDocument(paste_handler=lambda text, sel: received.append((text, sel)))
        document.insert("AT", silent=True)
        document.handle_paste("GC")
        assert received == [("GC", SelectionRange.caret(2))]
        assert document.active_flow is None

    def test_request_import_appends(self):
        document = SequenceDocument(flow_presenter=lambda flow: flow.commit("dna"))
        document.insert("AA", silent=True).set_caret_position(0)
        flow = document.request_import("cgt")
        result = flow.wait().result()

        assert result.type == SequenceType.DNA
        assert result.selection is None
        assert document.get_sequence() == "AACGT"

    def test_request_import_while_open(self):
        document = SequenceDocument()
        assert document.request_import("A") is not None
        assert document.request_import("C") is None

    def test_dispose_cancels_open_flow(self):
        document = SequenceDocument()
        flow = document.request_import("ACGT")
        document.dispose()
        assert flow.state == FlowState.CANCELLED
        assert flow.wait().result().cancelled

    @pytest.mark.parametrize("error", [KeyboardInterrupt, RuntimeError])
    def test_failing_presenter_cancels_flow(self, error):
        """A presenter that raises leaves no open flow behind."""
        opened = []

        def presenter(flow):
            opened.append(flow)
            raise error("presenter failed")

        document = SequenceDocument(flow_presenter=presenter)
        document.insert("AT", silent=True)

        with pytest.raises(error):
            document.handle_paste("GC")

        flow = opened[0]
        assert flow.state == FlowState.CANCELLED
        assert flow.wait().result().cancelled
        assert document.enabled
        assert document.active_flow is None
        assert document.get_sequence() == "AT"

        document.type_text("G")
        assert document.get_sequence() == "ATG"
        document.set_caret_position(0)
        with pytest.raises(error):
            document.request_import("C")
        assert document.active_flow is None
