"""
Unit tests for Symbols and the selection mapper.

The mapper is the only component that reads the host's native selection,
so it is tested against host positions on the document root, on units and
inside units' text nodes, as well as foreign and multi-range selections.
"""

import pytest

from seqeditor.core.models import SelectionRange
from seqeditor.editor.document import SequenceDocument
from seqeditor.editor.selection import (
    HostPosition,
    HostRange,
    HostSelection,
    InMemorySelectionHost,
)
from seqeditor.editor.symbol import RenderedUnit, Symbol


class TestSymbol:
    """Tests for single character units."""

    def test_single_character(self):
        with pytest.raises(ValueError, match="single character"):
            Symbol("AB")
        with pytest.raises(ValueError):
            Symbol("")

    def test_negative_sequence_index(self):
        with pytest.raises(ValueError):
            Symbol("A", sequence_index=-1)

    def test_detached_defaults(self):
        symbol = Symbol("A")
        assert symbol.logical_index == -1
        assert not symbol.attached
        assert not symbol.disposed
        assert symbol.sequence_index is None

    def test_render_prefers_override(self):
        symbol = Symbol("A")
        symbol.color = "red"
        assert symbol.render() == RenderedUnit("A", "red", False, True)
        symbol.color_override = "blue"
        assert symbol.render().color == "blue"

    def test_pointer_callbacks(self):
        symbol = Symbol("A")
        clicked, hovered = [], []
        symbol.add_on_click_callback(clicked.append)
        symbol.add_on_hover_callback(hovered.append)
        symbol.click()
        symbol.hover()
        assert clicked == [symbol]
        assert hovered == [symbol]

    def test_dispose(self):
        symbol = Symbol("A")
        symbol.attach(object())
        symbol.dispose()
        assert symbol.disposed
        assert not symbol.attached
        with pytest.raises(RuntimeError):
            symbol.attach(object())


class TestSelectionMapper:
    """Tests for host selection <-> logical offset mapping."""

    @pytest.fixture
    def host(self):
        return InMemorySelectionHost()

    @pytest.fixture
    def document(self, host):
        return SequenceDocument(selection_host=host).insert("ATGC", silent=True)

    def test_caret_after_insert(self, document):
        assert document.get_selection() == SelectionRange.caret(4)

    def test_position_on_root(self, document, host):
        host.set_selection(HostSelection.single(HostPosition(document.root, 2)))
        assert document.get_selection() == SelectionRange.caret(2)

    def test_root_offset_clamped(self, document, host):
        host.set_selection(HostSelection.single(HostPosition(document.root, 99)))
        assert document.get_selection() == SelectionRange.caret(4)

    def test_position_inside_unit(self, document, host):
        """Offset 1 inside the text of unit 1 is the caret after it."""
        host.set_selection(HostSelection.single(HostPosition(document[1].text_node, 1)))
        assert document.get_selection() == SelectionRange.caret(2)

    def test_backwards_selection_is_ordered(self, document, host):
        host.set_selection(HostSelection.single(
            HostPosition(document[3], 1),
            HostPosition(document[1], 0),
        ))
        assert document.get_selection() == SelectionRange(start=1, end=4)

    def test_two_ranges_unresolved(self, document, host):
        first = HostRange.collapsed(HostPosition(document[0], 0))
        second = HostRange.collapsed(HostPosition(document[2], 0))
        host.set_selection(HostSelection((first, second)))
        assert document.get_selection() is None

    def test_no_range_unresolved(self, document, host):
        host.set_selection(HostSelection())
        assert document.get_selection() is None

    def test_outside_document_unresolved(self, document, host):
        other = SequenceDocument().insert("AAA", silent=True)
        host.set_selection(HostSelection.single(HostPosition(other[0], 0)))
        assert document.get_selection() is None

    def test_detached_symbol_unresolved(self, document, host):
        removed = document[0]
        document.remove(0)
        host.set_selection(HostSelection.single(HostPosition(removed, 0)))
        assert document.get_selection() is None

    def test_select_round_trip(self, document):
        document.select(1, 3)
        assert document.get_selection() == SelectionRange(start=1, end=3)
        assert [s.value for s in document.selected_symbols] == ["T", "G"]

    def test_empty_document_caret(self):
        document = SequenceDocument()
        assert document.get_selection() == SelectionRange.caret(0)
        assert document.selection_mapper.to_host_position(5).node is document.root
