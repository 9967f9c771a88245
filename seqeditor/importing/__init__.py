"""
Interactive import of pasted sequences.

The PasteImportFlow shows the classifier output for pasted text and resolves
once the user commits an interpretation or cancels. The Rich presenter
drives a flow from the terminal.
"""

from .flow import FlowError, FlowState, FlowStateError, PasteImportFlow
from .presenter import RichImportPresenter, classification_table, render_units

__all__ = [
    "PasteImportFlow",
    "FlowState",
    "FlowError",
    "FlowStateError",
    "RichImportPresenter",
    "classification_table",
    "render_units",
]
