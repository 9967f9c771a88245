"""
SeqEditor: structured editing and classification of biological sequences.

This package provides the model behind a sequence-editing widget in which
every character of a protein or nucleotide sequence is an individually
addressable, styleable unit, together with a classifier that resolves the
ambiguity of pasted text. Pasting "ALAGLY" could mean two residues in
three-letter notation or six in one-letter notation, and "ACGT" reads as
protein or as DNA; the classifier computes each reading independently and
marks which characters it accepts, and the import flow lets the user choose.

Key components:
    - core: Alphabets, notation conversion and data models
    - editor: Symbols, selection mapping and the sequence document
    - classification: The paste classifier
    - importing: The interactive paste/import flow and its terminal presenter
    - cli: Command-line interface

Basic usage:
    >>> from seqeditor import SequenceDocument, classify
    >>>
    >>> doc = SequenceDocument()
    >>> doc.insert("ATGC", 0).remove(1, 2).get_sequence()
    'AC'
    >>> classify("alaglycys").three_letter_protein.clean_sequence
    'AGC'

License: MIT
"""

__version__ = "0.1.0"

from .core.models import (
    AnnotatedUnit,
    ClassificationResult,
    ImportResult,
    Interpretation,
    InterpretationKind,
    SelectionRange,
    SequenceType,
)
from .core.sequence import SequenceError, detect_sequence_type
from .classification import SequenceClassifier, classify
from .editor import (
    BoundStrategy,
    EditorConfig,
    EditorMode,
    FreeEditStrategy,
    KeyEvent,
    SelectionMapper,
    SequenceDocument,
    Symbol,
)
from .importing import FlowState, PasteImportFlow

__all__ = [
    # Version
    "__version__",
    # Models
    "AnnotatedUnit",
    "ClassificationResult",
    "ImportResult",
    "Interpretation",
    "InterpretationKind",
    "SelectionRange",
    "SequenceType",
    # Sequence utilities
    "SequenceError",
    "detect_sequence_type",
    # Classifier
    "SequenceClassifier",
    "classify",
    # Editor
    "BoundStrategy",
    "EditorConfig",
    "EditorMode",
    "FreeEditStrategy",
    "KeyEvent",
    "SelectionMapper",
    "SequenceDocument",
    "Symbol",
    # Import flow
    "FlowState",
    "PasteImportFlow",
]
