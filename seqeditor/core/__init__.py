"""
Core data structures and utilities for SeqEditor.

Modules:
    models: Pydantic models for interpretations, selections and import results
    sequence: Residue alphabets, notation conversion and FASTA helpers
"""

from .models import (
    AnnotatedUnit,
    ClassificationResult,
    ImportResult,
    Interpretation,
    InterpretationKind,
    SelectionRange,
    SequenceType,
)
from .sequence import (
    AA_1TO3,
    AA_3TO1,
    DNA_VALUES,
    NUCLEOTIDES,
    PROTEIN_ONE_LETTER,
    PROTEIN_THREE_LETTER,
    STANDARD_AA,
    SequenceError,
    accepted_characters,
    amino_acid_notation,
    detect_sequence_type,
    extract_sequence_text,
    one_to_three,
    resname_to_code,
    three_to_one,
    to_fasta,
)

__all__ = [
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
    "accepted_characters",
    "amino_acid_notation",
    "detect_sequence_type",
    "extract_sequence_text",
    "one_to_three",
    "resname_to_code",
    "three_to_one",
    "to_fasta",
    "AA_1TO3",
    "AA_3TO1",
    "DNA_VALUES",
    "NUCLEOTIDES",
    "PROTEIN_ONE_LETTER",
    "PROTEIN_THREE_LETTER",
    "STANDARD_AA",
]
