"""
Core data models for SeqEditor.

This module defines the value objects exchanged between the classifier, the
import flow and the document: annotated interpretations of pasted text,
selection ranges and import results. All models use Pydantic for validation
and serialization.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator


class SequenceType(str, Enum):
    """Biological type of a committed sequence."""
    PROTEIN = "protein"
    DNA = "dna"
    UNKNOWN = "unknown"


class InterpretationKind(str, Enum):
    """
    The parallel readings the classifier derives from pasted text.

    - PROTEIN_THREE_LETTER: concatenated three-letter codes (AlaGlyCys)
    - PROTEIN_ONE_LETTER: one-letter amino-acid codes (AGC)
    - DNA: nucleotide letters (ACGT)
    """
    PROTEIN_THREE_LETTER = "protein_three_letter"
    PROTEIN_ONE_LETTER = "protein_one_letter"
    DNA = "dna"

    @property
    def sequence_type(self) -> SequenceType:
        """Sequence type committed when this interpretation is picked."""
        if self is InterpretationKind.DNA:
            return SequenceType.DNA
        return SequenceType.PROTEIN

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    InterpretationKind.PROTEIN_THREE_LETTER: "Protein three-letter",
    InterpretationKind.PROTEIN_ONE_LETTER: "Protein one-letter",
    InterpretationKind.DNA: "DNA",
}


class AnnotatedUnit(BaseModel):
    """A single displayed character and whether it passed validation."""
    model_config = ConfigDict(frozen=True)

    unit: str = Field(..., min_length=1, max_length=1)
    is_valid: bool


def units_text(units: list[AnnotatedUnit]) -> str:
    """Concatenate the characters of annotated units."""
    return "".join(u.unit for u in units)


class Interpretation(BaseModel):
    """
    One validated reading of pasted text.

    `annotated` holds the units of the clean copy: characters rejected by
    the alphabet scan never reach an interpretation and only show up in
    ClassificationResult.display. `invalid_count` counts undetected residues:
    invalid units for one-letter protein and DNA, unknown triplets plus a
    trailing remainder for three-letter protein. `clean_sequence` only
    contains what the reading accepted, translated to one-letter codes for
    three-letter protein.
    """
    kind: InterpretationKind
    clean_sequence: str = ""
    invalid_count: int = Field(0, ge=0)
    annotated: list[AnnotatedUnit] = Field(default_factory=list)

    @property
    def sequence_type(self) -> SequenceType:
        return self.kind.sequence_type

    @property
    def is_clean(self) -> bool:
        """Whether the reading detected every residue of the clean copy."""
        return self.invalid_count == 0

    @property
    def display_text(self) -> str:
        return units_text(self.annotated)

    @property
    def valid_mask(self) -> np.ndarray:
        """Boolean array, True where the unit is valid."""
        return np.fromiter(
            (u.is_valid for u in self.annotated), dtype=bool, count=len(self.annotated)
        )

    @property
    def valid_fraction(self) -> float:
        """Fraction of units marked valid (0.0 for empty input)."""
        mask = self.valid_mask
        if mask.size == 0:
            return 0.0
        return float(mask.mean())


class ClassificationResult(BaseModel):
    """
    Output of the sequence classifier.

    Holds the annotated display copy of the raw text and up to three
    interpretations. Interpretations that were not requested are None.
    """
    raw_text: str = ""
    accept_protein: bool = True
    accept_dna: bool = True

    display: list[AnnotatedUnit] = Field(default_factory=list)
    ignored_count: int = Field(0, ge=0, description="Characters outside the accepted alphabet")
    clean_text: str = Field("", description="Upper-cased accepted characters")

    three_letter_protein: Optional[Interpretation] = None
    one_letter_protein: Optional[Interpretation] = None
    nucleotide: Optional[Interpretation] = None

    def interpretations(self) -> list[Interpretation]:
        """Computed interpretations in display order."""
        candidates = [self.three_letter_protein, self.one_letter_protein, self.nucleotide]
        return [i for i in candidates if i is not None]

    @property
    def available_kinds(self) -> list[InterpretationKind]:
        return [i.kind for i in self.interpretations()]

    def get(self, kind: InterpretationKind | str) -> Interpretation:
        """
        Get an interpretation by kind.

        Raises:
            KeyError: If the interpretation was not computed
        """
        kind = InterpretationKind(kind)
        for interpretation in self.interpretations():
            if interpretation.kind is kind:
                return interpretation
        raise KeyError(f"Interpretation not available: {kind.value}")

    def best(self) -> Optional[Interpretation]:
        """
        Interpretation with the fewest undetected residues.

        Ties keep display order. Purely advisory: the classifier never
        decides for the user.
        """
        interpretations = self.interpretations()
        if not interpretations:
            return None
        return min(interpretations, key=lambda i: i.invalid_count)


class SelectionRange(BaseModel):
    """Logical [start, end) range over a sequence document."""
    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)

    @model_validator(mode="after")
    def end_not_before_start(self) -> SelectionRange:
        if self.end < self.start:
            raise ValueError("end must not be smaller than start")
        return self

    @classmethod
    def ordered(cls, a: int, b: int) -> SelectionRange:
        """Build a range from two boundaries in any order."""
        return cls(start=min(a, b), end=max(a, b))

    @classmethod
    def caret(cls, position: int) -> SelectionRange:
        return cls(start=position, end=position)

    @property
    def collapsed(self) -> bool:
        return self.start == self.end

    @property
    def length(self) -> int:
        return self.end - self.start


class ImportResult(BaseModel):
    """
    Resolution of a paste/import flow.

    A cancelled flow resolves with an empty sequence, type UNKNOWN and no kind.
    """
    sequence: str = ""
    type: SequenceType = SequenceType.UNKNOWN
    kind: Optional[InterpretationKind] = None
    selection: Optional[SelectionRange] = None

    @property
    def cancelled(self) -> bool:
        return self.kind is None
