"""
Classification of pasted text into biological interpretations.

Pasted text is ambiguous: "ALAGLY" may be two amino acids in three-letter
notation or six one-letter residues, and "ACGT" reads equally well as
protein or DNA. Instead of guessing, the classifier computes every requested
reading independently and marks which characters each reading accepts, so
the user can judge how far the text diverges from a valid sequence and pick
the interpretation they meant.

Algorithm:
1. Build the accepted alphabet from the requested sequence kinds.
2. Scan the raw text case-insensitively. Characters outside the alphabet
   stay in the display copy, flagged invalid, and are left out of the
   upper-cased clean copy.
3. Interpret the clean copy as three-letter protein, one-letter protein
   and/or nucleotides. Interpretations only see the clean copy, so
   whitespace and other ignored characters never count against them.
"""

from __future__ import annotations

import logging

from ..core.models import AnnotatedUnit, ClassificationResult, Interpretation, InterpretationKind
from ..core.sequence import AA_3TO1, NUCLEOTIDES, STANDARD_AA, accepted_characters, split_triplets

logger = logging.getLogger(__name__)


class SequenceClassifier:
    """
    Classifies raw text into validated sequence interpretations.

    Args:
        accept_protein: Compute the two protein interpretations
        accept_dna: Compute the nucleotide interpretation

    Raises:
        ValueError: If neither protein nor DNA is accepted

    Example:
        >>> result = SequenceClassifier().classify("alaglycys")
        >>> result.three_letter_protein.clean_sequence
        'AGC'
    """

    def __init__(self, accept_protein: bool = True, accept_dna: bool = True):
        if not (accept_protein or accept_dna):
            raise ValueError("At least one of protein or DNA must be accepted")
        self.accept_protein = accept_protein
        self.accept_dna = accept_dna
        self.alphabet = accepted_characters(accept_protein, accept_dna)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(accept_protein={self.accept_protein}, "
            f"accept_dna={self.accept_dna})"
        )

    def classify(self, text: str) -> ClassificationResult:
        """
        Classify raw text.

        Args:
            text: Raw pasted text (any characters)

        Returns:
            ClassificationResult with the display copy and the requested
            interpretations
        """
        display: list[AnnotatedUnit] = []
        clean_chars: list[str] = []

        for char in text:
            upper = char.upper()
            if len(upper) == 1 and upper in self.alphabet:
                display.append(AnnotatedUnit(unit=char, is_valid=True))
                clean_chars.append(upper)
            else:
                display.append(AnnotatedUnit(unit=char, is_valid=False))

        clean = "".join(clean_chars)
        ignored = len(text) - len(clean)

        result = ClassificationResult(
            raw_text=text,
            accept_protein=self.accept_protein,
            accept_dna=self.accept_dna,
            display=display,
            ignored_count=ignored,
            clean_text=clean,
        )

        if self.accept_protein:
            result.three_letter_protein = _read_three_letter(clean)
            result.one_letter_protein = _read_alphabet(
                InterpretationKind.PROTEIN_ONE_LETTER, clean, STANDARD_AA
            )

        if self.accept_dna:
            result.nucleotide = _read_alphabet(InterpretationKind.DNA, clean, NUCLEOTIDES)

        logger.debug(
            f"Classified {len(text)} character(s): {ignored} ignored, "
            + ", ".join(f"{i.kind.value}={i.invalid_count} invalid" for i in result.interpretations())
        )
        return result


def classify(
    text: str,
    accept_protein: bool = True,
    accept_dna: bool = True,
) -> ClassificationResult:
    """Classify raw text with a one-off SequenceClassifier."""
    return SequenceClassifier(accept_protein, accept_dna).classify(text)


def _read_three_letter(clean: str) -> Interpretation:
    triplets, remainder = split_triplets(clean)
    sequence = []
    units = []
    undetected = 0
    for triplet in triplets:
        valid = triplet in AA_3TO1
        if valid:
            sequence.append(AA_3TO1[triplet])
        else:
            undetected += 1
        # Displayed as Ala, Gly, ...
        for char in triplet[0] + triplet[1:].lower():
            units.append(AnnotatedUnit(unit=char, is_valid=valid))
    for char in remainder:
        units.append(AnnotatedUnit(unit=char, is_valid=False))
    if remainder:
        undetected += 1

    return Interpretation(
        kind=InterpretationKind.PROTEIN_THREE_LETTER,
        clean_sequence="".join(sequence),
        invalid_count=undetected,
        annotated=units,
    )


def _read_alphabet(
    kind: InterpretationKind,
    clean: str,
    alphabet: frozenset[str],
) -> Interpretation:
    units = [AnnotatedUnit(unit=char, is_valid=char in alphabet) for char in clean]
    return Interpretation(
        kind=kind,
        clean_sequence="".join(u.unit for u in units if u.is_valid),
        invalid_count=sum(1 for u in units if not u.is_valid),
        annotated=units,
    )
