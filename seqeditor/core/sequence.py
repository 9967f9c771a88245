"""
Sequence alphabets and conversion utilities for SeqEditor.

This module holds the residue alphabets shared by the editor, the classifier
and the import flow, together with the conversions between amino-acid
notations. Pasted text frequently arrives as FASTA, so a small amount of
FASTA handling lives here as well.
"""

from __future__ import annotations

import logging
from io import StringIO
from typing import Literal, Optional

from Bio import SeqIO

from .models import SequenceType

logger = logging.getLogger(__name__)


# Standard amino acids, three-letter codes in the same order as the one-letter codes
PROTEIN_THREE_LETTER = (
    "ALA", "ARG", "ASN", "ASP",
    "CYS", "GLU", "GLN", "GLY",
    "HIS", "ILE", "LEU", "LYS",
    "MET", "PHE", "PRO", "SER",
    "THR", "TRP", "TYR", "VAL",
)
PROTEIN_ONE_LETTER = (
    "A", "R", "N", "D",
    "C", "E", "Q", "G",
    "H", "I", "L", "K",
    "M", "F", "P", "S",
    "T", "W", "Y", "V",
)

# DNA nucleotides
DNA_VALUES = ("C", "A", "T", "G")

AA_3TO1 = dict(zip(PROTEIN_THREE_LETTER, PROTEIN_ONE_LETTER))
AA_1TO3 = {v: k for k, v in AA_3TO1.items()}

STANDARD_AA = frozenset(PROTEIN_ONE_LETTER)
NUCLEOTIDES = frozenset(DNA_VALUES)

# Every letter that can appear inside a three-letter code (includes O and U)
THREE_LETTER_CHARACTERS = frozenset("".join(PROTEIN_THREE_LETTER))

PROTEIN_CHARACTERS = STANDARD_AA | THREE_LETTER_CHARACTERS
DNA_CHARACTERS = NUCLEOTIDES

# Residue names as found in structure files -> one-letter code.
# Deoxynucleotides appear as DA, DC, DG, DT.
RESNAME_TO_CODE = {
    **{aa: aa for aa in PROTEIN_ONE_LETTER},
    **AA_3TO1,
    **{nt: nt for nt in DNA_VALUES},
    **{"D" + nt: nt for nt in DNA_VALUES},
}

AminoAcidNotation = Literal["three-letter", "one-letter", "invalid"]


class SequenceError(Exception):
    """Exception raised for sequence-related errors."""
    pass


def accepted_characters(
    accept_protein: bool = True,
    accept_dna: bool = True,
) -> frozenset[str]:
    """
    Get the upper-case characters accepted for the requested sequence kinds.

    The protein alphabet covers both notations, so it includes the letters
    of the three-letter codes as well as the one-letter codes.

    Args:
        accept_protein: Accept amino-acid characters
        accept_dna: Accept nucleotide characters

    Returns:
        Frozen set of accepted upper-case characters (empty if neither is accepted)
    """
    accepted: frozenset[str] = frozenset()
    if accept_protein:
        accepted |= PROTEIN_CHARACTERS
    if accept_dna:
        accepted |= DNA_CHARACTERS
    return accepted


def is_accepted(char: str, alphabet: frozenset[str]) -> bool:
    """Case-insensitive membership test for a single character."""
    upper = char.upper()
    return len(upper) == 1 and upper in alphabet


def split_triplets(sequence: str) -> tuple[list[str], str]:
    """
    Split a sequence into consecutive non-overlapping triplets.

    Returns:
        Tuple of (triplets, remainder) where the remainder is shorter than 3
    """
    extra = len(sequence) % 3
    body = sequence[:len(sequence) - extra]
    triplets = [body[i:i + 3] for i in range(0, len(body), 3)]
    return triplets, sequence[len(body):]


def three_to_one(sequence: str) -> str:
    """
    Convert a three-letter amino-acid sequence to one-letter notation.

    Args:
        sequence: Concatenated three-letter codes, e.g. "AlaGlyCys"

    Returns:
        One-letter sequence, e.g. "AGC"

    Raises:
        SequenceError: If the length is not a multiple of three or a code is unknown
    """
    triplets, remainder = split_triplets(sequence.upper())
    if remainder:
        raise SequenceError(
            f"Sequence length {len(sequence)} is not a multiple of three"
        )

    converted = []
    for triplet in triplets:
        if triplet not in AA_3TO1:
            raise SequenceError(f"Unknown three-letter code: {triplet}")
        converted.append(AA_3TO1[triplet])

    return "".join(converted)


def one_to_three(sequence: str) -> str:
    """
    Convert a one-letter amino-acid sequence to three-letter notation.

    Raises:
        SequenceError: If a character is not a standard amino acid
    """
    converted = []
    for aa in sequence.upper():
        if aa not in AA_1TO3:
            raise SequenceError(f"Unknown one-letter code: {aa}")
        converted.append(AA_1TO3[aa])
    return "".join(converted)


def amino_acid_notation(sequence: str) -> AminoAcidNotation:
    """
    Determine whether an amino-acid sequence uses three- or one-letter codes.

    Three-letter notation wins when the whole sequence splits into known
    triplets, so "ALA" is read as alanine rather than as "A", "L", "A".
    """
    seq = sequence.upper()
    if len(seq) >= 3 and len(seq) % 3 == 0:
        triplets, _ = split_triplets(seq)
        if all(t in AA_3TO1 for t in triplets):
            return "three-letter"

    if seq and set(seq) <= STANDARD_AA:
        return "one-letter"
    return "invalid"


def detect_sequence_type(sequence: str) -> SequenceType:
    """
    Guess whether a clean sequence is protein or DNA.

    Order of checks:
    1. Whole sequence made of three-letter codes -> protein
    2. Only nucleotide letters -> DNA
    3. Only one-letter amino-acid codes -> protein

    Args:
        sequence: Sequence without whitespace

    Returns:
        SequenceType (UNKNOWN if nothing matches)
    """
    seq = sequence.upper()
    if not seq:
        return SequenceType.UNKNOWN

    notation = amino_acid_notation(seq)
    if notation == "three-letter":
        return SequenceType.PROTEIN
    if set(seq) <= NUCLEOTIDES:
        return SequenceType.DNA
    if notation == "one-letter":
        return SequenceType.PROTEIN
    return SequenceType.UNKNOWN


def resname_to_code(resname: str) -> Optional[str]:
    """
    Map a residue name (ALA, A, DA, ...) to its one-letter code.

    Returns:
        One-letter code, or None if the residue name is not recognised
    """
    return RESNAME_TO_CODE.get(resname.strip().upper())


def is_fasta(text: str) -> bool:
    """Check whether text looks like FASTA (starts with a '>' header)."""
    return text.lstrip().startswith(">")


def extract_sequence_text(text: str) -> str:
    """
    Strip FASTA headers from pasted text.

    Only the first record is kept since a sequence editor holds a single
    sequence. Text that is not FASTA is returned unchanged.

    Args:
        text: Raw pasted text

    Returns:
        Sequence text of the first FASTA record, or the original text
    """
    if not is_fasta(text):
        return text

    records = list(SeqIO.parse(StringIO(text.lstrip()), "fasta"))
    if not records:
        return ""
    if len(records) > 1:
        logger.warning(
            f"Pasted FASTA contains {len(records)} records, keeping '{records[0].id}'"
        )
    return str(records[0].seq)


def to_fasta(
    sequence: str,
    identifier: str,
    description: str = "",
    line_length: int = 60,
) -> str:
    """
    Format a sequence as a FASTA record.

    Args:
        sequence: Sequence to write
        identifier: Record identifier
        description: Optional free-text description
        line_length: Characters per sequence line

    Returns:
        FASTA-formatted string
    """
    header = f">{identifier} {description}".rstrip()
    lines = [header]
    for i in range(0, len(sequence), line_length):
        lines.append(sequence[i:i + line_length])
    return "\n".join(lines)
