#!/usr/bin/env python3
"""
SeqEditor Example: Editing and Importing Sequences

This script walks through the headless editor: typing into a document,
classifying ambiguous pasted text, committing an interpretation through
the import flow, and viewing residues of an external structure in bound
mode.

Run with: python examples/basic_usage.py
"""

from seqeditor import (
    BoundStrategy,
    EditorConfig,
    InterpretationKind,
    SequenceDocument,
    classify,
)
from seqeditor.editor.document import KeyEvent


def print_header(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def show_interpretations(text: str, **flags):
    result = classify(text, **flags)
    print(f"\nInput: {text!r}  (ignored characters: {result.ignored_count})")
    for interpretation in result.interpretations():
        marks = "".join("^" if not u.is_valid else " " for u in interpretation.annotated)
        print(f"  {interpretation.kind.label:<22} {interpretation.display_text}")
        print(f"  {'':<22} {marks}")
        print(
            f"  {'':<22} -> {interpretation.clean_sequence!r} "
            f"({interpretation.invalid_count} invalid, "
            f"{interpretation.valid_fraction:.0%} valid)"
        )


def typing_demo():
    """
    Type into a DNA-only document.

    Keys outside the nucleotide alphabet are swallowed at the keystroke,
    so the document never holds an invalid character.
    """
    print_header("Typing into a DNA document")

    document = SequenceDocument(EditorConfig(accept_protein=False, accept_dna=True))
    document.add_on_change_callback(lambda: print(f"  changed -> {document.get_sequence()}"))

    document.type_text("atgzc")  # 'z' is rejected
    document.handle_key_down(KeyEvent("Backspace"))
    document.select(0, 1)
    document.type_text("g")

    print(f"\nFinal sequence: {document.get_sequence()}")


def classification_demo():
    """Show how the classifier reads ambiguous text."""
    print_header("Classifying pasted text")

    # Three-letter codes also read as one-letter protein
    show_interpretations("alaglycys")
    # ACGT is both a peptide and a nucleotide sequence
    show_interpretations("ACGT TGCA")
    # G is left over after the last full triplet
    show_interpretations("ALAG", accept_dna=False)


def paste_demo():
    """
    Paste into a document and commit the three-letter reading.

    A real host would show the flow to the user; here the presenter picks
    the interpretation directly.
    """
    print_header("Paste and import")

    document = SequenceDocument(
        flow_presenter=lambda flow: flow.commit(InterpretationKind.PROTEIN_THREE_LETTER)
    )
    document.insert("MKV").select(1, 2)
    document.handle_paste("Ala Gly Cys")

    print(f"\nSequence after paste: {document.get_sequence()}")


def bound_demo():
    """View residues of an external chain in a read-only document."""
    print_header("Bound viewer")

    chain = {1: "MET", 2: "LYS", 3: "HOH", 4: "VAL"}
    hydrophobic = {"MET", "VAL"}
    document = SequenceDocument(
        strategy=BoundStrategy(
            proxy_resolver=chain.get,
            color_lookup=lambda name: "orange" if name in hydrophobic else "blue",
        )
    )
    document.load_residues((name, i) for i, name in chain.items())

    for symbol in document:
        print(
            f"  {symbol.value}  residue {symbol.sequence_index:<3} "
            f"{document.resolve_proxy(symbol):<4} {symbol.render().color}"
        )


def main():
    """Run all examples."""
    print("\n" + "=" * 70)
    print("  SeqEditor - Usage Examples")
    print("=" * 70)

    typing_demo()
    classification_demo()
    paste_demo()
    bound_demo()

    print("\n" + "=" * 70)
    print("  Examples complete")
    print("=" * 70 + "\n")


if __name__ == "__main__":
    main()
