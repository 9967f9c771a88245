"""
SeqEditor Command Line Interface.

This module exposes the sequence classifier and the interactive import flow
on the terminal. Built with Click, with Rich for coloured output: invalid
characters of every interpretation are highlighted in red.

Usage:
    seqeditor classify "ALA GLY CYS"
    seqeditor import --file query.fasta --fasta-id query
    seqeditor detect-type ATGCGT
    seqeditor convert AlaGlyCys --to one
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from .. import __version__

# Initialize rich console for pretty output
console = Console()


def print_banner():
    """Print the SeqEditor banner."""
    console.print(f"[bold blue]SeqEditor v{__version__}[/bold blue] - sequence import and classification")


@click.group()
@click.version_option(version=__version__, prog_name="SeqEditor")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """
    SeqEditor: type, paste and classify biological sequences.

    \b
    • Classify pasted text as three-letter protein, one-letter protein or DNA
    • Interactively pick the interpretation to import
    • Convert between amino-acid notations

    Run 'seqeditor COMMAND --help' for command-specific help.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    if not quiet:
        print_banner()


def _require_alphabet(protein: bool, dna: bool) -> None:
    if not (protein or dna):
        raise click.UsageError("At least one of --protein or --dna must be enabled")


@cli.command("classify")
@click.argument("text")
@click.option("--protein/--no-protein", default=True, help="Compute the protein interpretations")
@click.option("--dna/--no-dna", default=True, help="Compute the DNA interpretation")
@click.option("--json", "as_json", is_flag=True, help="Print the classification as JSON")
def classify_cmd(text: str, protein: bool, dna: bool, as_json: bool):
    """
    Classify TEXT into its possible sequence interpretations.

    \b
    Examples:
        seqeditor classify alaglycys
        seqeditor classify "ATG CGT" --no-protein
        seqeditor -q classify MVLSPADK --json
    """
    from ..classification.classifier import classify
    from ..importing.presenter import classification_table

    _require_alphabet(protein, dna)
    result = classify(text, accept_protein=protein, accept_dna=dna)

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    console.print(classification_table(result, numbered=False))
    best = result.best()
    if best is not None and best.is_clean:
        console.print(f"[green]✓[/green] Fully valid as {best.kind.label}: {best.clean_sequence}")


@cli.command("import")
@click.argument("text", required=False)
@click.option("--file", "-f", type=click.Path(exists=True), help="Read the text to import from a file")
@click.option("--protein/--no-protein", default=True, help="Offer the protein interpretations")
@click.option("--dna/--no-dna", default=True, help="Offer the DNA interpretation")
@click.option("--fasta-id", default=None, help="Print the result as a FASTA record with this identifier")
def import_cmd(text: Optional[str], file: Optional[str], protein: bool, dna: bool, fasta_id: Optional[str]):
    """
    Interactively import a sequence from TEXT or a file.

    Shows every interpretation with invalid characters highlighted, then
    asks which one to import. The text can be edited before choosing.

    \b
    Examples:
        seqeditor import alaglycys
        seqeditor import -f query.fasta --fasta-id query
    """
    from ..core.sequence import to_fasta
    from ..editor.document import EditorConfig, SequenceDocument
    from ..importing.presenter import RichImportPresenter

    _require_alphabet(protein, dna)

    raw = text or ""
    if file:
        raw = Path(file).read_text()

    document = SequenceDocument(
        EditorConfig(accept_protein=protein, accept_dna=dna),
        flow_presenter=RichImportPresenter(console),
    )
    flow = document.request_import(raw)
    result = flow.wait().result()

    if result.cancelled:
        console.print("[yellow]Import cancelled.[/yellow]")
        sys.exit(1)

    sequence = document.get_sequence()
    console.print(
        f"[green]✓[/green] Imported {len(sequence)} residue(s) as {result.type.value}"
    )
    if fasta_id:
        click.echo(to_fasta(sequence, fasta_id, description=f"type={result.type.value}"))
    else:
        click.echo(sequence)


@cli.command("detect-type")
@click.argument("sequence")
def detect_type_cmd(sequence: str):
    """
    Detect whether SEQUENCE is protein or DNA.

    Three-letter protein notation is checked first, then DNA, then
    one-letter protein.
    """
    from ..core.sequence import amino_acid_notation, detect_sequence_type

    seq = "".join(sequence.split())
    sequence_type = detect_sequence_type(seq)
    console.print(f"[bold]Type:[/bold] {sequence_type.value}")
    console.print(f"[bold]Amino-acid notation:[/bold] {amino_acid_notation(seq)}")


@cli.command("convert")
@click.argument("sequence")
@click.option(
    "--to", "target",
    type=click.Choice(["one", "three"]),
    default="one",
    help="Target amino-acid notation",
)
def convert_cmd(sequence: str, target: str):
    """
    Convert SEQUENCE between three-letter and one-letter notation.

    \b
    Examples:
        seqeditor convert AlaGlyCys --to one
        seqeditor convert AGC --to three
    """
    from ..core.sequence import SequenceError, one_to_three, three_to_one

    seq = "".join(sequence.split())
    try:
        converted = three_to_one(seq) if target == "one" else one_to_three(seq)
    except SequenceError as e:
        console.print(f"[red]✗ Conversion failed:[/red] {e}")
        sys.exit(1)

    click.echo(converted)


def main():
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
