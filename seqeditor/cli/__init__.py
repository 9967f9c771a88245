"""
Command-line interface for SeqEditor.

Usage patterns:
    seqeditor classify "ALA GLY CYS"
    seqeditor import --file query.fasta
    seqeditor convert AlaGlyCys --to one
"""

from .main import cli, main

__all__ = ["cli", "main"]
