"""
SeqEditor test suite.

Tests cover the residue alphabets and notation conversions, the data
models, the sequence document with its selection mapping, the paste
classifier, the import flow and the command-line interface.
"""
