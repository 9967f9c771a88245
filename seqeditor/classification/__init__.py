"""
Classification of pasted text into sequence interpretations.

Three readings are computed independently and are not assumed to be
mutually exclusive: three-letter protein, one-letter protein and DNA.
"""

from .classifier import SequenceClassifier, classify

__all__ = ["SequenceClassifier", "classify"]
