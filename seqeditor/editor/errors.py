"""Exceptions raised by sequence documents."""


class DocumentError(Exception):
    """Base exception for sequence document errors."""
    pass


class SymbolStateError(DocumentError):
    """Raised when inserting a Symbol that is attached elsewhere or disposed."""
    pass


class DocumentModeError(DocumentError):
    """Raised when a Symbol or operation does not fit the document's mode."""
    pass


class ReentrantMutationError(DocumentError):
    """Raised when a document is mutated while one of its mutations is running."""
    pass
