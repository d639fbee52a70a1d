"""
Exception taxonomy for the vector index layer.
Every fallible operation raises one of these with enough context to diagnose.
"""


class RuVectorError(Exception):
    """Base class for all vector index errors."""
    pass


class DimensionMismatch(RuVectorError, ValueError):
    """Input shape violation: vector lengths or batch counts disagree."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Dimension mismatch: expected {expected}, got {actual}")


class EmbeddingError(RuVectorError):
    """Failure raised by an embedding provider."""
    pass


class StoreError(RuVectorError):
    """Failure raised by the underlying vector store, rendered to a string."""
    pass


class InvalidConfiguration(RuVectorError, ValueError):
    """Builder or configuration misuse detected before any store exists."""
    pass


class IndexCreationError(RuVectorError):
    """The backing vector store could not be constructed."""
    pass
