"""
ruvector_index: vector similarity search over embedded texts.
"""

from .core.config import VERSION
from .core.errors import (
    RuVectorError,
    DimensionMismatch,
    EmbeddingError,
    StoreError,
    InvalidConfiguration,
    IndexCreationError,
)
from .vector import (
    Distance,
    RuVectorConfig,
    SearchResult,
    DeterministicHashEmbedding,
    SentenceTransformerEmbedding,
    RuVectorEmbeddings,
    RuVectorBuilder,
    RagPipeline,
)

__version__ = VERSION

__all__ = [
    'RuVectorError',
    'DimensionMismatch',
    'EmbeddingError',
    'StoreError',
    'InvalidConfiguration',
    'IndexCreationError',
    'Distance',
    'RuVectorConfig',
    'SearchResult',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'RuVectorEmbeddings',
    'RuVectorBuilder',
    'RagPipeline'
]
