"""
Vector layer: distance primitives, embedding providers, vector stores,
the semantic index and the RAG pipeline.
"""

from .types import (
    Distance,
    QueryResult,
    RuVectorConfig,
    SearchParams,
    SearchResult,
    VectorEntry,
    VectorId,
)
from .index import IVectorStore, InMemoryVectorStore
from .faiss_store import FaissVectorStore
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding
from .semantic_index import RuVectorEmbeddings, RuVectorBuilder, match_metadata
from .rag import RagPipeline

__all__ = [
    'Distance',
    'QueryResult',
    'RuVectorConfig',
    'SearchParams',
    'SearchResult',
    'VectorEntry',
    'VectorId',
    'IVectorStore',
    'InMemoryVectorStore',
    'FaissVectorStore',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'RuVectorEmbeddings',
    'RuVectorBuilder',
    'match_metadata',
    'RagPipeline'
]
