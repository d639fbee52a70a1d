"""
Shared fixtures: in-memory store, hash embeddings, small dimensions.
"""

import pytest

from ruvector_index.vector.embeddings import DeterministicHashEmbedding
from ruvector_index.vector.index import InMemoryVectorStore
from ruvector_index.vector.semantic_index import RuVectorEmbeddings
from ruvector_index.vector.types import RuVectorConfig

TEST_DIM = 64


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Pin providers so tests never depend on the caller's environment."""
    monkeypatch.setenv("VECTOR_PROVIDER", "memory")
    monkeypatch.setenv("EMBED_PROVIDER", "hash")
    monkeypatch.setenv("EMBED_DIM", str(TEST_DIM))
    monkeypatch.delenv("RUVECTOR_DISTANCE", raising=False)
    monkeypatch.delenv("RAG_TOP_K", raising=False)


@pytest.fixture
def embedder():
    """Deterministic hash embedder with a small dimension."""
    return DeterministicHashEmbedding(dimension=TEST_DIM)


@pytest.fixture
def index(embedder):
    """Empty cosine index backed by the exact in-memory store."""
    return RuVectorEmbeddings.create("test", embedder, RuVectorConfig(), store_factory=InMemoryVectorStore)
