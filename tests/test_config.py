"""
Tests for environment-driven configuration and provider factories.
"""

import pytest

from ruvector_index.core import config
from ruvector_index.vector.embeddings import DeterministicHashEmbedding, SentenceTransformerEmbedding
from ruvector_index.vector.index import InMemoryVectorStore
from ruvector_index.vector.types import Distance, RuVectorConfig


def test_memory_store_from_environment():
    store = config.get_vector_store(16)

    assert isinstance(store, InMemoryVectorStore)
    assert store.dimension == 16


def test_store_receives_config():
    store = config.get_vector_store(8, RuVectorConfig(distance=Distance.EUCLIDEAN))
    assert store.distance == Distance.EUCLIDEAN


def test_invalid_vector_provider(monkeypatch):
    monkeypatch.setenv("VECTOR_PROVIDER", "pinecone")

    with pytest.raises(ValueError, match="Invalid VECTOR_PROVIDER"):
        config.get_vector_store(8)


def test_hash_embedding_provider(monkeypatch):
    monkeypatch.setenv("EMBED_DIM", "32")
    provider = config.get_embedding_provider()

    assert isinstance(provider, DeterministicHashEmbedding)
    assert provider.dimension() == 32


def test_sentence_transformer_provider_is_lazy(monkeypatch):
    """Selecting the model provider does not load the model."""
    monkeypatch.setenv("EMBED_PROVIDER", "sentence_transformer")
    monkeypatch.setenv("EMBED_MODEL_NAME", "custom-model")
    provider = config.get_embedding_provider()

    assert isinstance(provider, SentenceTransformerEmbedding)
    assert provider.model_name == "custom-model"
    assert provider._model is None


def test_invalid_embed_provider(monkeypatch):
    monkeypatch.setenv("EMBED_PROVIDER", "openai")

    with pytest.raises(ValueError, match="Invalid EMBED_PROVIDER"):
        config.get_embedding_provider()


def test_default_config_from_environment(monkeypatch):
    monkeypatch.setenv("RUVECTOR_DISTANCE", "Euclidean")
    monkeypatch.setenv("RUVECTOR_M", "24")
    monkeypatch.setenv("RUVECTOR_EF_CONSTRUCTION", "64")
    monkeypatch.setenv("RUVECTOR_MAX_ELEMENTS", "500")

    assert config.get_default_config() == RuVectorConfig(
        distance=Distance.EUCLIDEAN, m=24, ef_construction=64, max_elements=500
    )


def test_default_config_defaults():
    assert config.get_default_config() == RuVectorConfig()


def test_validate_config_clean():
    assert config.validate_config() == []


def test_validate_config_reports_issues(monkeypatch):
    monkeypatch.setenv("VECTOR_PROVIDER", "bogus")
    monkeypatch.setenv("RUVECTOR_M", "1")
    monkeypatch.setenv("RAG_TOP_K", "0")

    issues = config.validate_config()

    assert any("VECTOR_PROVIDER" in issue for issue in issues)
    assert any("m must be >= 2" in issue for issue in issues)
    assert any("RAG_TOP_K" in issue for issue in issues)


def test_validate_config_bad_distance(monkeypatch):
    monkeypatch.setenv("RUVECTOR_DISTANCE", "hamming")

    issues = config.validate_config()
    assert any("Invalid index configuration" in issue for issue in issues)


def test_faiss_cannot_use_manhattan(monkeypatch):
    monkeypatch.setenv("VECTOR_PROVIDER", "faiss")
    monkeypatch.setenv("RUVECTOR_DISTANCE", "manhattan")

    issues = config.validate_config()
    assert any("manhattan" in issue for issue in issues)


def test_accessors(monkeypatch):
    monkeypatch.setenv("INDEX_NAME", "kb")
    monkeypatch.setenv("RAG_TOP_K", "4")
    monkeypatch.setenv("DEBUG", "TRUE")

    assert config.get_index_name() == "kb"
    assert config.get_rag_top_k() == 4
    assert config.debug_enabled() is True
