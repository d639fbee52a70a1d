"""
Tests for the RAG pipeline.
"""

import pytest
from unittest.mock import MagicMock

from ruvector_index.core.errors import EmbeddingError
from ruvector_index.vector.embeddings import DeterministicHashEmbedding
from ruvector_index.vector.index import InMemoryVectorStore
from ruvector_index.vector.rag import RagPipeline
from ruvector_index.vector.semantic_index import RuVectorEmbeddings
from ruvector_index.vector.types import RuVectorConfig, SearchResult


def _mock_index(*texts):
    index = MagicMock()
    index.search.return_value = [
        SearchResult(id=str(i), text=text, score=float(i)) for i, text in enumerate(texts)
    ]
    return index


def test_retrieve_returns_texts_in_rank_order():
    index = _mock_index("alpha", "beta")
    pipeline = RagPipeline(index, top_k=2)

    assert pipeline.retrieve("what?") == ["alpha", "beta"]
    index.search.assert_called_once_with("what?", 2)


def test_format_context_exact_layout():
    """Numbered passages, a blank line, then the question."""
    pipeline = RagPipeline(_mock_index("alpha", "beta"), top_k=2)

    assert pipeline.format_context("what?") == "Context:\n[1] alpha\n[2] beta\n\nQuestion: what?"


def test_format_context_without_results():
    pipeline = RagPipeline(_mock_index(), top_k=3)

    assert pipeline.format_context("anything") == "Context:\n\nQuestion: anything"


def test_build_prompt():
    assert RagPipeline.build_prompt("q", ["x"]) == "Context:\n[1] x\n\nQuestion: q"


def test_add_documents_delegates_to_batch_insert():
    index = MagicMock()
    index.insert_batch.return_value = ["id1", "id2"]
    pipeline = RagPipeline(index, top_k=1)

    assert pipeline.add_documents(["doc one", "doc two"]) == ["id1", "id2"]
    index.insert_batch.assert_called_once_with(["doc one", "doc two"])


def test_default_top_k_from_environment(monkeypatch):
    monkeypatch.setenv("RAG_TOP_K", "7")
    assert RagPipeline(MagicMock()).top_k == 7


def test_errors_propagate():
    index = MagicMock()
    index.search.side_effect = EmbeddingError("provider down")
    pipeline = RagPipeline(index, top_k=1)

    with pytest.raises(EmbeddingError):
        pipeline.format_context("q")


def test_end_to_end_with_real_index():
    index = RuVectorEmbeddings.create(
        "rag", DeterministicHashEmbedding(dimension=384), RuVectorConfig(), store_factory=InMemoryVectorStore
    )
    pipeline = RagPipeline(index, top_k=2)
    pipeline.add_documents([
        "Rust is a systems programming language",
        "Python is popular for data science",
        "Bread is baked in an oven",
    ])

    contexts = pipeline.retrieve("Rust systems programming")
    prompt = pipeline.format_context("Rust systems programming")

    assert len(contexts) == 2
    assert contexts[0] == "Rust is a systems programming language"
    assert prompt.startswith("Context:\n[1] Rust is a systems programming language\n[2] ")
    assert prompt.endswith("\n\nQuestion: Rust systems programming")
    assert pipeline.index is index
