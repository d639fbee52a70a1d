"""
Environment-driven configuration and provider factories.
Module constants are read at import; the accessor functions re-read the
environment on every call.
"""

import os

from dotenv import load_dotenv

load_dotenv()

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Vector store and embedding providers
VECTOR_PROVIDER = os.getenv("VECTOR_PROVIDER", "memory")  # memory|faiss
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "hash")  # hash|sentence_transformer
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "all-MiniLM-L6-v2")
EMBED_DIM = int(os.getenv("EMBED_DIM", "384"))

# Index construction defaults
RUVECTOR_DISTANCE = os.getenv("RUVECTOR_DISTANCE", "cosine")  # cosine|euclidean|dot_product|manhattan
RUVECTOR_M = int(os.getenv("RUVECTOR_M", "16"))
RUVECTOR_EF_CONSTRUCTION = int(os.getenv("RUVECTOR_EF_CONSTRUCTION", "100"))
RUVECTOR_MAX_ELEMENTS = int(os.getenv("RUVECTOR_MAX_ELEMENTS", "100000"))

# Retrieval-augmented generation
RAG_TOP_K = int(os.getenv("RAG_TOP_K", "3"))

# HTTP API
INDEX_NAME = os.getenv("INDEX_NAME", "default")

# Version string
VERSION = "0.1.0"

VALID_VECTOR_PROVIDERS = ["memory", "faiss"]
VALID_EMBED_PROVIDERS = ["hash", "sentence_transformer"]


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_vector_provider():
    """Get vector store provider name (memory|faiss)."""
    return os.getenv("VECTOR_PROVIDER", "memory").lower()


def get_embed_provider():
    """Get embedding provider name (hash|sentence_transformer)."""
    return os.getenv("EMBED_PROVIDER", "hash").lower()


def get_rag_top_k():
    """Get default top-k for the RAG pipeline."""
    return int(os.getenv("RAG_TOP_K", str(RAG_TOP_K)))


def get_index_name():
    """Get the display name of the API-served index."""
    return os.getenv("INDEX_NAME", INDEX_NAME)


def get_default_config():
    """Build a RuVectorConfig from the RUVECTOR_* environment variables."""
    from ..vector.types import Distance, RuVectorConfig

    return RuVectorConfig(
        distance=Distance.parse(os.getenv("RUVECTOR_DISTANCE", RUVECTOR_DISTANCE)),
        m=int(os.getenv("RUVECTOR_M", str(RUVECTOR_M))),
        ef_construction=int(os.getenv("RUVECTOR_EF_CONSTRUCTION", str(RUVECTOR_EF_CONSTRUCTION))),
        max_elements=int(os.getenv("RUVECTOR_MAX_ELEMENTS", str(RUVECTOR_MAX_ELEMENTS))),
    )


def get_vector_store(dimension, config=None):
    """Get configured vector store implementation for the given dimension."""
    provider = get_vector_provider()

    if provider == "memory":
        from ..vector.index import InMemoryVectorStore
        return InMemoryVectorStore(dimension, config)
    elif provider == "faiss":
        from ..vector.faiss_store import FaissVectorStore
        return FaissVectorStore(dimension, config)
    else:
        raise ValueError(f"Invalid VECTOR_PROVIDER: {provider}")


def get_embedding_provider():
    """Get configured embedding provider implementation."""
    provider = get_embed_provider()

    if provider == "hash":
        from ..vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(int(os.getenv("EMBED_DIM", str(EMBED_DIM))))
    elif provider == "sentence_transformer":
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(os.getenv("EMBED_MODEL_NAME", EMBED_MODEL_NAME))
    else:
        raise ValueError(f"Invalid EMBED_PROVIDER: {provider}")


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if get_vector_provider() not in VALID_VECTOR_PROVIDERS:
        issues.append(f"Invalid VECTOR_PROVIDER: {get_vector_provider()}")

    if get_embed_provider() not in VALID_EMBED_PROVIDERS:
        issues.append(f"Invalid EMBED_PROVIDER: {get_embed_provider()}")

    try:
        config = get_default_config()
    except ValueError as e:
        issues.append(f"Invalid index configuration: {e}")
    else:
        issues.extend(config.validate())
        if get_vector_provider() == "faiss" and config.distance.value == "manhattan":
            issues.append("VECTOR_PROVIDER=faiss does not support RUVECTOR_DISTANCE=manhattan")

    if get_rag_top_k() < 1:
        issues.append("RAG_TOP_K must be >= 1")

    return issues
