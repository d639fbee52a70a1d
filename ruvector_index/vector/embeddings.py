"""
Embedding providers: text in, fixed-dimension float vector out.
The index layer only depends on IEmbeddingProvider.
"""

from abc import ABC, abstractmethod
import hashlib
import re
from typing import List, Sequence

import numpy as np

from ..core.errors import EmbeddingError

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass

    @abstractmethod
    def embed_one(self, text: str) -> List[float]:
        """Generate embedding vector for given text."""
        pass

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed multiple texts, preserving input order."""
        return [self.embed_one(text) for text in texts]


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider for testing purposes.

    Each lowercased word token is hashed (sha256) into a bucket with a sign,
    and the bucket counts are L2-normalized. Texts sharing words land close
    together, so ranking behaves sensibly without a model download. Empty
    text yields the zero vector.
    """

    def __init__(self, dimension: int = 384):
        if dimension < 1:
            raise ValueError("dimension must be >= 1")
        self._dimension = dimension

    def dimension(self) -> int:
        return self._dimension

    def embed_one(self, text: str) -> List[float]:
        """Generate deterministic embedding vector using feature hashing."""
        if not isinstance(text, str):
            raise EmbeddingError(f"Expected str input, got {type(text).__name__}")

        vector = np.zeros(self._dimension, dtype=np.float64)
        for token in _TOKEN_RE.findall(text.lower()):
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            bucket = int.from_bytes(digest[:8], "big") % self._dimension
            sign = 1.0 if digest[8] & 1 else -1.0
            vector[bucket] += sign

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm

        return vector.astype(np.float32).tolist()


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models.

    The model is loaded on first use.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        self.model_name = model_name
        self._model = None
        self._dimension = None

    @property
    def model(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer
            try:
                self._model = SentenceTransformer(self.model_name)
            except Exception as e:
                raise EmbeddingError(f"Failed to load model '{self.model_name}': {e}") from e
        return self._model

    def dimension(self) -> int:
        if self._dimension is None:
            dimension = self.model.get_sentence_embedding_dimension()
            if dimension is None:
                # Some models only report their size after encoding
                dimension = len(self.embed_one("test"))
            self._dimension = int(dimension)
        return self._dimension

    def embed_one(self, text: str) -> List[float]:
        """Generate embedding vector using sentence transformers."""
        return self.embed([text])[0]

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        """Batch-encode texts with the model."""
        if not texts:
            return []
        try:
            embeddings = self.model.encode(list(texts), convert_to_numpy=True)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Embedding failed: {e}") from e
        return np.asarray(embeddings, dtype=np.float32).tolist()
