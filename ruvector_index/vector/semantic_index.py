"""
Semantic index: couples an embedding provider to a vector store.

RuVectorEmbeddings owns one vector store and a side-mapping from vector id to
original text. Metadata lives in the store next to each vector; the text
mapping lives here. The two are kept in step: an id is recorded in the text
mapping only after the store accepted it, and if recording fails the vector
is removed from the store again before the error propagates.
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..core.config import get_vector_store
from ..core.errors import (
    DimensionMismatch,
    IndexCreationError,
    InvalidConfiguration,
    StoreError,
)
from ..util.logging import logger
from .embeddings import IEmbeddingProvider
from .index import IVectorStore
from .types import Distance, RuVectorConfig, SearchParams, SearchResult, VectorEntry, VectorId

# Search breadth multiplier for plain searches
SEARCH_OVERSAMPLE = 2
# Candidate multiplier compensating for post-hoc filtering
FILTER_OVERSAMPLE = 4

Metadata = Dict[str, Any]
MetadataPredicate = Callable[[Metadata], bool]
StoreFactory = Callable[[int, RuVectorConfig], IVectorStore]


def match_metadata(filters: Mapping[str, Any]) -> MetadataPredicate:
    """Predicate accepting metadata whose values equal every filter value."""
    expected = dict(filters)

    def predicate(metadata: Metadata) -> bool:
        return all(metadata.get(k) == v for k, v in expected.items())

    return predicate


@contextmanager
def _store_errors(operation: str):
    """Render any store failure to a string and wrap it in StoreError."""
    try:
        yield
    except DimensionMismatch:
        raise
    except Exception as e:
        raise StoreError(f"Vector store {operation} failed: {e}") from e


class RuVectorEmbeddings:
    """
    Vector index over embedded texts.

    Not internally synchronized: inserts, deletes and clear need exclusive
    access; searches and gets may run concurrently with each other only.
    """

    def __init__(
        self,
        name: str,
        embedder: IEmbeddingProvider,
        config: Optional[RuVectorConfig] = None,
        store_factory: Optional[StoreFactory] = None,
    ):
        """
        Create the index and its backing vector store.

        Args:
            name: Display name of the index
            embedder: Embedding provider; its dimension fixes the store dimension
            config: Store construction parameters, defaults to RuVectorConfig()
            store_factory: Callable (dimension, config) -> IVectorStore,
                defaults to the configured VECTOR_PROVIDER

        Raises:
            IndexCreationError: If the config is invalid or the store cannot be built
        """
        self._name = name
        self._embedder = embedder
        self._config = config or RuVectorConfig()
        self._texts: Dict[VectorId, str] = {}

        issues = self._config.validate()
        if issues:
            logger.log_index_operation(name, "create", {"issues": issues}, status="failed")
            raise IndexCreationError(f"Invalid configuration for index '{name}': {'; '.join(issues)}")

        try:
            dimension = int(embedder.dimension())
            factory = store_factory or get_vector_store
            self._store = factory(dimension, self._config)
        except Exception as e:
            logger.log_index_operation(name, "create", {"error": str(e)}, status="failed")
            raise IndexCreationError(f"Failed to create index '{name}': {e}") from e

        self._dimension = dimension
        logger.log_index_operation(name, "create", {
            "dimension": dimension,
            "store": type(self._store).__name__,
            **self._config.to_dict()
        })

    @classmethod
    def create(cls, name: str, embedder: IEmbeddingProvider, config: RuVectorConfig,
               store_factory: Optional[StoreFactory] = None) -> "RuVectorEmbeddings":
        return cls(name, embedder, config, store_factory)

    @classmethod
    def default(cls, name: str, embedder: IEmbeddingProvider) -> "RuVectorEmbeddings":
        """Create an index with the default configuration."""
        return cls(name, embedder, RuVectorConfig())

    @property
    def name(self) -> str:
        return self._name

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def embedder(self) -> IEmbeddingProvider:
        return self._embedder

    @property
    def config(self) -> RuVectorConfig:
        return self._config

    def __len__(self) -> int:
        return len(self._store)

    def is_empty(self) -> bool:
        return self._store.is_empty()

    def _check_dimension(self, vector: Sequence[float]) -> None:
        if len(vector) != self._dimension:
            raise DimensionMismatch(self._dimension, len(vector))

    def _rollback(self, ids: Sequence[VectorId]) -> None:
        """Compensating delete for ids the store accepted but the text mapping did not."""
        for vector_id in ids:
            self._texts.pop(vector_id, None)
            try:
                self._store.delete(vector_id)
            except Exception as e:
                logger.log_vector_operation("rollback", vector_id, {"index": self._name, "error": str(e)},
                                            status="failed")
        logger.warning(f"Rolled back {len(ids)} vector(s) in index '{self._name}'")

    # Inserts

    def insert(self, text: str, metadata: Optional[Metadata] = None) -> VectorId:
        """Embed text and insert it. Embedding errors propagate unchanged."""
        embedding = self._embedder.embed_one(text)
        return self.insert_with_embedding(text, embedding, metadata)

    def insert_with_embedding(self, text: str, embedding: Sequence[float],
                              metadata: Optional[Metadata] = None) -> VectorId:
        """Insert text with a pre-computed embedding."""
        self._check_dimension(embedding)

        entry = VectorEntry(
            vector=np.asarray(embedding, dtype=np.float32),
            metadata=dict(metadata) if metadata is not None else None
        )
        with _store_errors("insert"):
            vector_id = self._store.insert(entry)

        try:
            self._texts[vector_id] = text
        except BaseException:
            self._rollback([vector_id])
            raise

        logger.log_vector_operation("insert", vector_id, {"index": self._name, "text_len": len(text)})
        return vector_id

    def insert_batch(self, texts: Sequence[str],
                     metadata: Optional[Sequence[Optional[Metadata]]] = None) -> List[VectorId]:
        """Embed and insert multiple texts."""
        embeddings = self._embedder.embed(list(texts))
        return self.insert_batch_with_embeddings(texts, embeddings, metadata)

    def insert_batch_with_embeddings(
        self,
        texts: Sequence[str],
        embeddings: Sequence[Sequence[float]],
        metadata: Optional[Sequence[Optional[Metadata]]] = None,
    ) -> List[VectorId]:
        """
        Insert texts with pre-computed embeddings, zipped positionally.

        Every precondition is checked before the store is touched, so a
        rejected batch leaves the index unchanged.

        Raises:
            DimensionMismatch: On text/embedding count, metadata count or
                vector dimension mismatch
            StoreError: If the store rejects the batch
        """
        if len(texts) != len(embeddings):
            raise DimensionMismatch(len(texts), len(embeddings))
        if metadata is not None and len(metadata) != len(texts):
            raise DimensionMismatch(len(texts), len(metadata))
        if not texts:
            return []

        for embedding in embeddings:
            self._check_dimension(embedding)

        entries = [
            VectorEntry(
                vector=np.asarray(embedding, dtype=np.float32),
                metadata=dict(metadata[i]) if metadata is not None and metadata[i] is not None else None
            )
            for i, embedding in enumerate(embeddings)
        ]
        with _store_errors("batch insert"):
            ids = self._store.insert_batch(entries)

        try:
            for vector_id, text in zip(ids, texts):
                self._texts[vector_id] = text
        except BaseException:
            self._rollback(ids)
            raise

        logger.log_index_operation(self._name, "insert_batch", {"count": len(ids)})
        return ids

    # Searches

    def search(self, query: str, k: int) -> List[SearchResult]:
        """Search for texts similar to query."""
        query_embedding = self._embedder.embed_one(query)
        return self.search_with_embedding(query_embedding, k)

    def search_with_embedding(self, query_embedding: Sequence[float], k: int) -> List[SearchResult]:
        """
        Search with a pre-computed query embedding.

        Store hits with no recorded text are dropped. Results keep the
        store's ranking order.
        """
        self._check_dimension(query_embedding)
        if k <= 0:
            return []

        params = SearchParams(k=k, ef_search=k * SEARCH_OVERSAMPLE)
        with _store_errors("search"):
            hits = self._store.search(query_embedding, params)

        results = []
        for hit in hits:
            text = self._texts.get(hit.id)
            if text is None:
                continue
            results.append(SearchResult(id=hit.id, text=text, score=hit.score, metadata=hit.metadata))

        logger.log_search(self._name, k, len(results))
        return results

    def search_filtered(self, query: str, k: int, predicate: MetadataPredicate) -> List[SearchResult]:
        """Search with a metadata predicate applied to oversampled candidates."""
        query_embedding = self._embedder.embed_one(query)
        return self.search_filtered_with_embedding(query_embedding, k, predicate)

    def search_filtered_with_embedding(self, query_embedding: Sequence[float], k: int,
                                       predicate: MetadataPredicate) -> List[SearchResult]:
        """
        Filtered search with a pre-computed query embedding.

        Fetches FILTER_OVERSAMPLE * k candidates, keeps those whose metadata
        passes predicate (candidates without metadata never pass) and returns
        the first k survivors. Fewer than k results come back when too few
        candidates survive; there is no second fetch.
        """
        self._check_dimension(query_embedding)
        if k <= 0:
            return []

        fetch_k = k * FILTER_OVERSAMPLE
        params = SearchParams(k=fetch_k, ef_search=fetch_k)
        with _store_errors("search"):
            hits = self._store.search(query_embedding, params)

        results = []
        for hit in hits:
            if len(results) >= k:
                break
            text = self._texts.get(hit.id)
            if text is None or hit.metadata is None:
                continue
            if not predicate(hit.metadata):
                continue
            results.append(SearchResult(id=hit.id, text=text, score=hit.score, metadata=hit.metadata))

        logger.log_search(self._name, k, len(results), filtered=True)
        return results

    # Point operations

    def get(self, vector_id: VectorId) -> Optional[Tuple[str, np.ndarray]]:
        """Return (text, vector) for an id, or None if either is missing."""
        with _store_errors("get"):
            entry = self._store.get(vector_id)

        if entry is None:
            return None
        text = self._texts.get(vector_id)
        if text is None:
            return None
        return text, entry.vector

    def delete(self, vector_id: VectorId) -> bool:
        """Delete a vector; the text is dropped only when the store confirms removal."""
        with _store_errors("delete"):
            deleted = self._store.delete(vector_id)

        if deleted:
            self._texts.pop(vector_id, None)
            logger.log_vector_operation("delete", vector_id, {"index": self._name})
        return deleted

    def clear(self) -> None:
        """Remove every vector and text. The mapping is untouched if the store fails."""
        with _store_errors("clear"):
            self._store.clear()
        self._texts = {}
        logger.log_index_operation(self._name, "clear")

    def stats(self) -> Dict[str, Any]:
        """Summary used by health reporting."""
        return {
            "name": self._name,
            "size": len(self),
            "dimension": self._dimension,
            "store": type(self._store).__name__,
            **self._config.to_dict()
        }


class RuVectorBuilder:
    """Fluent builder for RuVectorEmbeddings."""

    def __init__(self, name: str):
        self._name = name
        self._embedder: Optional[IEmbeddingProvider] = None
        self._distance = Distance.COSINE
        self._m = 16
        self._ef_construction = 100
        self._max_elements = 100_000
        self._store_factory: Optional[StoreFactory] = None

    def embedder(self, embedder: IEmbeddingProvider) -> "RuVectorBuilder":
        self._embedder = embedder
        return self

    def distance(self, distance) -> "RuVectorBuilder":
        try:
            self._distance = Distance.parse(distance)
        except ValueError as e:
            raise InvalidConfiguration(str(e)) from e
        return self

    def m(self, m: int) -> "RuVectorBuilder":
        self._m = m
        return self

    def ef_construction(self, ef_construction: int) -> "RuVectorBuilder":
        self._ef_construction = ef_construction
        return self

    def max_elements(self, max_elements: int) -> "RuVectorBuilder":
        self._max_elements = max_elements
        return self

    def store_factory(self, factory: StoreFactory) -> "RuVectorBuilder":
        self._store_factory = factory
        return self

    @property
    def config(self) -> RuVectorConfig:
        return RuVectorConfig(
            distance=self._distance,
            m=self._m,
            ef_construction=self._ef_construction,
            max_elements=self._max_elements,
        )

    def build(self) -> RuVectorEmbeddings:
        """Build the index. Raises InvalidConfiguration when no embedder was set."""
        if self._embedder is None:
            raise InvalidConfiguration("Embedder is required")
        return RuVectorEmbeddings.create(self._name, self._embedder, self.config, self._store_factory)
