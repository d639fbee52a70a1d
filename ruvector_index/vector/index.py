"""
Vector store contract and an exact in-memory implementation.

Stores own vectors and their metadata, assign identifiers on insert and rank
hits by distance (lower is closer). Batch inserts validate the whole batch
before mutating anything.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence
import uuid

import numpy as np

from ..core.errors import DimensionMismatch
from .distance import batch_distances
from .types import QueryResult, RuVectorConfig, SearchParams, VectorEntry, VectorId


def new_vector_id() -> VectorId:
    return uuid.uuid4().hex


class IVectorStore(ABC):
    """Abstract interface for vector storage operations."""

    def __init__(self, dimension: int, config: Optional[RuVectorConfig] = None):
        config = config or RuVectorConfig()
        if dimension < 1:
            raise ValueError(f"dimension must be >= 1, got {dimension}")
        issues = config.validate()
        if issues:
            raise ValueError("; ".join(issues))

        self.dimension = dimension
        self.config = config

    @property
    def distance(self):
        return self.config.distance

    @abstractmethod
    def insert(self, entry: VectorEntry) -> VectorId:
        """Add a single vector and return its identifier."""
        pass

    @abstractmethod
    def insert_batch(self, entries: Sequence[VectorEntry]) -> List[VectorId]:
        """Add multiple vectors; identifiers are returned in input order."""
        pass

    @abstractmethod
    def search(self, query: Sequence[float], params: SearchParams) -> List[QueryResult]:
        """Return up to params.k hits in ascending distance order."""
        pass

    @abstractmethod
    def get(self, vector_id: VectorId) -> Optional[VectorEntry]:
        """Fetch a stored vector by ID."""
        pass

    @abstractmethod
    def delete(self, vector_id: VectorId) -> bool:
        """Delete a vector by ID. Returns whether anything was removed."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all records from the store."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def is_empty(self) -> bool:
        return len(self) == 0

    def _prepare(self, vector: Sequence[float]) -> np.ndarray:
        """Check the dimension and convert to a float32 row."""
        if len(vector) != self.dimension:
            raise DimensionMismatch(self.dimension, len(vector))
        return np.array(vector, dtype=np.float32).reshape(-1)

    def _check_capacity(self, new_ids: Sequence[Optional[VectorId]]) -> None:
        # Ids that replace existing entries do not consume capacity
        added = 0
        seen = set()
        for vector_id in new_ids:
            if vector_id is None:
                added += 1
            elif vector_id not in seen and not self._contains(vector_id):
                added += 1
                seen.add(vector_id)
        if len(self) + added > self.config.max_elements:
            raise RuntimeError(
                f"Capacity exceeded: {len(self)} + {added} > max_elements {self.config.max_elements}"
            )

    @abstractmethod
    def _contains(self, vector_id: VectorId) -> bool:
        pass


class InMemoryVectorStore(IVectorStore):
    """Exact (brute-force) vector store kept in process memory.

    Honors every Distance metric. Graph parameters are validated but exact
    search has no use for them, and ef_search is ignored.
    """

    def __init__(self, dimension: int, config: Optional[RuVectorConfig] = None):
        super().__init__(dimension, config)
        self._entries: Dict[VectorId, VectorEntry] = {}

    def _contains(self, vector_id: VectorId) -> bool:
        return vector_id in self._entries

    def insert(self, entry: VectorEntry) -> VectorId:
        return self.insert_batch([entry])[0]

    def insert_batch(self, entries: Sequence[VectorEntry]) -> List[VectorId]:
        if not entries:
            return []

        prepared = [self._prepare(entry.vector) for entry in entries]
        self._check_capacity([entry.id for entry in entries])

        ids = []
        for entry, vector in zip(entries, prepared):
            vector_id = entry.id if entry.id is not None else new_vector_id()
            metadata = dict(entry.metadata) if entry.metadata is not None else None
            self._entries[vector_id] = VectorEntry(vector=vector, id=vector_id, metadata=metadata)
            ids.append(vector_id)
        return ids

    def search(self, query: Sequence[float], params: SearchParams) -> List[QueryResult]:
        if params.k <= 0 or not self._entries:
            return []

        query_vector = self._prepare(query)
        ids = list(self._entries.keys())
        matrix = np.vstack([self._entries[i].vector for i in ids])
        distances = batch_distances(query_vector, matrix, self.distance)

        # Stable sort keeps insertion order among ties
        order = np.argsort(distances, kind="stable")[:params.k]
        results = []
        for position in order:
            entry = self._entries[ids[position]]
            results.append(QueryResult(
                id=entry.id,
                score=float(distances[position]),
                metadata=dict(entry.metadata) if entry.metadata is not None else None
            ))
        return results

    def get(self, vector_id: VectorId) -> Optional[VectorEntry]:
        entry = self._entries.get(vector_id)
        if entry is None:
            return None
        return VectorEntry(
            vector=entry.vector.copy(),
            id=entry.id,
            metadata=dict(entry.metadata) if entry.metadata is not None else None
        )

    def delete(self, vector_id: VectorId) -> bool:
        return self._entries.pop(vector_id, None) is not None

    def clear(self) -> None:
        self._entries = {}

    def __len__(self) -> int:
        return len(self._entries)
