"""
FAISS-backed approximate nearest-neighbor store (HNSW graph).
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from ..util.logging import logger
from .index import IVectorStore, new_vector_id
from .types import Distance, QueryResult, RuVectorConfig, SearchParams, VectorEntry, VectorId


class FaissVectorStore(IVectorStore):
    """FAISS HNSW implementation of IVectorStore.

    Cosine vectors are stored unit-normalized under the inner-product metric
    and reported as 1 - ip. Euclidean scores are the square root of FAISS's
    squared L2, and dot-product scores are the negated inner product, so every
    metric ranks ascending. Manhattan is not supported by the HNSW index.

    HNSW graphs do not support removal, so deletion drops the label from the
    id maps (a tombstone); searches overfetch by the tombstone count and skip
    tombstoned labels. The graph is rebuilt from the live entries once
    tombstones outnumber them, or when an insert would otherwise push the
    graph past max_elements. clear() rebuilds an empty graph.
    """

    def __init__(self, dimension: int, config: Optional[RuVectorConfig] = None):
        super().__init__(dimension, config)
        if self.distance == Distance.MANHATTAN:
            raise ValueError("FAISS HNSW store does not support the manhattan metric")

        import faiss
        self.faiss = faiss

        self._entries: Dict[VectorId, VectorEntry] = {}
        self.id_to_vector_index: Dict[VectorId, int] = {}
        self.vector_id_map: Dict[int, VectorId] = {}
        self._tombstones = 0
        self.index = self._new_index()

    def _new_index(self):
        if self.distance == Distance.EUCLIDEAN:
            metric = self.faiss.METRIC_L2
        else:
            metric = self.faiss.METRIC_INNER_PRODUCT
        index = self.faiss.IndexHNSWFlat(self.dimension, self.config.m, metric)
        index.hnsw.efConstruction = self.config.ef_construction
        return index

    def _to_index_space(self, vector: np.ndarray) -> np.ndarray:
        if self.distance != Distance.COSINE:
            return vector
        norm = np.linalg.norm(vector)
        # Zero vectors stay zero: ip 0 reports distance 1.0
        if norm == 0:
            return vector
        return (vector / norm).astype(np.float32)

    def _to_distance(self, raw: float) -> float:
        if self.distance == Distance.COSINE:
            return 1.0 - float(raw)
        if self.distance == Distance.EUCLIDEAN:
            return float(np.sqrt(max(float(raw), 0.0)))
        return -float(raw)

    def _contains(self, vector_id: VectorId) -> bool:
        return vector_id in self._entries

    def insert(self, entry: VectorEntry) -> VectorId:
        return self.insert_batch([entry])[0]

    def insert_batch(self, entries: Sequence[VectorEntry]) -> List[VectorId]:
        if not entries:
            return []

        prepared = [self._prepare(entry.vector) for entry in entries]
        self._check_capacity([entry.id for entry in entries])

        if self._tombstones and self.index.ntotal + len(entries) > self.config.max_elements:
            self._compact()

        batch_vectors = np.vstack([self._to_index_space(v) for v in prepared]).astype(np.float32)
        next_vector_index = self.index.ntotal
        self.index.add(batch_vectors)

        ids = []
        for i, (entry, vector) in enumerate(zip(entries, prepared)):
            vector_id = entry.id if entry.id is not None else new_vector_id()
            # Re-inserting an id tombstones its previous label
            if vector_id in self.id_to_vector_index:
                self._drop_label(vector_id)

            metadata = dict(entry.metadata) if entry.metadata is not None else None
            self._entries[vector_id] = VectorEntry(vector=vector, id=vector_id, metadata=metadata)
            self.id_to_vector_index[vector_id] = next_vector_index + i
            self.vector_id_map[next_vector_index + i] = vector_id
            ids.append(vector_id)

        self._maybe_compact()
        return ids

    def search(self, query: Sequence[float], params: SearchParams) -> List[QueryResult]:
        if params.k <= 0 or not self._entries:
            return []

        query_array = self._to_index_space(self._prepare(query)).reshape(1, -1)

        fetch_k = min(params.k + self._tombstones, self.index.ntotal)
        self.index.hnsw.efSearch = max(params.ef_search, fetch_k)
        scores, indices = self.index.search(query_array, fetch_k)

        results = []
        for raw, label in zip(scores[0], indices[0]):
            if label < 0:
                continue
            vector_id = self.vector_id_map.get(int(label))
            if vector_id is None:
                continue
            entry = self._entries[vector_id]
            results.append(QueryResult(
                id=vector_id,
                score=self._to_distance(raw),
                metadata=dict(entry.metadata) if entry.metadata is not None else None
            ))

        results.sort(key=lambda r: r.score)
        return results[:params.k]

    def get(self, vector_id: VectorId) -> Optional[VectorEntry]:
        entry = self._entries.get(vector_id)
        if entry is None:
            return None
        return VectorEntry(
            vector=entry.vector.copy(),
            id=entry.id,
            metadata=dict(entry.metadata) if entry.metadata is not None else None
        )

    def _drop_label(self, vector_id: VectorId) -> None:
        label = self.id_to_vector_index.pop(vector_id)
        del self.vector_id_map[label]
        self._tombstones += 1

    def delete(self, vector_id: VectorId) -> bool:
        if vector_id not in self._entries:
            return False
        self._drop_label(vector_id)
        del self._entries[vector_id]
        self._maybe_compact()
        return True

    def _maybe_compact(self) -> None:
        if self._tombstones > len(self._entries):
            self._compact()

    def _compact(self) -> None:
        """Rebuild the graph from live entries, discarding tombstoned labels."""
        dropped = self._tombstones
        self.index = self._new_index()
        self.id_to_vector_index = {}
        self.vector_id_map = {}
        self._tombstones = 0

        if self._entries:
            ids = list(self._entries.keys())
            vectors = np.vstack([self._to_index_space(self._entries[i].vector) for i in ids]).astype(np.float32)
            self.index.add(vectors)
            for label, vector_id in enumerate(ids):
                self.id_to_vector_index[vector_id] = label
                self.vector_id_map[label] = vector_id

        logger.debug(f"Compacted FAISS graph: dropped {dropped} tombstones, kept {len(self._entries)} vectors")

    def clear(self) -> None:
        self.index = self._new_index()
        self._entries = {}
        self.id_to_vector_index = {}
        self.vector_id_map = {}
        self._tombstones = 0

    def __len__(self) -> int:
        return len(self._entries)
