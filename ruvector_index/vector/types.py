"""
Records, results and configuration shared by the vector stores and the index layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

# Opaque identifier assigned by a vector store on insertion
VectorId = str


class Distance(str, Enum):
    """Distance metric used for ranking. Every metric is reported as a distance."""

    COSINE = "cosine"
    EUCLIDEAN = "euclidean"
    DOT_PRODUCT = "dot_product"
    MANHATTAN = "manhattan"

    @classmethod
    def parse(cls, value) -> "Distance":
        """Accept a Distance or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = [d.value for d in cls]
            raise ValueError(f"distance must be one of: {valid}") from None


@dataclass
class VectorEntry:
    """A vector handed to (or returned from) a vector store."""

    vector: np.ndarray
    """Float32 vector of the store's fixed dimension"""

    id: Optional[VectorId] = None
    """Caller-supplied identifier; normally None so the store assigns one"""

    metadata: Optional[Dict[str, Any]] = None
    """Optional key-value metadata kept alongside the vector"""


@dataclass
class QueryResult:
    """Represents a raw hit from a vector store."""

    id: VectorId
    """Identifier of the matching vector"""

    score: float
    """Distance to the query (lower is closer)"""

    metadata: Optional[Dict[str, Any]] = None
    """Metadata stored with the vector, if any"""


@dataclass
class SearchResult:
    """A store hit enriched with the original text."""

    id: VectorId
    text: str
    score: float
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "score": self.score,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class SearchParams:
    """Per-query parameters: number of neighbors and search breadth."""

    k: int
    ef_search: int = 0


@dataclass(frozen=True)
class RuVectorConfig:
    """Construction parameters for a vector store. Immutable once an index is built."""

    distance: Distance = Distance.COSINE
    m: int = 16
    ef_construction: int = 100
    max_elements: int = 100_000

    def __post_init__(self):
        # Accept metric names; unknown names stay as given and fail validate()
        known = {d.value: d for d in Distance}
        distance = known.get(str(self.distance).strip().lower())
        if distance is not None:
            object.__setattr__(self, "distance", distance)

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        issues = []

        if not isinstance(self.distance, Distance):
            issues.append(f"Invalid distance: {self.distance}")

        if self.m < 2:
            issues.append("m must be >= 2")

        if self.ef_construction < 1:
            issues.append("ef_construction must be >= 1")

        if self.max_elements < 1:
            issues.append("max_elements must be >= 1")

        return issues

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance": getattr(self.distance, "value", self.distance),
            "m": self.m,
            "ef_construction": self.ef_construction,
            "max_elements": self.max_elements,
        }
