"""
Distance primitives over equal-length float sequences.

All functions are pure and deterministic. Inputs may be lists, tuples or numpy
arrays; accumulation happens in float64 and results are returned as Python
floats. Every function checks lengths and raises DimensionMismatch on
disagreement.

Zero-norm cosine: when either operand has zero L2 norm the cosine similarity is
undefined, and cosine_distance returns 1.0 (maximally dissimilar) instead of
propagating NaN into ranking.
"""

from typing import Sequence

import numpy as np

from ..core.errors import DimensionMismatch
from .types import Distance

# Distance reported for a zero-norm operand under the cosine metric
ZERO_NORM_COSINE_DISTANCE = 1.0


def _as_array(v: Sequence[float]) -> np.ndarray:
    return np.asarray(v, dtype=np.float64).reshape(-1)


def _check_dims(a: Sequence[float], b: Sequence[float]) -> None:
    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))


def l2_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance: sqrt of the summed squared differences."""
    _check_dims(a, b)
    diff = _as_array(a) - _as_array(b)
    return float(np.sqrt(np.dot(diff, diff)))


euclidean_distance = l2_distance


def inner_product(a: Sequence[float], b: Sequence[float]) -> float:
    """Dot product of a and b (higher means more similar)."""
    _check_dims(a, b)
    return float(np.dot(_as_array(a), _as_array(b)))


def neg_inner_product(a: Sequence[float], b: Sequence[float]) -> float:
    """Negated dot product, so that ascending order ranks nearest first."""
    _check_dims(a, b)
    return -float(np.dot(_as_array(a), _as_array(b)))


inner_product_distance = neg_inner_product


def cosine_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """1 - cosine similarity; 1.0 when either vector has zero norm."""
    _check_dims(a, b)
    x = _as_array(a)
    y = _as_array(b)

    norm_x = np.sqrt(np.dot(x, x))
    norm_y = np.sqrt(np.dot(y, y))
    if norm_x == 0.0 or norm_y == 0.0:
        return ZERO_NORM_COSINE_DISTANCE

    cos = float(np.dot(x, y) / (norm_x * norm_y))
    # Clamp rounding drift outside [-1, 1]
    cos = max(-1.0, min(1.0, cos))
    return 1.0 - cos


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Defined as exactly 1 - cosine_distance(a, b)."""
    return 1.0 - cosine_distance(a, b)


def l1_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Manhattan distance: sum of absolute differences."""
    _check_dims(a, b)
    return float(np.sum(np.abs(_as_array(a) - _as_array(b))))


manhattan_distance = l1_distance


_METRIC_FUNCTIONS = {
    Distance.COSINE: cosine_distance,
    Distance.EUCLIDEAN: l2_distance,
    Distance.DOT_PRODUCT: neg_inner_product,
    Distance.MANHATTAN: l1_distance,
}


def distance(a: Sequence[float], b: Sequence[float], metric: Distance = Distance.COSINE) -> float:
    """Distance between a and b under the given metric (lower is closer)."""
    return _METRIC_FUNCTIONS[Distance.parse(metric)](a, b)


def batch_distances(query: Sequence[float], matrix: np.ndarray, metric: Distance = Distance.COSINE) -> np.ndarray:
    """
    Distances from one query to every row of a 2-D matrix.

    Vectorized counterpart of distance(); agrees with the scalar functions
    within float32 tolerance.

    Args:
        query: Query vector of length d
        matrix: Array of shape (n, d)
        metric: Distance metric

    Returns:
        float64 array of n distances
    """
    metric = Distance.parse(metric)
    q = _as_array(query)
    rows = np.asarray(matrix, dtype=np.float64)
    if rows.size == 0:
        return np.zeros(0, dtype=np.float64)

    if rows.ndim != 2 or rows.shape[1] != len(q):
        raise DimensionMismatch(len(q), rows.shape[-1])

    if metric == Distance.EUCLIDEAN:
        diff = rows - q
        return np.sqrt(np.einsum("ij,ij->i", diff, diff))

    if metric == Distance.MANHATTAN:
        return np.abs(rows - q).sum(axis=1)

    dots = rows @ q
    if metric == Distance.DOT_PRODUCT:
        return -dots

    norms = np.sqrt(np.einsum("ij,ij->i", rows, rows)) * np.sqrt(np.dot(q, q))
    result = np.full(rows.shape[0], ZERO_NORM_COSINE_DISTANCE, dtype=np.float64)
    nonzero = norms > 0.0
    result[nonzero] = 1.0 - np.clip(dots[nonzero] / norms[nonzero], -1.0, 1.0)
    return result
