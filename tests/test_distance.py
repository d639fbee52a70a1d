"""
Tests for the distance primitives.
"""

import numpy as np
import pytest

from ruvector_index.core.errors import DimensionMismatch
from ruvector_index.vector.distance import (
    batch_distances,
    cosine_distance,
    cosine_similarity,
    distance,
    inner_product,
    inner_product_distance,
    l1_distance,
    l2_distance,
    manhattan_distance,
    neg_inner_product,
)
from ruvector_index.vector.types import Distance


def test_l2_distance():
    """Classic 3-4-5 triangle."""
    assert l2_distance([0.0, 0.0, 0.0], [3.0, 4.0, 0.0]) == pytest.approx(5.0, abs=1e-5)


def test_inner_product():
    """Dot product of [1,2,3] and [4,5,6] is 32."""
    assert inner_product([1.0, 2.0, 3.0], [4.0, 5.0, 6.0]) == pytest.approx(32.0, abs=1e-5)


def test_neg_inner_product_is_negated_dot():
    """Negated inner product ranks more similar vectors lower."""
    a = [1.0, 2.0, 3.0]
    b = [4.0, 5.0, 6.0]
    assert neg_inner_product(a, b) == pytest.approx(-32.0, abs=1e-5)
    assert inner_product_distance(a, b) == neg_inner_product(a, b)

    close = neg_inner_product([1.0, 0.0], [2.0, 0.0])
    far = neg_inner_product([1.0, 0.0], [0.5, 0.0])
    assert close < far


def test_l1_distance():
    """|4-1| + |6-2| + |8-3| = 12."""
    assert l1_distance([1.0, 2.0, 3.0], [4.0, 6.0, 8.0]) == pytest.approx(12.0, abs=1e-5)
    assert manhattan_distance([1.0, 2.0, 3.0], [4.0, 6.0, 8.0]) == pytest.approx(12.0, abs=1e-5)


def test_cosine_distance_identical_vectors():
    """Identical vectors have cosine distance 0."""
    assert abs(cosine_distance([1.0, 0.0, 0.0], [1.0, 0.0, 0.0])) < 1e-5


def test_cosine_distance_orthogonal_and_opposite():
    """Orthogonal vectors sit at distance 1, opposite vectors at 2."""
    assert cosine_distance([1.0, 0.0], [0.0, 1.0]) == pytest.approx(1.0, abs=1e-6)
    assert cosine_distance([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(2.0, abs=1e-6)


def test_cosine_distance_zero_norm_fallback():
    """A zero-norm operand is treated as maximally dissimilar, never NaN."""
    assert cosine_distance([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]) == 1.0
    assert cosine_distance([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]) == 1.0
    assert cosine_distance([0.0, 0.0], [0.0, 0.0]) == 1.0
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0


def test_cosine_similarity_complements_distance():
    """cosine_similarity is exactly 1 - cosine_distance."""
    rng = np.random.default_rng(7)
    for _ in range(20):
        a = rng.normal(size=16).tolist()
        b = rng.normal(size=16).tolist()
        assert cosine_similarity(a, b) == 1.0 - cosine_distance(a, b)


def test_l2_properties_on_random_vectors():
    """L2 is non-negative and zero from a vector to itself."""
    rng = np.random.default_rng(11)
    for _ in range(20):
        a = rng.normal(size=32)
        b = rng.normal(size=32)
        assert l2_distance(a, b) >= 0.0
        assert l2_distance(a, a) == 0.0


def test_accepts_numpy_and_tuples():
    """Inputs can be lists, tuples or numpy arrays."""
    a = np.array([0.0, 0.0], dtype=np.float32)
    assert l2_distance(a, (3.0, 4.0)) == pytest.approx(5.0)


@pytest.mark.parametrize("func", [
    l2_distance,
    inner_product,
    neg_inner_product,
    cosine_distance,
    cosine_similarity,
    l1_distance,
])
def test_dimension_mismatch_reports_both_lengths(func):
    """Every distance function rejects unequal lengths."""
    with pytest.raises(DimensionMismatch) as exc_info:
        func([1.0, 2.0, 3.0], [1.0, 2.0])

    assert exc_info.value.expected == 3
    assert exc_info.value.actual == 2
    assert "3" in str(exc_info.value)
    assert "2" in str(exc_info.value)


def test_distance_dispatch():
    """distance() picks the function for the metric."""
    a = [1.0, 2.0, 3.0]
    b = [4.0, 6.0, 8.0]
    assert distance(a, b, Distance.MANHATTAN) == l1_distance(a, b)
    assert distance(a, b, Distance.EUCLIDEAN) == l2_distance(a, b)
    assert distance(a, b, Distance.DOT_PRODUCT) == neg_inner_product(a, b)
    assert distance(a, b, "cosine") == cosine_distance(a, b)


def test_distance_parse_rejects_unknown_metric():
    """Unknown metric names are a ValueError."""
    assert Distance.parse("COSINE") == Distance.COSINE
    with pytest.raises(ValueError):
        Distance.parse("hamming")


@pytest.mark.parametrize("metric", list(Distance))
def test_batch_distances_match_scalar(metric):
    """Vectorized distances agree with the scalar functions within 1e-5."""
    rng = np.random.default_rng(3)
    query = rng.normal(size=24).astype(np.float32)
    matrix = rng.normal(size=(10, 24)).astype(np.float32)
    matrix[4] = 0.0

    batch = batch_distances(query, matrix, metric)

    assert batch.shape == (10,)
    for row, value in zip(matrix, batch):
        assert value == pytest.approx(distance(query, row, metric), abs=1e-5)


def test_batch_distances_empty_and_mismatch():
    """Empty matrices give no distances; wrong row length raises."""
    assert batch_distances([1.0, 2.0], np.zeros((0, 2))).shape == (0,)

    with pytest.raises(DimensionMismatch):
        batch_distances([1.0, 2.0], np.ones((3, 4)))


@pytest.mark.parametrize("size", [1, 3, 7, 8, 15, 16, 31, 32, 63, 64, 127, 128, 256])
def test_various_sizes(size):
    """Remainder handling across lengths that are not multiples of a chunk."""
    a = [float(i) for i in range(size)]
    b = [float(i + 1) for i in range(size)]

    dist = l2_distance(a, b)
    assert np.isfinite(dist) and dist > 0.0
    assert dist == pytest.approx(np.sqrt(size), abs=1e-5)


def test_large_vector_accumulation():
    """Long float32 inputs accumulate without drift."""
    a = np.full(100_000, 0.1, dtype=np.float32)
    b = np.zeros(100_000, dtype=np.float32)

    naive = sum((float(x) - float(y)) ** 2 for x, y in zip(a, b)) ** 0.5
    assert l2_distance(a, b) == pytest.approx(naive, abs=1e-5)
