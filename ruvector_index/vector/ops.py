"""
Vector utilities: normalization, elementwise arithmetic, aggregates and quantization.
Pure functions; every returned vector is a float32 numpy array.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence

import numpy as np

from ..core.errors import DimensionMismatch

INT32_MAX = 2**31 - 1


def _as_float32(v: Sequence[float]) -> np.ndarray:
    return np.asarray(v, dtype=np.float32).reshape(-1)


def _check_dims(a: Sequence[float], b: Sequence[float]) -> None:
    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))


def vector_norm(v: Sequence[float]) -> float:
    """L2 norm of v."""
    x = np.asarray(v, dtype=np.float64).reshape(-1)
    return float(np.sqrt(np.dot(x, x)))


def normalize(v: Sequence[float]) -> np.ndarray:
    """
    Scale v to unit L2 norm.

    A zero vector is returned unchanged rather than divided by zero.
    """
    x = np.asarray(v, dtype=np.float64).reshape(-1)
    norm = np.sqrt(np.dot(x, x))
    if norm == 0.0:
        return _as_float32(v)
    return (x / norm).astype(np.float32)


def vector_add(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    """Elementwise a + b."""
    _check_dims(a, b)
    return _as_float32(a) + _as_float32(b)


def vector_sub(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    """Elementwise a - b."""
    _check_dims(a, b)
    return _as_float32(a) - _as_float32(b)


def vector_mul_scalar(v: Sequence[float], scalar: float) -> np.ndarray:
    """Multiply every element of v by scalar."""
    return _as_float32(v) * np.float32(scalar)


def vector_avg2(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    """Elementwise mean of two vectors."""
    _check_dims(a, b)
    return (_as_float32(a) + _as_float32(b)) / np.float32(2.0)


def vector_dims(v: Sequence[float]) -> int:
    """Element count of v as a signed 32-bit value."""
    count = len(v)
    if count > INT32_MAX:
        raise OverflowError(f"Vector has {count} elements, exceeding the int32 limit {INT32_MAX}")
    return count


def vector_sum(vectors: Iterable[Optional[Sequence[float]]]) -> Optional[np.ndarray]:
    """
    Aggregate sum of vectors, skipping None entries.

    Returns None when there is no non-null input.
    """
    state = None
    for value in vectors:
        if value is None:
            continue
        if state is None:
            state = _as_float32(value).copy()
        else:
            state = vector_add(state, value)
    return state


def vector_avg(vectors: Iterable[Optional[Sequence[float]]]) -> Optional[np.ndarray]:
    """Aggregate mean of vectors, skipping None entries. None for empty input."""
    present = [v for v in vectors if v is not None]
    if not present:
        return None
    return vector_mul_scalar(vector_sum(present), 1.0 / len(present))


def binary_quantize(v: Sequence[float]) -> bytes:
    """One bit per element (set when the element is > 0), packed big-endian."""
    bits = _as_float32(v) > 0
    return np.packbits(bits).tobytes()


@dataclass(frozen=True)
class ScalarQuantized:
    """SQ8 encoding: value ~= min + code * scale."""

    min: float
    scale: float
    data: bytes

    def dequantize(self) -> np.ndarray:
        codes = np.frombuffer(self.data, dtype=np.uint8).astype(np.float32)
        return np.float32(self.min) + codes * np.float32(self.scale)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min": self.min,
            "scale": self.scale,
            "data": list(self.data),
            "dims": len(self.data),
        }


def scalar_quantize(v: Sequence[float]) -> ScalarQuantized:
    """8-bit scalar quantization over the vector's own [min, max] range."""
    x = np.asarray(v, dtype=np.float64).reshape(-1)
    if x.size == 0:
        return ScalarQuantized(min=0.0, scale=0.0, data=b"")

    lo = float(x.min())
    hi = float(x.max())
    if hi == lo:
        return ScalarQuantized(min=lo, scale=0.0, data=bytes(x.size))

    scale = (hi - lo) / 255.0
    codes = np.clip(np.rint((x - lo) / scale), 0, 255).astype(np.uint8)
    return ScalarQuantized(min=lo, scale=scale, data=codes.tobytes())
