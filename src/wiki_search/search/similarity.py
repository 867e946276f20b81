"""
Cosine similarity - angle-based, magnitude-independent.

Pure function, no shared state, safe to call from any thread.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from wiki_search.core.errors import DegenerateVectorError, DimensionMismatchError


def _unit_scaled(v: np.ndarray) -> np.ndarray:
    """
    Divide by the largest component so the norm can neither overflow
    nor underflow. Cosine is scale-invariant, so the score is unchanged.
    """
    if v.size == 0:
        raise DegenerateVectorError("Cannot score an empty vector")
    if not np.all(np.isfinite(v)):
        raise DegenerateVectorError("Cannot score a vector with non-finite components")

    peak = np.max(np.abs(v))
    if peak == 0.0:
        raise DegenerateVectorError("Cannot score a zero-magnitude vector")
    return v / peak


def cosine_similarity(a: Any, b: Any) -> float:
    """
    Cosine similarity of two equal-length vectors, clamped to [-1, 1].

    Raises:
        DimensionMismatchError: the vectors differ in length
        DegenerateVectorError: either vector is empty, all zeros, or
            contains NaN/inf
    """
    a = np.asarray(a, dtype=np.float64).reshape(-1)
    b = np.asarray(b, dtype=np.float64).reshape(-1)

    if a.shape[0] != b.shape[0]:
        raise DimensionMismatchError(a.shape[0], b.shape[0])

    a = _unit_scaled(a)
    b = _unit_scaled(b)

    similarity = float(np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b)))
    if not np.isfinite(similarity):
        raise DegenerateVectorError("Similarity is not a finite number")
    return min(1.0, max(-1.0, similarity))
