"""Cosine similarity between two vectors."""

import numpy as np
from numpy.typing import ArrayLike


def cosine_similarity(a: ArrayLike, b: ArrayLike) -> float:
    """
    ``dot(a, b) / (|a| * |b|)``, in ``[-1, 1]``.

    Never raises on malformed input: vectors of different length, or with a
    zero norm, score 0.
    """
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)
    if vec_a.shape != vec_b.shape:
        return 0.0

    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    score = float(np.dot(vec_a, vec_b) / (norm_a * norm_b))
    # Rounding can push |v|.|v| / |v|^2 a hair past 1
    return min(1.0, max(-1.0, score))
