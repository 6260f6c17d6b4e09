"""
Deterministic Embedding Synthesis

Maps text to a fixed-length unit vector without any model or network call.
The vectors carry no semantics; they exist so the similarity-ranking path
has stable, reproducible input.
"""

import numpy as np

from mod_notes.models.note import EMBEDDING_DIMENSION

_COMPONENT_SCALE = 0.1
_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def rolling_hash(token: str) -> int:
    """
    Java-style ``String.hashCode`` with its absolute value taken.

    Iterates UTF-16 code units (astral characters count as two) and wraps
    to signed 32-bit after every step.
    """
    value = 0
    data = token.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        value = (value * 31 + code_unit) & _INT32_MASK
    if value & _INT32_SIGN:
        value -= 1 << 32
    return abs(value)


def synthesize_embedding(
    text: str,
    dimension: int = EMBEDDING_DIMENSION,
) -> list[float]:
    """
    Build the pseudo-embedding of ``text``.

    For token ``i`` with hash ``h`` every component ``d`` accumulates
    ``sin(h + d + i) * 0.1``; the sum is then L2-normalized.

    Args:
        text: Arbitrary input. Case and whitespace layout are ignored.
        dimension: Output length.

    Returns:
        A unit vector as a native Python list (pgvector compatible).
        Text without any token yields the zero vector.
    """
    offsets = np.arange(dimension, dtype=np.float64)
    vector = np.zeros(dimension, dtype=np.float64)

    for position, token in enumerate(text.lower().split()):
        vector += np.sin(rolling_hash(token) + offsets + position) * _COMPONENT_SCALE

    norm = np.linalg.norm(vector)
    if norm == 0:
        return vector.tolist()
    result: list[float] = (vector / norm).tolist()
    return result
