from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import ConsistencyError

EMBEDDING_DIM = 384

# Stride between consecutive characters of a word in the accumulator.
_CHAR_STRIDE = 7


def embed(text: str, dim: int = EMBEDDING_DIM) -> np.ndarray:
    """
    Project text onto a fixed-size unit vector.

    This is a deterministic hashing scheme, not a trained model: character
    codes of each lower-cased word are summed into slots picked from the
    word position and the character position. Text that leaves the
    accumulator at zero (empty or whitespace only) yields the zero vector.
    """
    acc = np.zeros(dim, dtype=np.float64)

    for idx, word in enumerate(text.lower().split()):
        for i, ch in enumerate(word):
            acc[(idx + i * _CHAR_STRIDE) % dim] += ord(ch) / 1000

    norm = float(np.linalg.norm(acc))
    if norm == 0.0:
        return acc
    return acc / norm


def embed_many(texts: Sequence[str], dim: int = EMBEDDING_DIM) -> np.ndarray:
    """Embed a batch of texts into a (len(texts), dim) matrix."""
    if not texts:
        return np.zeros((0, dim), dtype=np.float64)
    return np.vstack([embed(t, dim=dim) for t in texts])


def cosine_similarity(vec1: np.ndarray, vec2: np.ndarray) -> float:
    """Cosine similarity of two unit vectors, i.e. their dot product."""
    if vec1.shape != vec2.shape:
        raise ConsistencyError(
            f"Embedding shapes differ: {vec1.shape} vs {vec2.shape}"
        )
    return float(np.dot(vec1, vec2))


__all__ = ["EMBEDDING_DIM", "embed", "embed_many", "cosine_similarity"]
