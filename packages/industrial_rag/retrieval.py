from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .embeddings import embed
from .errors import ConfigurationError, ConsistencyError
from .indexing import VectorStore
from .models import RankedResult, VectorRecord


def validate_top_k(top_k: int) -> None:
    if top_k < 0:
        raise ConfigurationError(f"top_k must not be negative, got {top_k}")


def rank_records(
    records: Sequence[VectorRecord],
    query_vector: np.ndarray,
    top_k: int,
) -> List[RankedResult]:
    """
    Score records against a query vector and return the best ``top_k``.

    Scores are dot products of unit vectors (cosine similarity). Ordering is
    by descending score; equal scores keep insertion order.
    """
    validate_top_k(top_k)
    if top_k == 0 or not records:
        return []

    for rec in records:
        if rec.embedding.shape != query_vector.shape:
            raise ConsistencyError(
                f"Record {rec.record_id} has embedding shape {rec.embedding.shape}, "
                f"query has {query_vector.shape}"
            )

    matrix = np.vstack([rec.embedding for rec in records])
    scores = matrix @ query_vector
    order = np.argsort(-scores, kind="stable")[:top_k]

    return [RankedResult(record=records[i], score=float(scores[i])) for i in order]


@dataclass
class Retriever:
    """Top-K similarity search over a VectorStore snapshot."""

    store: VectorStore

    def rank(self, query_text: str, top_k: int) -> List[RankedResult]:
        validate_top_k(top_k)
        records = self.store.all()
        if top_k == 0 or not records:
            return []
        query_vector = embed(query_text, dim=self.store.dim)
        return rank_records(records, query_vector, top_k)


__all__ = ["Retriever", "rank_records", "validate_top_k"]
