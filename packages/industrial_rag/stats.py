from __future__ import annotations

import math
from typing import Sized, Sequence

from .models import CorpusStats, VectorRecord


def compute_stats(documents: Sized, records: Sequence[VectorRecord]) -> CorpusStats:
    """Document count, chunk count and average chunk length (rounded half up)."""
    total_chunks = len(records)
    avg = 0
    if total_chunks:
        avg = math.floor(sum(len(r.chunk_text) for r in records) / total_chunks + 0.5)
    return CorpusStats(
        total_docs=len(documents),
        total_chunks=total_chunks,
        avg_chunk_size=avg,
    )


__all__ = ["compute_stats"]
