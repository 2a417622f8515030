from __future__ import annotations

import threading
from typing import Iterable, List, Tuple

from .embeddings import EMBEDDING_DIM
from .errors import ConsistencyError
from .models import VectorRecord


class VectorStore:
    """
    In-memory collection of embedded chunks.

    Mutations are serialized with a lock and applied all at once, and
    ``all()`` returns an immutable snapshot, so readers never observe a
    partially applied insert or removal.
    """

    def __init__(self, dim: int = EMBEDDING_DIM) -> None:
        self.dim = dim
        self._records: List[VectorRecord] = []
        self._lock = threading.Lock()

    def insert_all(self, records: Iterable[VectorRecord]) -> int:
        """Append records in the given order. Returns the number inserted."""
        batch = list(records)
        for rec in batch:
            if rec.embedding.shape != (self.dim,):
                raise ConsistencyError(
                    f"Record {rec.record_id} has embedding shape {rec.embedding.shape}, "
                    f"store expects ({self.dim},)"
                )
        with self._lock:
            self._records = self._records + batch
        return len(batch)

    def remove_by_document(self, document_id: str) -> int:
        """Delete every record of a document. Returns the number removed."""
        with self._lock:
            kept = [r for r in self._records if r.document_id != document_id]
            removed = len(self._records) - len(kept)
            self._records = kept
        return removed

    def clear(self) -> None:
        with self._lock:
            self._records = []

    def all(self) -> Tuple[VectorRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def document_ids(self) -> List[str]:
        """Distinct document ids in insertion order."""
        seen: dict[str, None] = {}
        for rec in self.all():
            seen.setdefault(rec.document_id, None)
        return list(seen)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["VectorStore"]
