from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import numpy as np
from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(BaseModel):
    """An uploaded document owned by a RagSession."""

    id: str = Field(..., description="Opaque unique identifier.")
    name: str = Field(..., description="Display name, usually the uploaded file name.")
    size: int = Field(..., ge=0, description="Size of the upload in bytes.")
    text: str = Field(..., repr=False, description="Raw document text.")
    uploaded_at: datetime = Field(default_factory=_utcnow, description="Creation timestamp (UTC).")
    chunks: int = Field(default=0, ge=0, description="Number of chunks derived from the text.")


def make_record_id(document_id: str, chunk_index: int) -> str:
    return f"{document_id}_chunk_{chunk_index}"


@dataclass(frozen=True)
class VectorRecord:
    """One embedded chunk plus its provenance."""

    record_id: str
    document_id: str
    document_name: str
    chunk_text: str
    chunk_index: int
    embedding: np.ndarray = field(compare=False, repr=False)

    @property
    def dimension(self) -> int:
        return int(self.embedding.shape[0])


@dataclass(frozen=True)
class RankedResult:
    record: VectorRecord
    score: float


class QueryHit(BaseModel):
    """Caller-facing projection of a ranked chunk."""

    document_name: str
    chunk_index: int
    chunk_text: str
    score: float

    @classmethod
    def from_ranked(cls, result: RankedResult) -> "QueryHit":
        rec = result.record
        return cls(
            document_name=rec.document_name,
            chunk_index=rec.chunk_index,
            chunk_text=rec.chunk_text,
            score=result.score,
        )


class CorpusStats(BaseModel):
    total_docs: int = 0
    total_chunks: int = 0
    avg_chunk_size: int = 0


__all__ = [
    "Document",
    "VectorRecord",
    "RankedResult",
    "QueryHit",
    "CorpusStats",
    "make_record_id",
]
