from __future__ import annotations

import threading
import uuid
from typing import List, Optional

from .chunking import chunk_text, validate_chunking
from .embeddings import embed
from .errors import ConfigurationError, DocumentNotFoundError
from .indexing import VectorStore
from .models import CorpusStats, Document, QueryHit, VectorRecord, make_record_id
from .retrieval import Retriever, validate_top_k
from .stats import compute_stats


class RagSession:
    """
    Owned state of one retrieval session: the documents and their vectors.

    A new session starts empty; ``clear()`` returns it to that state.
    Chunking and retrieval parameters are passed on every call, the session
    keeps no defaults of its own.
    """

    def __init__(self, store: Optional[VectorStore] = None) -> None:
        self.store = store if store is not None else VectorStore()
        self.retriever = Retriever(self.store)
        self._documents: dict[str, Document] = {}
        self._lock = threading.RLock()

    def ingest(
        self,
        document_id: str,
        document_name: str,
        text: str,
        chunk_size: int,
        overlap: int,
        size: Optional[int] = None,
    ) -> int:
        """Chunk, embed and store a document. Returns the number of chunks created."""
        validate_chunking(chunk_size, overlap)

        chunks = chunk_text(text, chunk_size, overlap)
        records = [
            VectorRecord(
                record_id=make_record_id(document_id, idx),
                document_id=document_id,
                document_name=document_name,
                chunk_text=chunk,
                chunk_index=idx,
                embedding=embed(chunk, dim=self.store.dim),
            )
            for idx, chunk in enumerate(chunks)
        ]
        doc = Document(
            id=document_id,
            name=document_name,
            size=size if size is not None else len(text.encode("utf-8", errors="surrogatepass")),
            text=text,
            chunks=len(records),
        )

        with self._lock:
            if document_id in self._documents:
                raise ConfigurationError(f"Document id already ingested: {document_id}")
            self.store.insert_all(records)
            self._documents[document_id] = doc

        return len(records)

    def add_document(
        self,
        name: str,
        text: str,
        chunk_size: int,
        overlap: int,
        size: Optional[int] = None,
    ) -> Document:
        """Ingest under a freshly generated id and return the stored Document."""
        document_id = uuid.uuid4().hex
        self.ingest(document_id, name, text, chunk_size, overlap, size=size)
        return self.get_document(document_id)

    def get_document(self, document_id: str) -> Document:
        with self._lock:
            try:
                return self._documents[document_id]
            except KeyError:
                raise DocumentNotFoundError(document_id) from None

    def documents(self) -> List[Document]:
        with self._lock:
            return list(self._documents.values())

    def delete_document(self, document_id: str) -> None:
        with self._lock:
            if document_id not in self._documents:
                raise DocumentNotFoundError(document_id)
            del self._documents[document_id]
            self.store.remove_by_document(document_id)

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()
            self.store.clear()

    def query(self, query_text: str, top_k: int) -> List[QueryHit]:
        validate_top_k(top_k)
        return [QueryHit.from_ranked(r) for r in self.retriever.rank(query_text, top_k)]

    def stats(self) -> CorpusStats:
        with self._lock:
            return compute_stats(self._documents, self.store.all())

    def __len__(self) -> int:
        return len(self.store)


__all__ = ["RagSession"]
