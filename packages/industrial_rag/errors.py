from __future__ import annotations


class RagError(Exception):
    """Base class for all errors raised by the retrieval core."""


class ConfigurationError(RagError, ValueError):
    """Invalid chunking/retrieval parameters, rejected before any work is done."""


class ConsistencyError(RagError, RuntimeError):
    """Stored vectors disagree with each other or with the query (programming defect)."""


class DocumentNotFoundError(RagError, KeyError):
    """Raised when an operation references an unknown document id."""

    def __init__(self, document_id: str) -> None:
        super().__init__(document_id)
        self.document_id = document_id

    def __str__(self) -> str:
        return f"Document not found: {self.document_id}"


__all__ = ["RagError", "ConfigurationError", "ConsistencyError", "DocumentNotFoundError"]
