"""
Core retrieval logic for the Industrial RAG project.

This package contains:
- Chunking of raw document text into overlapping spans
- Deterministic hash-projection embeddings
- The in-memory vector store and top-K retrieval
- Corpus statistics and the session facade used by the backend and CLI
"""

from .errors import ConfigurationError, ConsistencyError, DocumentNotFoundError, RagError
from .session import RagSession

__all__ = [
    "ConfigurationError",
    "ConsistencyError",
    "DocumentNotFoundError",
    "RagError",
    "RagSession",
]
