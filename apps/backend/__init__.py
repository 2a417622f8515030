"""FastAPI backend serving a single in-memory RAG session."""
