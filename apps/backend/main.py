from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from agents.answer_agent import RagAnswer, RagAnswerAgent
from apps.backend.llm.llm_client import LLMError, ask_llm
from industrial_rag.config import RagSettings, get_settings
from industrial_rag.errors import ConfigurationError, DocumentNotFoundError
from industrial_rag.models import CorpusStats, Document, QueryHit
from industrial_rag.session import RagSession

_log = logging.getLogger(__name__)


class DocumentIn(BaseModel):
    name: str = Field(..., min_length=1)
    text: str
    size: Optional[int] = Field(default=None, ge=0)


class DocumentSummary(BaseModel):
    id: str
    name: str
    size: int
    uploaded_at: datetime
    chunks: int

    @classmethod
    def from_document(cls, doc: Document) -> "DocumentSummary":
        return cls(
            id=doc.id,
            name=doc.name,
            size=doc.size,
            uploaded_at=doc.uploaded_at,
            chunks=doc.chunks,
        )


class QueryRequest(BaseModel):
    question: str
    top_k: Optional[int] = None


class SettingsUpdate(BaseModel):
    chunk_size: Optional[int] = None
    chunk_overlap: Optional[int] = None
    top_k: Optional[int] = None
    temperature: Optional[float] = None
    model: Optional[str] = None


class SettingsOut(BaseModel):
    chunk_size: int
    chunk_overlap: int
    top_k: int
    temperature: float
    model: str


def _settings_out(settings: RagSettings) -> SettingsOut:
    return SettingsOut(**settings.model_dump(include=set(SettingsOut.model_fields)))


def create_app(
    session: Optional[RagSession] = None,
    settings: Optional[RagSettings] = None,
    llm: Callable[..., str] = ask_llm,
) -> FastAPI:
    """Build the API around one in-memory session."""
    app = FastAPI(title="Industrial RAG API")

    # CORS: allow the browser frontend during local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.session = session if session is not None else RagSession()
    app.state.settings = settings if settings is not None else get_settings()
    app.state.llm = llm

    def _session(request: Request) -> RagSession:
        return request.app.state.session

    def _current_settings(request: Request) -> RagSettings:
        return request.app.state.settings

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/documents", response_model=List[DocumentSummary])
    def list_documents(request: Request) -> List[DocumentSummary]:
        return [DocumentSummary.from_document(d) for d in _session(request).documents()]

    @app.post("/documents", response_model=DocumentSummary, status_code=status.HTTP_201_CREATED)
    def upload_document(doc_in: DocumentIn, request: Request) -> DocumentSummary:
        cfg = _current_settings(request)
        try:
            doc = _session(request).add_document(
                doc_in.name,
                doc_in.text,
                chunk_size=cfg.chunk_size,
                overlap=cfg.chunk_overlap,
                size=doc_in.size,
            )
        except ConfigurationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        _log.info("Processed document '%s' into %d chunks", doc.name, doc.chunks)
        return DocumentSummary.from_document(doc)

    @app.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_document(document_id: str, request: Request) -> Response:
        try:
            _session(request).delete_document(document_id)
        except DocumentNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        _log.info("Deleted document %s", document_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.delete("/documents", status_code=status.HTTP_204_NO_CONTENT)
    def clear_documents(request: Request) -> Response:
        _session(request).clear()
        _log.info("All data cleared")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/query", response_model=List[QueryHit])
    def query(req: QueryRequest, request: Request) -> List[QueryHit]:
        top_k = _current_settings(request).top_k if req.top_k is None else req.top_k
        try:
            return _session(request).query(req.question, top_k)
        except ConfigurationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.post("/ask", response_model=RagAnswer)
    def ask(req: QueryRequest, request: Request) -> RagAnswer:
        agent = RagAnswerAgent(
            session=_session(request),
            settings=_current_settings(request),
            llm=request.app.state.llm,
        )
        try:
            return agent.answer(req.question, top_k=req.top_k)
        except ConfigurationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except LLMError as exc:
            _log.exception("LLM answer failed")
            raise HTTPException(status_code=502, detail=f"LLM answer failed: {exc}") from exc

    @app.get("/stats", response_model=CorpusStats)
    def stats(request: Request) -> CorpusStats:
        return _session(request).stats()

    @app.get("/settings", response_model=SettingsOut)
    def read_settings(request: Request) -> SettingsOut:
        return _settings_out(_current_settings(request))

    @app.put("/settings", response_model=SettingsOut)
    def update_settings(update: SettingsUpdate, request: Request) -> SettingsOut:
        current = _current_settings(request)
        merged = {**current.model_dump(), **update.model_dump(exclude_none=True)}
        try:
            new_settings = RagSettings(**merged)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        request.app.state.settings = new_settings
        _log.info("Settings updated: %s", update.model_dump(exclude_none=True))
        return _settings_out(new_settings)

    return app


app = create_app()


__all__ = ["app", "create_app"]
