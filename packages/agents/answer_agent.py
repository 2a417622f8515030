from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from pydantic import BaseModel

from industrial_rag.config import RagSettings, get_settings
from industrial_rag.models import QueryHit
from industrial_rag.session import RagSession
from apps.backend.llm.llm_client import ask_llm, build_context_block, build_prompt

_log = logging.getLogger(__name__)

NO_DOCUMENTS_MESSAGE = "Please upload documents and enter a query"


class SourceRef(BaseModel):
    """Reference to a single source chunk, as shown next to an answer."""

    doc: str
    chunk: int
    score: float


class RagAnswer(BaseModel):
    """Structured answer from the agent."""

    answer: str
    sources: List[SourceRef]
    model: str | None = None


def _source_refs(hits: List[QueryHit]) -> List[SourceRef]:
    return [
        SourceRef(doc=h.document_name, chunk=h.chunk_index + 1, score=round(h.score, 3))
        for h in hits
    ]


@dataclass
class RagAnswerAgent:
    """Retrieves context from a session and asks the language model to answer."""

    session: RagSession
    settings: RagSettings = field(default_factory=get_settings)
    llm: Callable[..., str] = ask_llm

    def retrieve(self, question: str, top_k: Optional[int] = None) -> List[QueryHit]:
        k = self.settings.top_k if top_k is None else top_k
        hits = self.session.query(question, k)
        _log.info("Retrieved %d chunks for question: %s", len(hits), question[:50])
        return hits

    def _ask(self, prompt: str) -> str:
        return self.llm(
            prompt,
            model=self.settings.model,
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            base_url=self.settings.llm_base_url,
            api_key=self.settings.llm_api_key,
        )

    def answer(self, question: str, top_k: Optional[int] = None) -> RagAnswer:
        """Answer a question from the session's documents using the LLM."""
        if not question.strip() or len(self.session) == 0:
            return RagAnswer(answer=NO_DOCUMENTS_MESSAGE, sources=[], model=None)

        hits = self.retrieve(question, top_k)
        sources = _source_refs(hits)
        prompt = build_prompt(question, build_context_block(hits))

        answer_text = self._ask(prompt)

        if not answer_text or not answer_text.strip():
            _log.warning("LLM returned empty answer on first attempt, retrying once")
            answer_text = self._ask(prompt)

        if not answer_text or not answer_text.strip():
            _log.warning("LLM returned empty answer, falling back to source-only summary")
            lines = ["The language model returned no answer. Most relevant passages:"]
            for src in sources:
                lines.append(f"- {src.doc}, chunk {src.chunk} (score {src.score:.3f})")
            answer_text = "\n".join(lines)

        return RagAnswer(answer=answer_text, sources=sources, model=self.settings.model)


__all__ = ["RagAnswerAgent", "RagAnswer", "SourceRef", "NO_DOCUMENTS_MESSAGE"]
