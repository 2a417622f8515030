from __future__ import annotations

import logging
import os
from typing import Sequence

from dotenv import load_dotenv
from openai import OpenAI, OpenAIError

from industrial_rag.errors import RagError
from industrial_rag.models import QueryHit

# Load .env once when module is imported so that OPENROUTER_API_KEY can live
# in a config file rather than every shell session.
load_dotenv()

_log = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"

# Clients are created lazily so that missing credentials do not block API
# startup; errors surface on the first question instead.
_clients: dict[tuple[str, str], OpenAI] = {}


class LLMError(RagError):
    """The language-model provider failed, returned an error or is not configured."""


def _get_client(base_url: str, api_key: str | None) -> OpenAI:
    key = api_key or os.getenv("OPENROUTER_API_KEY")
    if not key:
        raise LLMError("No LLM API key configured (set INDUSTRIAL_RAG_LLM_API_KEY or OPENROUTER_API_KEY)")
    cache_key = (base_url, key)
    client = _clients.get(cache_key)
    if client is None:
        client = OpenAI(api_key=key, base_url=base_url)
        _clients[cache_key] = client
    return client


def build_context_block(hits: Sequence[QueryHit]) -> str:
    """Format retrieved chunks into one context block with citation headers."""
    parts: list[str] = []
    for hit in hits:
        header = f"[Document: {hit.document_name}, Chunk {hit.chunk_index + 1}]"
        parts.append(header + "\n" + hit.chunk_text)
    return CONTEXT_SEPARATOR.join(parts)


def build_prompt(question: str, context: str) -> str:
    return (
        "You are a helpful AI assistant. Answer the user's question based on the "
        "provided context. If the context doesn't contain relevant information, "
        "say so clearly.\n\n"
        f"Context from documents:\n{context}\n\n"
        f"User Question: {question}\n\n"
        "Please provide a comprehensive answer based on the context above. "
        "Cite specific documents when relevant."
    )


def ask_llm(
    prompt: str,
    *,
    model: str,
    temperature: float,
    max_tokens: int,
    base_url: str,
    api_key: str | None = None,
) -> str:
    """Send a single-message chat completion and return the reply text."""
    client = _get_client(base_url, api_key)
    _log.info("Calling %s (model=%s, temperature=%.2f)", base_url, model, temperature)
    try:
        resp = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except OpenAIError as exc:
        raise LLMError(f"LLM request failed: {exc}") from exc

    if not resp.choices:
        raise LLMError("LLM response contained no choices")
    content = resp.choices[0].message.content
    return content or ""


__all__ = [
    "CONTEXT_SEPARATOR",
    "LLMError",
    "ask_llm",
    "build_context_block",
    "build_prompt",
]
