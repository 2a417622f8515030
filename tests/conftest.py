"""Shared fixtures for the test suite."""

from __future__ import annotations

from typing import List

import pytest

from industrial_rag.config import RagSettings
from industrial_rag.session import RagSession

FOX_TEXT = "the quick brown fox"


class FakeLLM:
    """Stands in for the chat completions call; records prompts, replays answers."""

    def __init__(self, answers: List[str] | None = None, error: Exception | None = None) -> None:
        self.answers = list(answers or ["stub answer"])
        self.error = error
        self.calls: list[dict] = []

    def __call__(self, prompt: str, **kwargs) -> str:
        self.calls.append({"prompt": prompt, **kwargs})
        if self.error is not None:
            raise self.error
        if len(self.answers) > 1:
            return self.answers.pop(0)
        return self.answers[0]


@pytest.fixture
def session() -> RagSession:
    return RagSession()


@pytest.fixture
def fox_session(session: RagSession) -> RagSession:
    session.ingest("A", "A", FOX_TEXT, chunk_size=10, overlap=2)
    return session


@pytest.fixture
def small_settings() -> RagSettings:
    return RagSettings(chunk_size=10, chunk_overlap=2, top_k=3, llm_api_key="test-key")


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def make_llm():
    return FakeLLM
