from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class RagSettings(BaseSettings):
    """Chunking, retrieval and answer-generation settings for a session."""

    chunk_size: int = Field(default=500, gt=0, description="Characters per chunk.")
    chunk_overlap: int = Field(
        default=50,
        ge=0,
        description="Characters shared by consecutive chunks; must be below chunk_size.",
    )
    top_k: int = Field(default=3, ge=0, description="Number of chunks handed to the LLM.")

    # Answer generation (OpenAI-compatible chat completions endpoint)
    model: str = Field(default="meta-llama/llama-3.2-3b-instruct")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, gt=0)
    llm_base_url: str = Field(default="https://openrouter.ai/api/v1")
    llm_api_key: Optional[str] = Field(
        default=None,
        description="API key; OPENROUTER_API_KEY is used when unset.",
    )

    log_level: str = Field(default="INFO")

    class Config:
        env_prefix = "INDUSTRIAL_RAG_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @model_validator(mode="after")
    def _check_overlap(self) -> "RagSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self


def get_settings() -> RagSettings:
    """Return settings read from the environment and .env."""
    return RagSettings()


__all__ = ["RagSettings", "get_settings"]
