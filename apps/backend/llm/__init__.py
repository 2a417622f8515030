"""Language-model client used by the answer agent."""
from apps.backend.llm.llm_client import LLMError, ask_llm, build_context_block, build_prompt

__all__ = ["LLMError", "ask_llm", "build_context_block", "build_prompt"]
