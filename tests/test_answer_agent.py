from agents.answer_agent import NO_DOCUMENTS_MESSAGE, RagAnswerAgent
from apps.backend.llm.llm_client import CONTEXT_SEPARATOR, build_context_block, build_prompt
from industrial_rag.models import QueryHit



class TestPromptBuilding:
    def test_context_block_headers_are_one_based(self):
        hits = [
            QueryHit(document_name="a.txt", chunk_index=0, chunk_text="alpha", score=0.9),
            QueryHit(document_name="b.txt", chunk_index=4, chunk_text="beta", score=0.5),
        ]
        context = build_context_block(hits)
        assert context == (
            "[Document: a.txt, Chunk 1]\nalpha"
            + CONTEXT_SEPARATOR
            + "[Document: b.txt, Chunk 5]\nbeta"
        )

    def test_prompt_contains_question_and_context(self):
        prompt = build_prompt("What?", "CTX")
        assert "Context from documents:\nCTX" in prompt
        assert "User Question: What?" in prompt


class TestRagAnswerAgent:
    def test_empty_session_does_not_call_llm(self, session, small_settings, fake_llm):
        agent = RagAnswerAgent(session=session, settings=small_settings, llm=fake_llm)
        result = agent.answer("anything")
        assert result.answer == NO_DOCUMENTS_MESSAGE
        assert result.sources == []
        assert fake_llm.calls == []

    def test_blank_question_does_not_call_llm(self, fox_session, small_settings, fake_llm):
        agent = RagAnswerAgent(session=fox_session, settings=small_settings, llm=fake_llm)
        assert agent.answer("   ").answer == NO_DOCUMENTS_MESSAGE
        assert fake_llm.calls == []

    def test_answer_with_sources(self, fox_session, small_settings, make_llm):
        llm = make_llm(["A fox."])
        agent = RagAnswerAgent(session=fox_session, settings=small_settings, llm=llm)

        result = agent.answer("fox", top_k=1)

        assert result.answer == "A fox."
        assert result.model == small_settings.model
        assert len(result.sources) == 1
        assert result.sources[0].doc == "A"
        assert result.sources[0].chunk == 3
        assert result.sources[0].score == round(result.sources[0].score, 3)

        call = llm.calls[0]
        assert "[Document: A, Chunk 3]\nfox" in call["prompt"]
        assert call["model"] == small_settings.model
        assert call["temperature"] == small_settings.temperature
        assert call["max_tokens"] == 1000

    def test_default_top_k_from_settings(self, fox_session, small_settings, fake_llm):
        agent = RagAnswerAgent(session=fox_session, settings=small_settings, llm=fake_llm)
        assert len(agent.answer("fox").sources) == 3

    def test_empty_answer_retried_once(self, fox_session, small_settings, make_llm):
        llm = make_llm(["", "second try"])
        agent = RagAnswerAgent(session=fox_session, settings=small_settings, llm=llm)
        assert agent.answer("fox").answer == "second try"
        assert len(llm.calls) == 2

    def test_fallback_lists_sources(self, fox_session, small_settings, make_llm):
        llm = make_llm(["  "])
        agent = RagAnswerAgent(session=fox_session, settings=small_settings, llm=llm)
        result = agent.answer("fox", top_k=1)
        assert "A, chunk 3" in result.answer
        assert len(llm.calls) == 2
