from __future__ import annotations

import pytest

from src.application.use_cases.generate_response import AnswerSynthesizer
from src.application.use_cases.merge_content import ContentMerger
from src.domain.document import Document
from src.domain.errors import CONTENT_MERGE_FAILED, RESPONSE_GENERATION_FAILED, RAGError
from src.domain.rag import GenerateResponseRequest, MergeRequest
from src.domain.relevance import RelevanceResult


@pytest.mark.asyncio
async def test_merge_returns_model_output_verbatim(fake_model_cls) -> None:
    model = fake_model_cls(reply="  merged text\n")
    merged = await ContentMerger(model).merge_content(
        MergeRequest(original_content="old", additional_content="new")
    )
    assert merged == "  merged text\n"
    prompt = model.text_calls[0]
    assert "ORIGINAL CONTENT:\nold" in prompt
    assert "CONTENT TO ADD:\nnew" in prompt


@pytest.mark.asyncio
async def test_merge_failure_is_tagged(fake_model_cls) -> None:
    model = fake_model_cls(text_error=ConnectionError("refused"))
    with pytest.raises(RAGError) as ei:
        await ContentMerger(model).merge_content(MergeRequest("a", "b"))
    assert ei.value.code == CONTENT_MERGE_FAILED
    assert ei.value.source == "merge"
    assert isinstance(ei.value.__cause__, ConnectionError)


def _res(doc_id: str, score: float, content: str) -> RelevanceResult:
    return RelevanceResult(Document(id=doc_id, title=f"Doc {doc_id}", content=content), score)


@pytest.mark.asyncio
async def test_generate_response_uses_budgeted_sources(fake_model_cls) -> None:
    model = fake_model_cls(reply="The answer [1].")
    synth = AnswerSynthesizer(model, max_context_length=250)
    request = GenerateResponseRequest(
        query="what?",
        relevant_results=[_res("b", 0.4, "b" * 150), _res("a", 0.9, "a" * 150)],
        include_sources=True,
    )

    resp = await synth.generate_response(request)

    assert resp.answer == "The answer [1]."
    assert [r.document.id for r in resp.sources] == ["a"]
    assert resp.metadata.processing_time_ms >= 0
    assert "[1] Doc a" in model.text_calls[0]
    assert "Doc b" not in model.text_calls[0]


@pytest.mark.asyncio
async def test_generate_response_failure_is_tagged(fake_model_cls) -> None:
    model = fake_model_cls(text_error=RuntimeError("rate limited"))
    with pytest.raises(RAGError) as ei:
        await AnswerSynthesizer(model).generate_response(
            GenerateResponseRequest(query="q", relevant_results=[])
        )
    assert ei.value.code == RESPONSE_GENERATION_FAILED
    assert ei.value.source == "generation"
    assert str(ei.value).startswith("[RESPONSE_GENERATION_FAILED]")
