from __future__ import annotations

from src.application.use_cases.generate_response import AnswerSynthesizer
from src.domain.context import (
    ELLIPSIS,
    EMPTY_CONTENT_PLACEHOLDER,
    assemble_context,
    budget_context,
    packed_length,
)
from src.domain.document import Document
from src.domain.relevance import RelevanceResult


def _res(doc_id: str, score: float, content: str | None) -> RelevanceResult:
    return RelevanceResult(
        document=Document(id=doc_id, title=doc_id.upper(), content=content), score=score
    )


def test_exactly_one_hundred_remaining_drops_next() -> None:
    results = [_res("a", 0.9, "x" * 150), _res("b", 0.8, "y" * 150)]
    packed = budget_context(results, 250)
    assert [r.document.id for r in packed] == ["a"]
    assert packed_length(packed) == 150


def test_more_than_one_hundred_remaining_truncates() -> None:
    results = [_res("a", 0.9, "x" * 150), _res("b", 0.8, "y" * 300)]
    packed = budget_context(results, 251)

    assert [r.document.id for r in packed] == ["a", "b"]
    last = packed[-1]
    assert last.truncated is True
    assert last.content.endswith(ELLIPSIS)
    assert last.content[:-1] == "y" * 100
    assert packed_length(packed) <= 251


def test_packing_stops_after_first_misfit() -> None:
    # "c" would still fit, but packing stops at the first document that does not
    results = [_res("a", 0.9, "x" * 100), _res("b", 0.8, "y" * 500), _res("c", 0.7, "z" * 10)]
    packed = budget_context(results, 150)
    assert [r.document.id for r in packed] == ["a"]


def test_budget_sorts_and_never_mutates_input() -> None:
    low = _res("low", 0.2, "l" * 50)
    high = _res("high", 0.9, "h" * 400)
    results = [low, high]

    packed = budget_context(results, 300)

    assert results == [low, high]
    assert high.content == "h" * 400 and high.truncated is False
    assert [r.document.id for r in packed] == ["high"]
    assert packed[0].truncated and packed_length(packed) <= 300


def test_unloaded_content_counts_as_empty() -> None:
    packed = budget_context([_res("a", 0.5, None), _res("b", 0.4, "b" * 10)], 10)
    assert [r.document.id for r in packed] == ["a", "b"]


def test_assemble_context_numbers_blocks() -> None:
    text = assemble_context([_res("a", 0.9, " alpha "), _res("b", 0.5, "")])
    assert text == f"[1] A\nalpha\n\n---\n\n[2] B\n{EMPTY_CONTENT_PLACEHOLDER}"


def test_synthesizer_prompt_lists_sources() -> None:
    synth = AnswerSynthesizer(model=None)  # type: ignore[arg-type]
    prompt = synth.build_prompt("why?", [_res("a", 0.9, "because")], include_sources=True)
    assert "why?" in prompt
    assert "[1] A\nbecause" in prompt
    assert "[1]." in prompt
