from __future__ import annotations

import asyncio
import re
from collections.abc import Callable

import pytest

from src.application.ports.llm_port import GenerativeModelPort
from src.domain.document import Corpus, Document
from src.domain.relevance import ScoreResult

pytest_plugins = ["pytest_asyncio"]

_TITLE_RE = re.compile(r"^Title:[ \t]*(.*)$", re.MULTILINE)


class FakeModel(GenerativeModelPort):
    """Scores documents by title lookup and answers text prompts via ``reply``.

    - scores: title -> score (unknown titles score 0.0)
    - errors: title -> exception raised instead of scoring
    - delays: title -> seconds to wait before answering
    - reply: fixed completion text or a callable(prompt) -> text
    - log: shared list receiving every scored title (in call order)
    """

    def __init__(
        self,
        scores: dict[str, float] | None = None,
        *,
        errors: dict[str, BaseException] | None = None,
        delays: dict[str, float] | None = None,
        reply: str | Callable[[str], str] = "ANSWER",
        text_error: BaseException | None = None,
        log: list[str] | None = None,
    ) -> None:
        self.scores = dict(scores or {})
        self.errors = dict(errors or {})
        self.delays = dict(delays or {})
        self.reply = reply
        self.text_error = text_error
        self.log = log if log is not None else []
        self.score_calls: list[str] = []
        self.text_calls: list[str] = []

    async def score_relevance(self, prompt: str) -> ScoreResult:
        m = _TITLE_RE.search(prompt)
        title = m.group(1).strip() if m else ""
        self.score_calls.append(title)
        self.log.append(title)
        if title in self.delays:
            await asyncio.sleep(self.delays[title])
        if title in self.errors:
            raise self.errors[title]
        return ScoreResult(
            score=self.scores.get(title, 0.0),
            matched_keywords=(title.lower(),),
            reasoning=f"scored {title}",
        )

    async def complete_text(self, prompt: str) -> str:
        self.text_calls.append(prompt)
        if self.text_error is not None:
            raise self.text_error
        return self.reply(prompt) if callable(self.reply) else self.reply


def make_corpus(*titles: str, corpus_id: str = "c1") -> Corpus:
    return Corpus(
        id=corpus_id,
        title="Test corpus",
        documents=[Document(id=t.lower(), title=t, keywords=[t.lower()]) for t in titles],
    )


@pytest.fixture
def fake_model_cls() -> type[FakeModel]:
    return FakeModel


@pytest.fixture
def corpus_factory() -> Callable[..., Corpus]:
    return make_corpus


@pytest.fixture
def no_sleep() -> Callable[[float], object]:
    async def _sleep(_delay: float) -> None:
        return None

    return _sleep
