from __future__ import annotations

"""Infrastructure model providers implementing the GenerativeModelPort contract.

Adapters:
- DummyModel: dependency-free keyword-overlap scorer and echo completion for
  tests and offline use.
- OpenAIChatModel: wraps langchain-openai ChatOpenAI; relevance scoring uses
  structured output bound to the RelevanceAssessment schema.

These providers keep external dependencies in the infrastructure layer and present
async score_relevance(prompt) / complete_text(prompt) to the application layer.
"""

import re  # noqa: E402
from dataclasses import dataclass, field  # noqa: E402
from typing import Any  # noqa: E402

from pydantic import ValidationError  # noqa: E402

from src.application.ports.llm_port import GenerativeModelPort  # noqa: E402
from src.domain.errors import LLM_RESPONSE_INVALID, ConfigurationError, RAGError  # noqa: E402
from src.domain.relevance import ScoreResult  # noqa: E402
from src.infrastructure.llm.schemas import RelevanceAssessment  # noqa: E402

_FIELD_RE = {
    name: re.compile(rf"^{name}:[ \t]*(.*)$", re.MULTILINE)
    for name in ("Query", "Title", "Keywords")
}
_WORD_RE = re.compile(r"\w+", re.UNICODE)


def _prompt_field(prompt: str, name: str) -> str:
    m = _FIELD_RE[name].search(prompt or "")
    return m.group(1).strip() if m else ""


@dataclass
class DummyModel(GenerativeModelPort):
    """Offline test double.

    score_relevance reads the Query/Keywords lines of the relevance prompt and
    scores the share of keywords that overlap the query. complete_text echoes
    the prompt.
    """

    calls: list[str] = field(default_factory=list)

    async def score_relevance(self, prompt: str) -> ScoreResult:
        self.calls.append(prompt)
        query = _prompt_field(prompt, "Query").lower()
        keywords = [k.strip() for k in _prompt_field(prompt, "Keywords").split(",") if k.strip()]
        if not query or not keywords:
            return ScoreResult(score=0.0, reasoning="nothing to compare")
        words = set(_WORD_RE.findall(query))
        matched = [
            k for k in keywords if k.lower() in query or words & set(_WORD_RE.findall(k.lower()))
        ]
        return ScoreResult(
            score=round(len(matched) / len(keywords), 4),
            matched_keywords=tuple(matched),
            reasoning=f"{len(matched)} of {len(keywords)} keywords overlap the query",
        )

    async def complete_text(self, prompt: str) -> str:
        self.calls.append(prompt)
        return prompt


def _message_text(resp: Any) -> str:
    content = getattr(resp, "content", resp)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # content blocks: keep the text parts
        parts = [
            b if isinstance(b, str) else str(b.get("text", ""))
            for b in content
            if isinstance(b, str) or (isinstance(b, dict) and b.get("type") == "text")
        ]
        return "".join(parts)
    raise RAGError(
        LLM_RESPONSE_INVALID,
        f"Unexpected completion payload of type {type(content).__name__}",
        "llm",
    )


@dataclass
class OpenAIChatModel(GenerativeModelPort):
    """OpenAI chat model using langchain-openai.

    Retries are disabled on the client: every failure surfaces once to the
    caller, which decides whether it is fatal.
    """

    model: str
    api_key: str | None = None
    base_url: str | None = None
    temperature: float = 0.1
    timeout_s: float | None = 30.0
    max_tokens: int | None = None

    def __post_init__(self) -> None:  # lazy import and instantiate client
        try:
            from langchain_openai import ChatOpenAI
        except Exception as e:  # pragma: no cover - import guarded
            raise ConfigurationError(
                "langchain-openai is required for OpenAIChatModel.\n"
                "Install with: pip install langchain-openai openai"
            ) from e

        kwargs: dict[str, object] = {
            "model": self.model,
            "temperature": float(self.temperature),
            "max_retries": 0,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if self.timeout_s is not None:
            kwargs["timeout"] = float(self.timeout_s)
        if self.max_tokens is not None:
            kwargs["max_tokens"] = int(self.max_tokens)
        self._chat = ChatOpenAI(**kwargs)
        self._scorer = self._chat.with_structured_output(RelevanceAssessment)

    async def score_relevance(self, prompt: str) -> ScoreResult:
        raw = await self._scorer.ainvoke(prompt)
        try:
            assessment = (
                raw
                if isinstance(raw, RelevanceAssessment)
                else RelevanceAssessment.model_validate(raw)
            )
        except ValidationError as e:
            raise RAGError(
                LLM_RESPONSE_INVALID, f"Relevance response violates schema: {e}", "llm", raw
            ) from e
        return assessment.to_score_result()

    async def complete_text(self, prompt: str) -> str:
        resp = await self._chat.ainvoke(prompt)
        return _message_text(resp)


__all__ = ["DummyModel", "OpenAIChatModel"]
