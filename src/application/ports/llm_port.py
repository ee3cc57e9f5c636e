from __future__ import annotations

from typing import Protocol

from src.domain.relevance import ScoreResult


class GenerativeModelPort(Protocol):
    """Abstract generative model used for scoring, merging and answering."""

    async def score_relevance(self, prompt: str) -> ScoreResult:  # pragma: no cover - interface
        """Schema-constrained call returning a validated relevance judgement."""
        ...

    async def complete_text(self, prompt: str) -> str:  # pragma: no cover - interface
        ...
