from __future__ import annotations

from pydantic import BaseModel, Field

from src.domain.relevance import ScoreResult


class RelevanceAssessment(BaseModel):
    """Structured-output schema the model must fill for a relevance judgement."""

    score: float = Field(ge=0.0, le=1.0, description="Relevance score between 0 and 1")
    matched_keywords: list[str] = Field(
        default_factory=list, description="Document keywords that match the query"
    )
    reasoning: str = Field(default="", description="One-sentence justification of the score")

    def to_score_result(self) -> ScoreResult:
        return ScoreResult(
            score=self.score,
            matched_keywords=tuple(self.matched_keywords),
            reasoning=self.reasoning,
        )
