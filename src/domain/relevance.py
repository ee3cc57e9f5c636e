from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from src.domain.document import Document

T = TypeVar("T")


@dataclass(frozen=True)
class ScoreResult:
    """Validated relevance judgement returned by the model boundary."""

    score: float
    matched_keywords: tuple[str, ...] = ()
    reasoning: str = ""

    def __post_init__(self) -> None:
        s = float(self.score)
        if math.isnan(s) or not 0.0 <= s <= 1.0:
            raise ValueError(f"relevance score must be within [0, 1], got {self.score!r}")
        object.__setattr__(self, "score", s)
        object.__setattr__(self, "matched_keywords", tuple(str(k) for k in self.matched_keywords))


ZERO_SCORE = ScoreResult(score=0.0)


@dataclass(frozen=True)
class RelevanceResult:
    document: Document
    score: float
    matched_keywords: tuple[str, ...] = ()
    reasoning: str | None = None
    truncated: bool = False

    @property
    def content(self) -> str:
        return self.document.content or ""


@dataclass(frozen=True)
class ScoreOutcome:
    """Per-candidate result: either a ScoreResult or the error that prevented one."""

    document: Document
    result: ScoreResult | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None and self.error is None

    @classmethod
    def success(cls, document: Document, result: ScoreResult) -> ScoreOutcome:
        return cls(document=document, result=result)

    @classmethod
    def failure(cls, document: Document, error: BaseException) -> ScoreOutcome:
        return cls(document=document, error=error)

    def fold(self, *, keep_reasoning: bool = False) -> RelevanceResult:
        """Collapse into a RelevanceResult; failed outcomes become a zero score."""
        res = self.result if self.ok and self.result is not None else ZERO_SCORE
        return RelevanceResult(
            document=self.document,
            score=res.score,
            matched_keywords=res.matched_keywords,
            reasoning=(res.reasoning or None) if keep_reasoning and self.ok else None,
        )


@dataclass(frozen=True)
class AnalysisOptions:
    threshold: float | None = None
    max_results: int | None = None
    include_reasoning: bool | None = None


@dataclass(frozen=True)
class EffectiveOptions:
    threshold: float
    max_results: int
    include_reasoning: bool = False

    def as_dict(self) -> dict[str, object]:
        return {
            "threshold": self.threshold,
            "max_results": self.max_results,
            "include_reasoning": self.include_reasoning,
        }


def chunk_list(items: Sequence[T], size: int) -> list[list[T]]:
    """Split ``items`` into consecutive chunks of at most ``size`` elements."""
    if size <= 0:
        raise ValueError("chunk size must be positive")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def rank_results(
    results: Iterable[RelevanceResult], *, threshold: float, max_results: int
) -> list[RelevanceResult]:
    """Keep results scoring at least ``threshold``, best first, at most ``max_results``.

    Sorting is stable, so equal scores keep corpus order.
    """
    kept = [r for r in results if r.score >= threshold]
    kept.sort(key=lambda r: r.score, reverse=True)
    return kept[: max(0, int(max_results))]


__all__ = [
    "ScoreResult",
    "ZERO_SCORE",
    "RelevanceResult",
    "ScoreOutcome",
    "AnalysisOptions",
    "EffectiveOptions",
    "chunk_list",
    "rank_results",
]
