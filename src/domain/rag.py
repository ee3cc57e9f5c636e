from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from src.domain.relevance import RelevanceResult

AppendAction = Literal["merged_target", "merged_selected", "created"]

NO_RELEVANT_DOCUMENTS_ANSWER = (
    "No documents related to your question were found. "
    "Check the other documents in the corpus or try different keywords."
)


@dataclass(frozen=True)
class MergeRequest:
    original_content: str
    additional_content: str


@dataclass(frozen=True)
class GenerateResponseRequest:
    query: str
    relevant_results: list[RelevanceResult]
    include_sources: bool = False


@dataclass(frozen=True)
class ResponseMetadata:
    processing_time_ms: int = 0


@dataclass(frozen=True)
class RAGResponse:
    answer: str
    sources: list[RelevanceResult] = field(default_factory=list)
    metadata: ResponseMetadata = field(default_factory=ResponseMetadata)


@dataclass(frozen=True)
class AppendRequest:
    corpus_id: str
    content: str
    target_document_id: str | None = None


@dataclass(frozen=True)
class AppendResult:
    document_id: str
    title: str
    message: str
    action: AppendAction

    @property
    def created(self) -> bool:
        return self.action == "created"
