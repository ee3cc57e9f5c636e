from __future__ import annotations

import logging
from dataclasses import dataclass

from src.application.ports.document_store_port import DocumentStorePort
from src.application.use_cases.analyze_relevance import BatchRelevanceAnalyzer
from src.application.use_cases.generate_response import AnswerSynthesizer
from src.domain.errors import INVALID_QUERY_REQUEST, RAGError
from src.domain.rag import NO_RELEVANT_DOCUMENTS_ANSWER, GenerateResponseRequest, RAGResponse
from src.domain.relevance import AnalysisOptions, RelevanceResult

_log = logging.getLogger(__name__)


async def set_content_on_result(
    store: DocumentStorePort, result: RelevanceResult
) -> RelevanceResult:
    """Load the full content of ``result.document`` in place.

    Relevance analysis only sees corpus metadata; this fills in ``content``
    from an individual document fetch. Not synchronized: do not share the
    result across concurrent tasks while loading.
    """
    doc = await store.fetch_document(result.document.id)
    result.document.content = doc.content or ""
    return result


@dataclass
class QueryCorpusUseCase:
    store: DocumentStorePort
    analyzer: BatchRelevanceAnalyzer
    synthesizer: AnswerSynthesizer

    async def ask(
        self,
        query: str,
        corpus_id: str,
        *,
        threshold: float | None = None,
        max_results: int | None = None,
        include_sources: bool = True,
    ) -> RAGResponse:
        """Answer ``query`` from the documents of ``corpus_id``.

        1) Fetch corpus metadata
        2) Analyze relevance (title/keywords only)
        3) Load the content of each relevant document
        4) Generate the answer from the budgeted context
        Zero relevant documents is not an error: a fixed answer with no sources.
        """
        if not (query or "").strip() or not (corpus_id or "").strip():
            raise RAGError(INVALID_QUERY_REQUEST, "query and corpus_id are required", "system")

        corpus = await self.store.fetch_corpus(corpus_id)
        _log.info("Corpus fetched: %s with %d documents", corpus.title, len(corpus))

        relevant = await self.analyzer.analyze(
            query, corpus, AnalysisOptions(threshold=threshold, max_results=max_results)
        )
        if not relevant:
            return RAGResponse(answer=NO_RELEVANT_DOCUMENTS_ANSWER, sources=[])

        for r in relevant:
            await set_content_on_result(self.store, r)

        _log.info("Generating response with %d relevant documents", len(relevant))
        return await self.synthesizer.generate_response(
            GenerateResponseRequest(
                query=query, relevant_results=relevant, include_sources=include_sources
            )
        )
