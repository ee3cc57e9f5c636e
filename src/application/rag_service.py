from __future__ import annotations

from dataclasses import dataclass

from src.application.ports.document_store_port import DocumentStorePort
from src.application.ports.llm_port import GenerativeModelPort
from src.application.use_cases import (
    AnswerSynthesizer,
    AppendOrchestrator,
    BatchRelevanceAnalyzer,
    ContentMerger,
    QueryCorpusUseCase,
    RelevanceScorer,
)
from src.domain.config import RAGConfig
from src.domain.document import Corpus
from src.domain.rag import (
    AppendRequest,
    AppendResult,
    GenerateResponseRequest,
    MergeRequest,
    RAGResponse,
)
from src.domain.relevance import AnalysisOptions, RelevanceResult
from src.infra.cache.result_cache import ResultCache


@dataclass
class RAGService:
    """Entry point bundling the pipeline components around one immutable config."""

    analyzer: BatchRelevanceAnalyzer
    merger: ContentMerger
    synthesizer: AnswerSynthesizer
    appender: AppendOrchestrator
    query: QueryCorpusUseCase
    config: RAGConfig

    @classmethod
    def create(
        cls,
        model: GenerativeModelPort,
        store: DocumentStorePort,
        config: RAGConfig | None = None,
        *,
        cache: ResultCache[list[RelevanceResult]] | None = None,
    ) -> RAGService:
        cfg = config or RAGConfig()
        timeout = cfg.call_timeout_s
        analyzer = BatchRelevanceAnalyzer(
            scorer=RelevanceScorer(model, timeout_s=timeout), config=cfg, cache=cache
        )
        merger = ContentMerger(model, timeout_s=timeout)
        synthesizer = AnswerSynthesizer(
            model, max_context_length=cfg.max_context_length, timeout_s=timeout
        )
        return cls(
            analyzer=analyzer,
            merger=merger,
            synthesizer=synthesizer,
            appender=AppendOrchestrator(
                store=store, analyzer=analyzer, merger=merger, model=model, timeout_s=timeout
            ),
            query=QueryCorpusUseCase(store=store, analyzer=analyzer, synthesizer=synthesizer),
            config=cfg,
        )

    async def analyze_relevance(
        self, query: str, corpus: Corpus, options: AnalysisOptions | None = None
    ) -> list[RelevanceResult]:
        return await self.analyzer.analyze(query, corpus, options)

    async def merge_content(self, request: MergeRequest) -> str:
        return await self.merger.merge_content(request)

    async def generate_response(self, request: GenerateResponseRequest) -> RAGResponse:
        return await self.synthesizer.generate_response(request)

    async def append_content(self, request: AppendRequest) -> AppendResult:
        return await self.appender.append_content(request)

    async def ask(
        self,
        query: str,
        corpus_id: str,
        *,
        threshold: float | None = None,
        max_results: int | None = None,
        include_sources: bool = True,
    ) -> RAGResponse:
        return await self.query.ask(
            query,
            corpus_id,
            threshold=threshold,
            max_results=max_results,
            include_sources=include_sources,
        )

    async def fetch_corpus(self, corpus_id: str) -> Corpus:
        return await self.query.store.fetch_corpus(corpus_id)
