from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from src.application.ports.llm_port import GenerativeModelPort
from src.domain.config import RAGConfig
from src.domain.document import Corpus, Document
from src.domain.errors import RELEVANCE_ANALYSIS_FAILED, RAGError
from src.domain.relevance import (
    AnalysisOptions,
    EffectiveOptions,
    RelevanceResult,
    ScoreOutcome,
    ScoreResult,
    chunk_list,
    rank_results,
)
from src.infra.cache.result_cache import ResultCache, make_cache_key
from src.infra.observability.relevance_log import log_relevance_event
from src.infra.prompting.templates import render_relevance_prompt

_log = logging.getLogger(__name__)


@dataclass
class RelevanceScorer:
    """Score one (query, document) pair from the document's title and keywords.

    Never raises for a model failure: the error is returned inside the
    ScoreOutcome so batch aggregation always has a value per candidate.
    """

    model: GenerativeModelPort
    timeout_s: float | None = 30.0

    async def score(self, query: str, document: Document) -> ScoreOutcome:
        prompt = render_relevance_prompt(query, document.title, document.keywords)
        try:
            result = await asyncio.wait_for(self.model.score_relevance(prompt), self.timeout_s)
            if not isinstance(result, ScoreResult):
                raise TypeError(f"expected ScoreResult, got {type(result).__name__}")
        except Exception as e:
            _log.warning("Relevance scoring failed for document %s: %r", document.id, e)
            return ScoreOutcome.failure(document, e)
        return ScoreOutcome.success(document, result)


@dataclass
class BatchRelevanceAnalyzer:
    scorer: RelevanceScorer
    config: RAGConfig
    cache: ResultCache[list[RelevanceResult]] | None = None
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def __post_init__(self) -> None:
        if self.cache is None and self.config.cache_enabled:
            self.cache = ResultCache(
                capacity=self.config.cache_capacity, ttl_s=self.config.cache_ttl_s
            )

    def effective_options(self, options: AnalysisOptions | None = None) -> EffectiveOptions:
        opts = options or AnalysisOptions()
        return EffectiveOptions(
            threshold=float(
                opts.threshold if opts.threshold is not None else self.config.relevance_threshold
            ),
            max_results=int(
                opts.max_results if opts.max_results is not None else self.config.max_results
            ),
            include_reasoning=bool(opts.include_reasoning),
        )

    async def analyze(
        self, query: str, corpus: Corpus, options: AnalysisOptions | None = None
    ) -> list[RelevanceResult]:
        """Return the documents of ``corpus`` relevant to ``query``, best first.

        Candidates are scored in chunks of ``batch_size`` (concurrently within a
        chunk, with a pacing pause between chunks), then filtered by threshold,
        sorted and truncated. With caching enabled, identical requests are served
        from the ResultCache.
        """
        start = time.perf_counter()
        try:
            eff = self.effective_options(options)
            if not (self.config.cache_enabled and self.cache is not None):
                return await self._analyze_uncached(query, corpus, eff, start)

            key = make_cache_key("relevance", query, corpus.id, eff.as_dict())
            computed = False

            async def _compute() -> list[RelevanceResult]:
                nonlocal computed
                computed = True
                return await self._analyze_uncached(query, corpus, eff, start)

            results = await self.cache.get_or_compute(key, _compute)
            if not computed:
                log_relevance_event(
                    query,
                    corpus.id,
                    candidates=0,
                    kept=len(results),
                    failed=0,
                    elapsed_ms=int((time.perf_counter() - start) * 1000),
                    cached=True,
                )
            return results
        except RAGError:
            raise
        except Exception as e:
            _log.error("Error in relevance analysis: %s", e)
            raise RAGError(
                RELEVANCE_ANALYSIS_FAILED, f"Failed to analyze relevance: {e}", "analysis", e
            ) from e

    async def _analyze_uncached(
        self, query: str, corpus: Corpus, eff: EffectiveOptions, start: float
    ) -> list[RelevanceResult]:
        _log.debug("Starting relevance analysis for %r", query[:50])
        documents = list(corpus.documents)
        chunks = chunk_list(documents, self.config.batch_size)

        outcomes: list[ScoreOutcome] = []
        for i, chunk in enumerate(chunks):
            outcomes.extend(await self._score_chunk(query, chunk))
            if i < len(chunks) - 1:
                await self.sleep(self.config.pacing_delay_s)

        folded = [o.fold(keep_reasoning=eff.include_reasoning) for o in outcomes]
        results = rank_results(folded, threshold=eff.threshold, max_results=eff.max_results)

        log_relevance_event(
            query,
            corpus.id,
            candidates=len(documents),
            kept=len(results),
            failed=sum(1 for o in outcomes if not o.ok),
            elapsed_ms=int((time.perf_counter() - start) * 1000),
            cached=False,
        )
        return results

    async def _score_chunk(self, query: str, chunk: list[Document]) -> list[ScoreOutcome]:
        try:
            return list(await asyncio.gather(*(self.scorer.score(query, d) for d in chunk)))
        except Exception as e:
            # whole chunk degrades to zero scores
            _log.error("Batch processing error (%d documents): %s", len(chunk), e)
            return [ScoreOutcome.failure(d, e) for d in chunk]
