from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from src.application.ports.llm_port import GenerativeModelPort
from src.domain.context import assemble_context, budget_context
from src.domain.errors import RESPONSE_GENERATION_FAILED, RAGError
from src.domain.rag import GenerateResponseRequest, RAGResponse, ResponseMetadata
from src.domain.relevance import RelevanceResult
from src.infra.prompting.templates import render_response_prompt

_log = logging.getLogger(__name__)


@dataclass
class AnswerSynthesizer:
    model: GenerativeModelPort
    max_context_length: int = 4000
    timeout_s: float | None = 30.0

    def build_prompt(
        self, query: str, context: list[RelevanceResult], include_sources: bool = False
    ) -> str:
        return render_response_prompt(query, assemble_context(context), include_sources)

    async def generate_response(self, request: GenerateResponseRequest) -> RAGResponse:
        """Answer ``request.query`` grounded on the budgeted relevant documents.

        The results are packed into ``max_context_length`` characters first; the
        returned sources are the packed (possibly truncated) results.
        """
        start = time.perf_counter()
        _log.info("Generating response for %r", request.query[:50])
        sources = budget_context(request.relevant_results, self.max_context_length)
        prompt = self.build_prompt(request.query, sources, request.include_sources)
        try:
            answer = await asyncio.wait_for(self.model.complete_text(prompt), self.timeout_s)
        except Exception as e:
            _log.error("Error in response generation: %r", e)
            raise RAGError(
                RESPONSE_GENERATION_FAILED, f"Failed to generate response: {e!r}", "generation", e
            ) from e

        elapsed = int((time.perf_counter() - start) * 1000)
        _log.info("Response generated in %dms from %d source(s)", elapsed, len(sources))
        return RAGResponse(
            answer=answer, sources=sources, metadata=ResponseMetadata(processing_time_ms=elapsed)
        )
