from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from src.application.ports.llm_port import GenerativeModelPort
from src.domain.errors import CONTENT_MERGE_FAILED, RAGError
from src.domain.rag import MergeRequest
from src.infra.prompting.templates import render_merge_prompt

_log = logging.getLogger(__name__)


@dataclass
class ContentMerger:
    """Merge new material into existing content with a single model call.

    The model output is returned as-is; no structural check of the merge is made.
    """

    model: GenerativeModelPort
    timeout_s: float | None = 30.0

    async def merge_content(self, request: MergeRequest) -> str:
        start = time.perf_counter()
        prompt = render_merge_prompt(request.original_content or "", request.additional_content)
        try:
            merged = await asyncio.wait_for(self.model.complete_text(prompt), self.timeout_s)
        except Exception as e:
            _log.error("Error in content merge: %r", e)
            raise RAGError(
                CONTENT_MERGE_FAILED, f"Failed to merge content: {e!r}", "merge", e
            ) from e
        _log.info("Content merge completed in %dms", int((time.perf_counter() - start) * 1000))
        return merged
