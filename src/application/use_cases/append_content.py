from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from src.application.ports.document_store_port import DocumentStorePort
from src.application.ports.llm_port import GenerativeModelPort
from src.application.use_cases.analyze_relevance import BatchRelevanceAnalyzer
from src.application.use_cases.merge_content import ContentMerger
from src.domain.document import CreateDocumentRequest, Document, DocumentUpdate
from src.domain.errors import APPEND_FAILED, INVALID_APPEND_REQUEST, RAGError
from src.domain.rag import AppendRequest, AppendResult, MergeRequest
from src.domain.relevance import AnalysisOptions
from src.infra.prompting.parsers import clean_title, parse_keywords
from src.infra.prompting.templates import render_keywords_prompt, render_title_prompt

_log = logging.getLogger(__name__)

# Permissive so that any plausibly related document is preferred over creating one.
AUTO_SELECT_THRESHOLD = 0.1
UNTITLED = "Untitled"


@dataclass
class AppendOrchestrator:
    """Route new content to a document: explicit target, best match, or a new one.

    1) target_document_id given: merge into that document, no relevance analysis
    2) otherwise analyze the corpus (threshold 0.1, one result):
       - a match: merge into the matched document
       - no match: create a document with a generated title and keywords
    """

    store: DocumentStorePort
    analyzer: BatchRelevanceAnalyzer
    merger: ContentMerger
    model: GenerativeModelPort
    timeout_s: float | None = 30.0

    async def append_content(self, request: AppendRequest) -> AppendResult:
        if not (request.corpus_id or "").strip() or not (request.content or "").strip():
            raise RAGError(
                INVALID_APPEND_REQUEST, "corpus_id and content are required", "system"
            )
        try:
            if request.target_document_id:
                _log.info("Target document specified: %s", request.target_document_id)
                doc = await self._merge_into(request.target_document_id, request.content)
                return AppendResult(
                    document_id=doc.id,
                    title=doc.title,
                    message="Content was added to the specified document.",
                    action="merged_target",
                )
            return await self._append_auto(request)
        except Exception as e:
            _log.error("Append failed for corpus %s: %s", request.corpus_id, e)
            raise RAGError(APPEND_FAILED, f"Failed to append content: {e}", "system", e) from e

    async def _append_auto(self, request: AppendRequest) -> AppendResult:
        _log.info("No target document specified, analyzing relevance...")
        corpus = await self.store.fetch_corpus(request.corpus_id)
        matches = await self.analyzer.analyze(
            request.content,
            corpus,
            AnalysisOptions(threshold=AUTO_SELECT_THRESHOLD, max_results=1),
        )

        if not matches:
            _log.info("No relevant documents found, creating a new document...")
            created = await self._create_document(request.corpus_id, request.content)
            return AppendResult(
                document_id=created.id,
                title=created.title,
                message="No related document was found; a new document was created.",
                action="created",
            )

        best = matches[0]
        _log.info(
            "Most relevant document selected: %s (score: %.2f)", best.document.title, best.score
        )
        doc = await self._merge_into(best.document.id, request.content)
        return AppendResult(
            document_id=doc.id,
            title=doc.title,
            message="Content was added to the most relevant document.",
            action="merged_selected",
        )

    async def _merge_into(self, document_id: str, content: str) -> Document:
        current = await self.store.fetch_document(document_id)
        merged = await self.merger.merge_content(
            MergeRequest(original_content=current.content or "", additional_content=content)
        )
        await self.store.update_document(document_id, DocumentUpdate(content=merged))
        return current

    async def _create_document(self, corpus_id: str, content: str) -> Document:
        title_task = asyncio.ensure_future(self.generate_title(content))
        keywords_task = asyncio.ensure_future(self.generate_keywords(content))
        try:
            title, keywords = await asyncio.gather(title_task, keywords_task)
        except BaseException:
            # gather does not cancel the sibling on failure
            for t in (title_task, keywords_task):
                t.cancel()
            raise
        return await self.store.create_document(
            CreateDocumentRequest(
                corpus_id=corpus_id, title=title, content=content, keywords=tuple(keywords)
            )
        )

    async def generate_title(self, content: str) -> str:
        raw = await asyncio.wait_for(
            self.model.complete_text(render_title_prompt(content)), self.timeout_s
        )
        return clean_title(raw) or UNTITLED

    async def generate_keywords(self, content: str) -> list[str]:
        raw = await asyncio.wait_for(
            self.model.complete_text(render_keywords_prompt(content)), self.timeout_s
        )
        return parse_keywords(raw)
