from __future__ import annotations

from typing import Protocol

from src.domain.document import Corpus, CreateDocumentRequest, Document, DocumentUpdate


class DocumentStorePort(Protocol):
    """External content store holding the corpora and their documents."""

    async def fetch_corpus(self, corpus_id: str) -> Corpus:  # pragma: no cover - interface
        """Return the corpus with metadata-only documents (content is None)."""
        ...

    async def fetch_document(self, document_id: str) -> Document:  # pragma: no cover - interface
        """Return one document with its content loaded."""
        ...

    async def create_document(
        self, request: CreateDocumentRequest
    ) -> Document:  # pragma: no cover - interface
        ...

    async def update_document(
        self, document_id: str, update: DocumentUpdate
    ) -> Document:  # pragma: no cover - interface
        ...
