from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from src.application.ports.document_store_port import DocumentStorePort
from src.domain.document import Corpus, CreateDocumentRequest, Document, DocumentUpdate

_log = logging.getLogger(__name__)


class DocumentNotFoundError(LookupError):
    """Raised when a corpus or document id is unknown to the store."""


class InMemoryDocumentStore(DocumentStorePort):
    """Process-local document store.

    Returns copies so callers never alias stored state: corpus listings carry
    metadata-only documents, fetch_document carries content.
    """

    def __init__(self) -> None:
        self._corpora: dict[str, tuple[str, list[str]]] = {}
        self._documents: dict[str, Document] = {}
        self._owner: dict[str, str] = {}

    def add_corpus(self, corpus_id: str, title: str = "") -> None:
        self._corpora.setdefault(corpus_id, (title or corpus_id, []))

    def add_document(self, corpus_id: str, document: Document) -> Document:
        self.add_corpus(corpus_id)
        stored = replace(document, keywords=list(document.keywords), content=document.content or "")
        self._documents[stored.id] = stored
        self._owner[stored.id] = corpus_id
        order = self._corpora[corpus_id][1]
        if stored.id not in order:
            order.append(stored.id)
        return stored

    async def fetch_corpus(self, corpus_id: str) -> Corpus:
        if corpus_id not in self._corpora:
            raise DocumentNotFoundError(f"Unknown corpus: {corpus_id}")
        title, order = self._corpora[corpus_id]
        return Corpus(
            id=corpus_id,
            title=title,
            documents=[self._documents[d].metadata_only() for d in order],
        )

    async def fetch_document(self, document_id: str) -> Document:
        doc = self._documents.get(document_id)
        if doc is None:
            raise DocumentNotFoundError(f"Unknown document: {document_id}")
        return doc.with_content(doc.content or "")

    async def create_document(self, request: CreateDocumentRequest) -> Document:
        if request.corpus_id not in self._corpora:
            raise DocumentNotFoundError(f"Unknown corpus: {request.corpus_id}")
        doc = Document(
            id=uuid.uuid4().hex,
            title=request.title,
            keywords=list(request.keywords),
            content=request.content,
        )
        self.add_document(request.corpus_id, doc)
        _log.debug("Created document %s in corpus %s", doc.id, request.corpus_id)
        return await self.fetch_document(doc.id)

    async def update_document(self, document_id: str, update: DocumentUpdate) -> Document:
        doc = self._documents.get(document_id)
        if doc is None:
            raise DocumentNotFoundError(f"Unknown document: {document_id}")
        if not update.is_empty:
            self._documents[document_id] = replace(
                doc,
                title=update.title if update.title is not None else doc.title,
                keywords=list(update.keywords) if update.keywords is not None else doc.keywords,
                content=update.content if update.content is not None else doc.content,
                last_edited_time=datetime.now(timezone.utc),
            )
        return await self.fetch_document(document_id)

    # --- serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        corpora = []
        for cid, (title, order) in self._corpora.items():
            docs = []
            for did in order:
                d = self._documents[did]
                docs.append(
                    {
                        "id": d.id,
                        "title": d.title,
                        "keywords": list(d.keywords),
                        "content": d.content or "",
                        "created_time": d.created_time.isoformat(),
                        "last_edited_time": d.last_edited_time.isoformat(),
                    }
                )
            corpora.append({"id": cid, "title": title, "documents": docs})
        return {"corpora": corpora}

    def load_dict(self, data: dict[str, Any]) -> None:
        for c in data.get("corpora", []) or []:
            cid = str(c["id"])
            self.add_corpus(cid, str(c.get("title", "") or cid))
            for d in c.get("documents", []) or []:
                kwargs: dict[str, Any] = {}
                for ts in ("created_time", "last_edited_time"):
                    if d.get(ts):
                        kwargs[ts] = datetime.fromisoformat(str(d[ts]))
                self.add_document(
                    cid,
                    Document(
                        id=str(d["id"]),
                        title=str(d.get("title", "")),
                        keywords=[str(k) for k in d.get("keywords", []) or []],
                        content=str(d.get("content", "") or ""),
                        **kwargs,
                    ),
                )


class JsonFileDocumentStore(InMemoryDocumentStore):
    """InMemoryDocumentStore persisted to a JSON file after every write.

    File layout::

        {"corpora": [{"id": ..., "title": ..., "documents": [
            {"id": ..., "title": ..., "keywords": [...], "content": "..."}]}]}
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            with open(self.path, encoding="utf-8") as f:
                self.load_dict(json.load(f))

    def save(self) -> None:
        """Write the corpora to a sibling temp file, then swap it in."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    async def create_document(self, request: CreateDocumentRequest) -> Document:
        doc = await super().create_document(request)
        self.save()
        return doc

    async def update_document(self, document_id: str, update: DocumentUpdate) -> Document:
        doc = await super().update_document(document_id, update)
        self.save()
        return doc
