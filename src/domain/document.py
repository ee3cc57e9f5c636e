from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Document:
    """A page of a corpus as seen by the retrieval pipeline.

    ``content`` is None when the document came from a corpus listing (metadata
    only) and a string once the document was loaded individually. It is the only
    field that is filled in after construction.
    """

    id: str
    title: str
    keywords: list[str] = field(default_factory=list)
    content: str | None = None
    created_time: datetime = field(default_factory=_utcnow)
    last_edited_time: datetime = field(default_factory=_utcnow)

    @property
    def is_loaded(self) -> bool:
        return self.content is not None

    @property
    def content_length(self) -> int:
        return len(self.content or "")

    def metadata_only(self) -> Document:
        return replace(self, keywords=list(self.keywords), content=None)

    def with_content(self, content: str) -> Document:
        return replace(self, keywords=list(self.keywords), content=content)


@dataclass
class Corpus:
    id: str
    title: str
    documents: list[Document] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.documents)


@dataclass(frozen=True)
class CreateDocumentRequest:
    corpus_id: str
    title: str
    content: str
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class DocumentUpdate:
    """Partial update; fields left as None are not touched."""

    title: str | None = None
    keywords: tuple[str, ...] | None = None
    content: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.title is None and self.keywords is None and self.content is None
