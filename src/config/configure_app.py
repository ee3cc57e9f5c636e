from __future__ import annotations

"""Composition root: assemble and expose the RAG service.

Provides a cached getter to avoid re-building adapters (and losing the result
cache) repeatedly in long-lived processes. Keeps environment/settings handling
inside the config layer.
"""

from functools import lru_cache  # noqa: E402

from src.application.rag_service import RAGService  # noqa: E402
from src.config.composition import build_rag_service  # noqa: E402


@lru_cache(maxsize=1)
def get_rag_service() -> RAGService:
    return build_rag_service()


def reset_rag_service() -> None:
    """Drop the cached service so the next call re-reads settings."""
    get_rag_service.cache_clear()


__all__ = [
    "get_rag_service",
    "reset_rag_service",
]
