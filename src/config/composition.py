from __future__ import annotations

"""Composition helpers building the RAG service with configured adapters.

Keeps environment/settings handling out of the interface layer.
"""

from src.application.ports.document_store_port import DocumentStorePort  # noqa: E402
from src.application.rag_service import RAGService  # noqa: E402
from src.config.llm import build_model  # noqa: E402
from src.core.settings import AppSettings, RAGSettings  # noqa: E402
from src.domain.config import RAGConfig  # noqa: E402
from src.infrastructure.store.memory_store import JsonFileDocumentStore  # noqa: E402


def rag_config_from_settings(s: RAGSettings) -> RAGConfig:
    return RAGConfig(
        llm_model=str(s.llm_model),
        relevance_threshold=float(s.relevance_threshold),
        max_context_length=int(s.max_context_length),
        batch_size=int(s.batch_size),
        cache_enabled=bool(s.cache_enabled),
        temperature=float(s.temperature),
        max_results=int(s.max_results),
        pacing_delay_s=int(s.pacing_delay_ms) / 1000.0,
        call_timeout_s=float(s.call_timeout_s) or None,
        cache_capacity=int(s.cache_capacity) or None,
        cache_ttl_s=s.cache_ttl_s,
    )


def build_document_store(app: AppSettings | None = None) -> DocumentStorePort:
    app = app or AppSettings()
    return JsonFileDocumentStore(app.rag.corpus_file)


def build_rag_service(
    app: AppSettings | None = None, store: DocumentStorePort | None = None
) -> RAGService:
    app = app or AppSettings()
    cfg = rag_config_from_settings(app.rag)
    model = build_model(app.llm, cfg)
    return RAGService.create(model, store or build_document_store(app), cfg)


__all__ = ["rag_config_from_settings", "build_document_store", "build_rag_service"]
