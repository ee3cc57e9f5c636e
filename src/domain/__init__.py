"""Domain layer: pure types and logic (no I/O, no external libs).

Keep this layer free of side-effects. Define entities and small pure helpers only.
"""

from .config import RAGConfig
from .context import ELLIPSIS, MIN_TRUNCATION_CHARS, assemble_context, budget_context
from .document import Corpus, CreateDocumentRequest, Document, DocumentUpdate
from .errors import ConfigurationError, RAGError
from .rag import (
    AppendRequest,
    AppendResult,
    GenerateResponseRequest,
    MergeRequest,
    RAGResponse,
    ResponseMetadata,
)
from .relevance import (
    AnalysisOptions,
    EffectiveOptions,
    RelevanceResult,
    ScoreOutcome,
    ScoreResult,
    chunk_list,
    rank_results,
)

__all__ = [
    "Document",
    "Corpus",
    "CreateDocumentRequest",
    "DocumentUpdate",
    "RAGConfig",
    "RAGError",
    "ConfigurationError",
    "ScoreResult",
    "ScoreOutcome",
    "RelevanceResult",
    "AnalysisOptions",
    "EffectiveOptions",
    "chunk_list",
    "rank_results",
    "budget_context",
    "assemble_context",
    "MIN_TRUNCATION_CHARS",
    "ELLIPSIS",
    "MergeRequest",
    "GenerateResponseRequest",
    "RAGResponse",
    "ResponseMetadata",
    "AppendRequest",
    "AppendResult",
]
