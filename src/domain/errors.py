from __future__ import annotations

from typing import Any, Literal

ErrorSource = Literal["analysis", "merge", "generation", "llm", "system"]

RELEVANCE_ANALYSIS_FAILED = "RELEVANCE_ANALYSIS_FAILED"
CONTENT_MERGE_FAILED = "CONTENT_MERGE_FAILED"
RESPONSE_GENERATION_FAILED = "RESPONSE_GENERATION_FAILED"
APPEND_FAILED = "APPEND_FAILED"
INVALID_APPEND_REQUEST = "INVALID_APPEND_REQUEST"
INVALID_QUERY_REQUEST = "INVALID_QUERY_REQUEST"
LLM_RESPONSE_INVALID = "LLM_RESPONSE_INVALID"
CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class RAGError(Exception):
    """Pipeline-level failure carrying a code and the layer it came from."""

    def __init__(
        self, code: str, message: str, source: ErrorSource, details: Any | None = None
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.source = source
        self.details = details

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, object]:
        return {"code": self.code, "message": self.message, "source": self.source}


class ConfigurationError(RAGError):
    """Raised for invalid or missing configuration."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(CONFIGURATION_ERROR, message, "system", details)
