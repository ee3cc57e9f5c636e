from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Provider = Literal["dummy", "openai"]


def _coerce_bool(v: object) -> object:
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("1", "true", "yes", "on"):  # common truthy strings
            return True
        if s in ("0", "false", "no", "off", ""):  # common falsy/empty strings
            return False
    return v


class RAGSettings(BaseSettings):
    """Pipeline knobs, read from RAG_* environment variables or .env."""

    llm_model: str = Field("gpt-4.1", alias="RAG_LLM_MODEL")
    relevance_threshold: float = Field(0.3, ge=0.0, le=1.0, alias="RAG_RELEVANCE_THRESHOLD")
    max_context_length: int = Field(4000, ge=0, alias="RAG_MAX_CONTEXT_LENGTH")
    batch_size: int = Field(10, ge=1, alias="RAG_BATCH_SIZE")
    cache_enabled: bool = Field(False, alias="RAG_CACHE_ENABLED")
    temperature: float = Field(0.1, ge=0.0, le=2.0, alias="RAG_TEMPERATURE")
    max_results: int = Field(20, ge=0, alias="RAG_MAX_RESULTS")
    pacing_delay_ms: int = Field(100, ge=0, alias="RAG_PACING_DELAY_MS")
    # 0 disables the per-call timeout
    call_timeout_s: float = Field(30.0, ge=0.0, alias="RAG_CALL_TIMEOUT_S")
    # 0 means unbounded
    cache_capacity: int = Field(256, ge=0, alias="RAG_CACHE_CAPACITY")
    cache_ttl_s: float | None = Field(None, gt=0.0, alias="RAG_CACHE_TTL_S")
    corpus_file: Path = Field(Path("data/corpus.json"), alias="RAG_CORPUS_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Accept tolerant boolean env values and trim whitespace (e.g., "false ", "0 ")
    @field_validator("cache_enabled", mode="before")
    @classmethod
    def _cache_bool(cls, v):  # type: ignore[no-untyped-def]
        return _coerce_bool(v)

    @field_validator("cache_ttl_s", mode="before")
    @classmethod
    def _blank_ttl(cls, v):  # type: ignore[no-untyped-def]
        if isinstance(v, str) and not v.strip():
            return None
        return v


class LLMSettings(BaseSettings):
    provider: Provider = Field("dummy", alias="LLM_PROVIDER")
    # Overrides RAG_LLM_MODEL when set
    openai_model: str | None = Field(None, alias="OPENAI_MODEL")
    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    openai_base_url: str | None = Field(None, alias="OPENAI_BASE_URL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("provider", mode="before")
    @classmethod
    def _normalize_provider(cls, v):  # type: ignore[no-untyped-def]
        if isinstance(v, str):
            return v.strip().lower() or "dummy"
        return v


class AppSettings(BaseModel):
    rag: RAGSettings = Field(default_factory=RAGSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
