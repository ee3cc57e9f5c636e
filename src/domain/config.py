from __future__ import annotations

from dataclasses import dataclass

from src.domain.errors import ConfigurationError


@dataclass(frozen=True)
class RAGConfig:
    llm_model: str = "gpt-4.1"
    relevance_threshold: float = 0.3
    max_context_length: int = 4000
    batch_size: int = 10
    cache_enabled: bool = False
    temperature: float = 0.1
    max_results: int = 20
    # pause between scoring chunks, seconds
    pacing_delay_s: float = 0.1
    # per model call; None disables the bound
    call_timeout_s: float | None = 30.0
    cache_capacity: int | None = 256
    cache_ttl_s: float | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= float(self.relevance_threshold) <= 1.0:
            raise ConfigurationError("relevance_threshold must be within [0, 1]")
        if int(self.batch_size) < 1:
            raise ConfigurationError("batch_size must be at least 1")
        if int(self.max_results) < 0:
            raise ConfigurationError("max_results must not be negative")
        if int(self.max_context_length) < 0:
            raise ConfigurationError("max_context_length must not be negative")
        if float(self.pacing_delay_s) < 0:
            raise ConfigurationError("pacing_delay_s must not be negative")
        if self.call_timeout_s is not None and float(self.call_timeout_s) <= 0:
            raise ConfigurationError("call_timeout_s must be positive or None")
        if self.cache_capacity is not None and int(self.cache_capacity) < 1:
            raise ConfigurationError("cache_capacity must be at least 1 or None")
        if self.cache_ttl_s is not None and float(self.cache_ttl_s) <= 0:
            raise ConfigurationError("cache_ttl_s must be positive or None")
