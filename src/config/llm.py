from __future__ import annotations

"""Composition: construct GenerativeModelPort implementations from settings.

Defaults to DummyModel to keep tests/offline flows working. With LLM_PROVIDER=openai,
builds an OpenAIChatModel from OPENAI_* settings.
"""

from src.application.ports.llm_port import GenerativeModelPort  # noqa: E402
from src.core.settings import LLMSettings  # noqa: E402
from src.domain.config import RAGConfig  # noqa: E402
from src.domain.errors import ConfigurationError  # noqa: E402
from src.infrastructure.llm.providers import DummyModel, OpenAIChatModel  # noqa: E402


def build_model(settings: LLMSettings | None = None, config: RAGConfig | None = None) -> GenerativeModelPort:
    s = settings or LLMSettings()
    cfg = config or RAGConfig()
    if s.provider == "openai":
        if not s.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is required when LLM_PROVIDER=openai")
        return OpenAIChatModel(
            model=str(s.openai_model or cfg.llm_model),
            api_key=s.openai_api_key,
            base_url=s.openai_base_url,
            temperature=cfg.temperature,
            timeout_s=cfg.call_timeout_s,
        )

    # default
    return DummyModel()


__all__ = ["build_model"]
