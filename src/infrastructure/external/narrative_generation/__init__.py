"""Narrative generation adapters."""

from src.infrastructure.external.narrative_generation.langchain_narrative_generation_service import (  # noqa: E501
    LangChainNarrativeGenerationService,
    create_chat_model,
)


__all__ = ["LangChainNarrativeGenerationService", "create_chat_model"]
