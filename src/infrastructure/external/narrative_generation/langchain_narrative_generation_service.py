"""LangChain implementation of the narrative generation service.

The chat model is passed in by the caller (the DI container builds a Gemini
model from settings); tests inject a fake model.
"""

from typing import TYPE_CHECKING

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from src.common.logging import get_logger
from src.infrastructure.exceptions import LLMError


if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from src.infrastructure.config.settings import Settings


logger = get_logger(__name__)


def create_chat_model(settings: "Settings") -> "BaseChatModel | None":
    """Build the Gemini chat model used for narratives.

    Returns:
        The chat model, or None when GOOGLE_API_KEY is not configured
    """
    if not settings.google_api_key:
        logger.warning(
            "GOOGLE_API_KEY is not set, narratives will use the fallback text"
        )
        return None

    # Imported lazily so the module loads without the Gemini SDK
    from langchain_google_genai import ChatGoogleGenerativeAI

    return ChatGoogleGenerativeAI(
        model=settings.narrative_llm_model,
        temperature=settings.narrative_llm_temperature,
        max_output_tokens=settings.narrative_max_tokens,
        google_api_key=settings.google_api_key,
    )


class LangChainNarrativeGenerationService:
    """Generates narrative text with a LangChain chat model."""

    def __init__(self, llm: "BaseChatModel | None") -> None:
        self._llm = llm

    async def generate_narrative(
        self, prompt: str, system_prompt: str | None = None
    ) -> str:
        """Send the prompt to the chat model.

        Args:
            prompt: User prompt
            system_prompt: Optional system instruction

        Returns:
            Response text (may be empty)

        Raises:
            LLMError: If the model call fails
        """
        if self._llm is None:
            raise LLMError("No chat model configured for narrative generation")

        messages: list[BaseMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))

        try:
            response = await self._llm.ainvoke(messages)
        except Exception as e:
            logger.error("Narrative LLM call failed", error=str(e))
            raise LLMError("Narrative generation failed", {"error": str(e)}) from e

        content = response.content
        if isinstance(content, list):
            # Multi-part responses: keep the text parts
            content = "".join(
                part if isinstance(part, str) else str(part.get("text", ""))
                for part in content
            )
        return content
