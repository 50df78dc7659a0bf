"""Narrative generation service interface — Domain layer."""

from typing import Protocol


class INarrativeGenerationService(Protocol):
    """Turns a forecast prompt into free-text analysis.

    Implementations may raise on transport or provider errors; callers are
    expected to fall back to a fixed text.
    """

    async def generate_narrative(
        self, prompt: str, system_prompt: str | None = None
    ) -> str:
        """Generate narrative text.

        Args:
            prompt: User prompt summarising the forecast
            system_prompt: Optional system instruction

        Returns:
            Generated text, possibly empty
        """
        ...
