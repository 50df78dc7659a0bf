"""Infrastructure layer exceptions."""

from typing import Any


class InfrastructureException(Exception):
    """Base exception for the infrastructure layer."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DatabaseError(InfrastructureException):
    """A database operation failed."""


class LLMError(InfrastructureException):
    """The LLM provider call failed."""
