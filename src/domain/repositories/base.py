"""Base repository interface."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from src.domain.entities.base import BaseEntity


T = TypeVar("T", bound=BaseEntity)


class BaseRepository(ABC, Generic[T]):
    """Generic repository interface for domain entities."""

    @abstractmethod
    async def get_by_id(self, entity_id: int) -> T | None:
        """Get entity by ID."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Create a new entity and return it with its ID."""
        pass
