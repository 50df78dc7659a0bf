"""Swing region repository interface."""

from abc import abstractmethod

from src.domain.entities.swing_region import SwingRegion
from src.domain.repositories.base import BaseRepository


class SwingRegionRepository(BaseRepository[SwingRegion]):
    """Repository interface for swing regions."""

    @abstractmethod
    async def create_many(self, regions: list[SwingRegion]) -> list[SwingRegion]:
        """Persist swing regions in one write, returning them with IDs."""
        pass

    @abstractmethod
    async def get_by_run_id(self, run_id: int) -> list[SwingRegion]:
        """Get a run's swing regions ordered by volatility score, descending."""
        pass
