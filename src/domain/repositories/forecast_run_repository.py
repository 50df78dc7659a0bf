"""Forecast run repository interface."""

from abc import abstractmethod
from typing import Any

from src.domain.entities.forecast_run import ForecastRun
from src.domain.repositories.base import BaseRepository


class ForecastRunRepository(BaseRepository[ForecastRun]):
    """Repository interface for forecast runs."""

    @abstractmethod
    async def update_fields(self, run_id: int, **fields: Any) -> ForecastRun | None:
        """Update selected columns of a forecast run.

        Args:
            run_id: Forecast run ID
            **fields: Column name -> new value (status, started_at, ...)

        Returns:
            Updated run, None if the run does not exist
        """
        pass
