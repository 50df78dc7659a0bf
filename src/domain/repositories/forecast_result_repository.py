"""Forecast result repository interface."""

from abc import abstractmethod

from src.domain.entities.forecast_result import ForecastResult
from src.domain.repositories.base import BaseRepository


class ForecastResultRepository(BaseRepository[ForecastResult]):
    """Repository interface for forecast results."""

    @abstractmethod
    async def create_many(self, results: list[ForecastResult]) -> list[ForecastResult]:
        """Persist forecast results in one write.

        Args:
            results: Results with run_id set

        Returns:
            Persisted results with IDs, in input order
        """
        pass

    @abstractmethod
    async def get_by_run_id(
        self, run_id: int, result_type: str | None = None
    ) -> list[ForecastResult]:
        """Get a run's results ordered by predicted vote share, descending.

        Args:
            run_id: Forecast run ID
            result_type: Only return results of this type if given
        """
        pass
