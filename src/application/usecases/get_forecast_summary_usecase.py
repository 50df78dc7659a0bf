"""Forecast summary use case."""

from src.application.dtos.forecast_dto import ForecastSummaryOutputDto
from src.domain.entities.forecast_result import ForecastResult
from src.domain.repositories.forecast_result_repository import (
    ForecastResultRepository,
)
from src.domain.repositories.forecast_run_repository import ForecastRunRepository
from src.domain.repositories.swing_region_repository import SwingRegionRepository


class GetForecastSummaryUseCase:
    """Reads a run with its leading party forecasts and swing regions."""

    TOP_PARTIES_LIMIT = 10

    def __init__(
        self,
        forecast_run_repository: ForecastRunRepository,
        forecast_result_repository: ForecastResultRepository,
        swing_region_repository: SwingRegionRepository,
    ) -> None:
        self._run_repo = forecast_run_repository
        self._result_repo = forecast_result_repository
        self._swing_repo = swing_region_repository

    async def execute(self, run_id: int) -> ForecastSummaryOutputDto | None:
        """Return the summary of a run, or None if the run does not exist."""
        run = await self._run_repo.get_by_id(run_id)
        if run is None:
            return None

        results = await self._result_repo.get_by_run_id(
            run_id, result_type=ForecastResult.RESULT_TYPE_PARTY
        )
        swing_regions = await self._swing_repo.get_by_run_id(run_id)
        return ForecastSummaryOutputDto(
            run=run,
            top_parties=results[: self.TOP_PARTIES_LIMIT],
            swing_regions=swing_regions,
            narrative=run.narrative,
        )
