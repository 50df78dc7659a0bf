"""Forecast run use case.

Processing flow:
    1. pending -> running
    2. Fetch historical votes for the year window
       (empty -> failed + InsufficientHistoricalDataException)
    3. Trend analysis -> party forecasts -> swing regions
    4. Narrative summary (fallback text on failure)
    5. Persist results and swing regions
    6. running -> completed
"""

from src.application.dtos.forecast_dto import ForecastOutputDto, RunForecastInputDto
from src.application.services.forecast_narrative_service import (
    ForecastNarrativeService,
)
from src.application.services.forecast_run_lifecycle_service import (
    ForecastRunLifecycleService,
)
from src.common.logging import get_logger
from src.domain.constants import EARLIEST_HISTORICAL_YEAR, ELECTION_CYCLE_YEARS
from src.domain.exceptions import InsufficientHistoricalDataException
from src.domain.repositories.forecast_result_repository import (
    ForecastResultRepository,
)
from src.domain.repositories.forecast_run_repository import ForecastRunRepository
from src.domain.repositories.historical_vote_repository import (
    HistoricalVoteRepository,
)
from src.domain.repositories.swing_region_repository import SwingRegionRepository
from src.domain.services.forecast_generator import ForecastGenerator
from src.domain.services.monte_carlo_simulator import MonteCarloSimulator
from src.domain.services.swing_region_detector import SwingRegionDetector
from src.domain.services.trend_analyzer import TrendAnalyzer
from src.domain.value_objects.model_parameters import ModelParameters


logger = get_logger(__name__)

HISTORICAL_CYCLES = 3


def default_historical_years(
    target_year: int, cycles: int = HISTORICAL_CYCLES
) -> list[int]:
    """Previous election years before ``target_year``, most recent first.

    e.g. 2026 -> [2022, 2018, 2014]. Years before 2002 are dropped.
    """
    years = [target_year - ELECTION_CYCLE_YEARS * i for i in range(1, cycles + 1)]
    return [y for y in years if y >= EARLIEST_HISTORICAL_YEAR]


class RunForecastUseCase:
    """Runs the forecasting pipeline for an existing pending run."""

    def __init__(
        self,
        forecast_run_repository: ForecastRunRepository,
        forecast_result_repository: ForecastResultRepository,
        swing_region_repository: SwingRegionRepository,
        historical_vote_repository: HistoricalVoteRepository,
        narrative_service: ForecastNarrativeService,
        simulator: MonteCarloSimulator | None = None,
    ) -> None:
        self._result_repo = forecast_result_repository
        self._swing_repo = swing_region_repository
        self._historical_repo = historical_vote_repository
        self._narrative_service = narrative_service
        self._simulator = simulator or MonteCarloSimulator()
        self._lifecycle = ForecastRunLifecycleService(forecast_run_repository)
        self._trend_analyzer = TrendAnalyzer()

    async def execute(
        self, run_id: int, input_dto: RunForecastInputDto
    ) -> ForecastOutputDto:
        """Run the forecast and persist its results.

        Args:
            run_id: ID of a pending forecast run
            input_dto: Target year, scope and parameter overrides

        Returns:
            Persisted party results, swing regions and narrative

        Raises:
            ForecastRunNotFoundException: If the run does not exist
            InvalidForecastRunStateException: If the run is not pending
            InsufficientHistoricalDataException: If no historical rows match
        """
        await self._lifecycle.start(run_id)
        try:
            return await self._run(run_id, input_dto)
        except InsufficientHistoricalDataException:
            raise
        except Exception:
            await self._lifecycle.fail_quietly(run_id)
            raise

    async def _run(
        self, run_id: int, input_dto: RunForecastInputDto
    ) -> ForecastOutputDto:
        parameters = ModelParameters().with_overrides(input_dto.model_parameters)
        historical_years = input_dto.historical_years or default_historical_years(
            input_dto.target_year
        )

        historical_data = await self._historical_repo.get_historical_votes_by_party(
            years=historical_years,
            position=input_dto.target_position,
            state=input_dto.target_state,
        )
        if not historical_data:
            logger.error(
                "No historical data for forecast",
                run_id=run_id,
                years=historical_years,
                position=input_dto.target_position,
                state=input_dto.target_state,
            )
            await self._lifecycle.fail(run_id)
            raise InsufficientHistoricalDataException(
                historical_years, input_dto.target_position, input_dto.target_state
            )

        logger.info(
            "Historical data loaded", run_id=run_id, rows=len(historical_data)
        )

        party_trends = self._trend_analyzer.analyze(historical_data)
        generator = ForecastGenerator(parameters, self._simulator.spawn())
        party_results = generator.generate(party_trends, input_dto.target_year)
        swing_regions = SwingRegionDetector(parameters).detect(
            historical_data, party_trends
        )
        logger.info(
            "Forecast computed",
            run_id=run_id,
            parties=len(party_results),
            swing_regions=len(swing_regions),
        )

        narrative = await self._narrative_service.generate_forecast_narrative(
            input_dto.target_year,
            party_results,
            swing_regions,
            input_dto.target_position,
            input_dto.target_state,
        )

        for result in party_results:
            result.run_id = run_id
        for region in swing_regions:
            region.run_id = run_id
        saved_results = await self._result_repo.create_many(party_results)
        saved_regions = await self._swing_repo.create_many(swing_regions)

        await self._lifecycle.complete(
            run_id,
            total_simulations=parameters.monte_carlo_iterations,
            historical_years_used=historical_years,
            model_parameters=parameters.to_dict(),
            narrative=narrative,
        )

        return ForecastOutputDto(
            party_results=saved_results,
            swing_regions=saved_regions,
            narrative=narrative,
        )
