"""Scenario forecast use case.

Like the regular forecast, but the latest shares are first adjusted by the
scenario's polls and manual adjustments, external factors widen or narrow the
simulation spread, and predicted shares are normalised to sum to 100.
"""

from src.application.dtos.forecast_dto import ForecastOutputDto
from src.application.services.forecast_narrative_service import (
    ForecastNarrativeService,
)
from src.application.services.forecast_run_lifecycle_service import (
    ForecastRunLifecycleService,
)
from src.common.logging import get_logger
from src.domain.constants import EARLIEST_HISTORICAL_YEAR, ELECTION_CYCLE_YEARS
from src.domain.entities.forecast_result import ForecastResult
from src.domain.entities.swing_region import SwingRegion
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
from src.domain.services.scenario_adjuster import ScenarioAdjuster
from src.domain.services.swing_region_detector import SwingRegionDetector
from src.domain.services.trend_analyzer import TrendAnalyzer
from src.domain.value_objects.forecast_scenario import ForecastScenario
from src.domain.value_objects.model_parameters import ModelParameters
from src.domain.value_objects.monte_carlo_result import MonteCarloResult
from src.domain.value_objects.party_trend import PartyTrendData


logger = get_logger(__name__)

SCENARIO_SENTIMENT_WEIGHT = 0.20
SCENARIO_TREND_WEIGHT = 0.50


def scenario_historical_years(base_year: int) -> list[int]:
    """The base year and the two elections before it, from 2002 on."""
    years = [base_year - ELECTION_CYCLE_YEARS * i for i in range(3)]
    return [y for y in years if y >= EARLIEST_HISTORICAL_YEAR]


def scenario_parameters(scenario: ForecastScenario) -> ModelParameters:
    """Model parameters for a scenario, falling back to the defaults."""
    defaults = ModelParameters()
    return ModelParameters(
        monte_carlo_iterations=scenario.monte_carlo_iterations
        or defaults.monte_carlo_iterations,
        confidence_level=scenario.confidence_level or defaults.confidence_level,
        historical_weight_decay=defaults.historical_weight_decay,
        sentiment_weight=scenario.adjustment_weight or SCENARIO_SENTIMENT_WEIGHT,
        trend_weight=scenario.historical_weight or SCENARIO_TREND_WEIGHT,
        volatility_multiplier=scenario.volatility_multiplier
        or defaults.volatility_multiplier,
    )


class RunScenarioForecastUseCase:
    """Runs a what-if scenario forecast for an existing pending run."""

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
        self._adjuster = ScenarioAdjuster()

    async def execute(
        self, run_id: int, scenario: ForecastScenario
    ) -> ForecastOutputDto:
        """Run the scenario forecast and persist its results.

        Raises:
            ForecastRunNotFoundException: If the run does not exist
            InvalidForecastRunStateException: If the run is not pending
            InsufficientHistoricalDataException: If no historical rows match
        """
        await self._lifecycle.start(run_id)
        try:
            return await self._run(run_id, scenario)
        except InsufficientHistoricalDataException:
            raise
        except Exception:
            await self._lifecycle.fail_quietly(run_id)
            raise

    async def _run(self, run_id: int, scenario: ForecastScenario) -> ForecastOutputDto:
        parameters = scenario_parameters(scenario)
        years = scenario_historical_years(scenario.base_year)

        historical_data = await self._historical_repo.get_historical_votes_by_party(
            years=years, position=scenario.position, state=scenario.state
        )
        if not historical_data:
            await self._lifecycle.fail(run_id)
            raise InsufficientHistoricalDataException(
                years, scenario.position, scenario.state
            )

        base_trends = self._trend_analyzer.analyze(historical_data)
        trends = self._adjuster.apply_polling(
            base_trends, scenario.polling_data, scenario.polling_weight
        )
        trends = self._adjuster.apply_party_adjustments(
            trends, scenario.party_adjustments
        )
        volatility_multiplier = self._adjuster.adjust_volatility_multiplier(
            parameters.volatility_multiplier, scenario.external_factors
        )

        party_results = self._forecast_parties(
            trends, parameters, volatility_multiplier
        )

        swing_regions: list[SwingRegion] = []
        if not scenario.state:
            swing_regions = SwingRegionDetector(parameters).detect(
                historical_data, base_trends
            )

        narrative = await self._narrative_service.generate_scenario_narrative(
            scenario, party_results
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
            historical_years_used=years,
            model_parameters={
                **parameters.to_dict(),
                "volatility_multiplier": volatility_multiplier,
                "scenario_id": scenario.id,
                "scenario_name": scenario.name,
            },
            narrative=narrative,
        )
        logger.info(
            "Scenario forecast completed",
            run_id=run_id,
            scenario_id=scenario.id,
            parties=len(saved_results),
        )
        return ForecastOutputDto(
            party_results=saved_results,
            swing_regions=saved_regions,
            narrative=narrative,
        )

    def _forecast_parties(
        self,
        trends: dict[str, PartyTrendData],
        parameters: ModelParameters,
        volatility_multiplier: float,
    ) -> list[ForecastResult]:
        """Simulate each party one cycle ahead and normalise to 100%."""
        simulations: list[tuple[PartyTrendData, MonteCarloResult]] = []
        for trend in trends.values():
            latest = trend.latest
            if latest is None:
                continue
            simulation = self._simulator.spawn().simulate(
                latest.share,
                trend.volatility * volatility_multiplier,
                trend.trend_slope,
                parameters.monte_carlo_iterations,
                parameters.confidence_level,
            )
            simulations.append((trend, simulation))

        total_share = sum(s.mean for _, s in simulations)
        scale = 100 / total_share if total_share > 0 else 1.0

        generator = ForecastGenerator(parameters)
        results = [
            generator.build_result(trend, simulation, scale=scale)
            for trend, simulation in simulations
        ]
        results.sort(key=lambda r: r.predicted_vote_share, reverse=True)
        return results
