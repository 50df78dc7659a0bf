"""Tests for RunScenarioForecastUseCase."""

from unittest.mock import AsyncMock

import pytest

from src.application.services.forecast_narrative_service import (
    ForecastNarrativeService,
)
from src.application.usecases.run_scenario_forecast_usecase import (
    RunScenarioForecastUseCase,
    scenario_historical_years,
    scenario_parameters,
)
from src.domain.entities.forecast_run import ForecastRun
from src.domain.exceptions import InsufficientHistoricalDataException
from src.domain.repositories.forecast_result_repository import (
    ForecastResultRepository,
)
from src.domain.repositories.forecast_run_repository import ForecastRunRepository
from src.domain.repositories.historical_vote_repository import (
    HistoricalVoteRepository,
)
from src.domain.repositories.swing_region_repository import SwingRegionRepository
from src.domain.services.interfaces.narrative_generation_service import (
    INarrativeGenerationService,
)
from src.domain.services.monte_carlo_simulator import MonteCarloSimulator
from src.domain.value_objects.forecast_scenario import (
    ExternalFactor,
    ForecastScenario,
    PartyAdjustment,
    PollingData,
)
from src.domain.value_objects.historical_data_point import HistoricalDataPoint


def _historical_data() -> list[HistoricalDataPoint]:
    rows = []
    for year, votes in [
        (2014, {"PA": 4000, "PB": 5000, "PC": 1000}),
        (2018, {"PA": 4500, "PB": 4500, "PC": 1000}),
        (2022, {"PA": 5000, "PB": 4200, "PC": 800}),
    ]:
        for party, total in votes.items():
            rows.append(HistoricalDataPoint(year, party, total, "MG", "Governador"))
    return rows


class TestScenarioHelpers:
    def test_historical_years(self) -> None:
        assert scenario_historical_years(2022) == [2022, 2018, 2014]

    def test_historical_years_from_2002(self) -> None:
        assert scenario_historical_years(2006) == [2006, 2002]

    def test_parameter_defaults(self) -> None:
        params = scenario_parameters(
            ForecastScenario(id=1, name="s", base_year=2022, target_year=2026)
        )

        assert params.monte_carlo_iterations == 10000
        assert params.confidence_level == 0.95
        assert params.sentiment_weight == 0.20
        assert params.trend_weight == 0.50
        assert params.volatility_multiplier == 1.2

    def test_parameter_overrides(self) -> None:
        params = scenario_parameters(
            ForecastScenario(
                id=1,
                name="s",
                base_year=2022,
                target_year=2026,
                monte_carlo_iterations=300,
                confidence_level=0.8,
                volatility_multiplier=2.0,
                historical_weight=0.6,
                adjustment_weight=0.3,
            )
        )

        assert params.monte_carlo_iterations == 300
        assert params.confidence_level == 0.8
        assert params.volatility_multiplier == 2.0
        assert params.trend_weight == 0.6
        assert params.sentiment_weight == 0.3


class TestRunScenarioForecastUseCase:
    @pytest.fixture()
    def mock_repos(self) -> dict[str, AsyncMock]:
        repos = {
            "run": AsyncMock(spec=ForecastRunRepository),
            "result": AsyncMock(spec=ForecastResultRepository),
            "swing": AsyncMock(spec=SwingRegionRepository),
            "historical": AsyncMock(spec=HistoricalVoteRepository),
        }
        repos["run"].get_by_id.return_value = ForecastRun(
            name="Cenário", target_year=2026, id=3
        )
        repos["result"].create_many.side_effect = lambda items: items
        repos["swing"].create_many.side_effect = lambda items: items
        repos["historical"].get_historical_votes_by_party.return_value = (
            _historical_data()
        )
        return repos

    @pytest.fixture()
    def mock_llm(self) -> AsyncMock:
        llm = AsyncMock(spec=INarrativeGenerationService)
        llm.generate_narrative.return_value = ""
        return llm

    @pytest.fixture()
    def use_case(
        self, mock_repos: dict[str, AsyncMock], mock_llm: AsyncMock
    ) -> RunScenarioForecastUseCase:
        return RunScenarioForecastUseCase(
            forecast_run_repository=mock_repos["run"],
            forecast_result_repository=mock_repos["result"],
            swing_region_repository=mock_repos["swing"],
            historical_vote_repository=mock_repos["historical"],
            narrative_service=ForecastNarrativeService(mock_llm),
            simulator=MonteCarloSimulator(rng=11),
        )

    @pytest.fixture()
    def scenario(self) -> ForecastScenario:
        return ForecastScenario(
            id=9,
            name="Pesquisa favorável",
            base_year=2022,
            target_year=2026,
            position="Governador",
            polling_data=(PollingData(party="PB", poll_percent=48.0),),
            party_adjustments={"PC": PartyAdjustment(vote_share_adjust=1.0)},
            external_factors=(
                ExternalFactor(factor="Economia", impact="negative", magnitude=5),
            ),
            monte_carlo_iterations=2000,
        )

    @pytest.mark.asyncio
    async def test_shares_are_normalised(
        self,
        use_case: RunScenarioForecastUseCase,
        mock_repos: dict[str, AsyncMock],
        scenario: ForecastScenario,
    ) -> None:
        output = await use_case.execute(3, scenario)

        shares = [r.predicted_vote_share for r in output.party_results]
        assert sum(shares) == pytest.approx(100.0, abs=0.01)
        assert shares == sorted(shares, reverse=True)
        assert all(r.run_id == 3 for r in output.party_results)
        mock_repos["historical"].get_historical_votes_by_party.assert_awaited_once_with(
            years=[2022, 2018, 2014], position="Governador", state=None
        )

    @pytest.mark.asyncio
    async def test_run_is_completed_with_scenario_parameters(
        self,
        use_case: RunScenarioForecastUseCase,
        mock_repos: dict[str, AsyncMock],
        scenario: ForecastScenario,
    ) -> None:
        await use_case.execute(3, scenario)

        calls = mock_repos["run"].update_fields.call_args_list
        assert [c.kwargs["status"] for c in calls] == ["running", "completed"]
        completed = calls[-1].kwargs
        assert completed["total_simulations"] == 2000
        assert completed["historical_years_used"] == [2022, 2018, 2014]
        params = completed["model_parameters"]
        assert params["scenario_id"] == 9
        assert params["scenario_name"] == "Pesquisa favorável"
        # 1.2 - 5 / 100 * 0.1
        assert params["volatility_multiplier"] == pytest.approx(1.195)

    @pytest.mark.asyncio
    async def test_empty_narrative_uses_scenario_fallback(
        self, use_case: RunScenarioForecastUseCase, scenario: ForecastScenario
    ) -> None:
        output = await use_case.execute(3, scenario)

        assert output.narrative.startswith(
            'Previsão para 2026 baseada no cenário "Pesquisa favorável". Top 3 partidos:'
        )

    @pytest.mark.asyncio
    async def test_state_scenario_skips_swing_regions(
        self,
        use_case: RunScenarioForecastUseCase,
        mock_repos: dict[str, AsyncMock],
    ) -> None:
        scenario = ForecastScenario(
            id=1,
            name="MG",
            base_year=2022,
            target_year=2026,
            state="MG",
            monte_carlo_iterations=500,
        )

        output = await use_case.execute(3, scenario)

        assert output.swing_regions == []
        mock_repos["swing"].create_many.assert_awaited_once_with([])

    @pytest.mark.asyncio
    async def test_no_historical_data(
        self,
        use_case: RunScenarioForecastUseCase,
        mock_repos: dict[str, AsyncMock],
        scenario: ForecastScenario,
    ) -> None:
        mock_repos["historical"].get_historical_votes_by_party.return_value = []

        with pytest.raises(InsufficientHistoricalDataException):
            await use_case.execute(3, scenario)

        calls = mock_repos["run"].update_fields.call_args_list
        assert [c.kwargs["status"] for c in calls] == ["running", "failed"]
