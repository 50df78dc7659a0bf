"""Tests for CreateAndRunForecastUseCase."""

import asyncio

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from unittest.mock import AsyncMock

import pytest

from src.application.dtos.forecast_dto import (
    CreateForecastRunInputDto,
    ForecastOutputDto,
    RunForecastInputDto,
)
from src.application.usecases.create_and_run_forecast_usecase import (
    CreateAndRunForecastUseCase,
)
from src.application.usecases.run_forecast_usecase import RunForecastUseCase
from src.domain.entities.forecast_run import ForecastRun, ForecastRunStatus
from src.domain.exceptions import InsufficientHistoricalDataException
from src.domain.repositories.forecast_run_repository import ForecastRunRepository


class TestCreateAndRunForecastUseCase:
    @pytest.fixture()
    def mock_run_repo(self) -> AsyncMock:
        repo = AsyncMock(spec=ForecastRunRepository)

        async def create(run: ForecastRun) -> ForecastRun:
            run.id = 5
            return run

        repo.create.side_effect = create
        return repo

    @pytest.fixture()
    def mock_run_forecast(self) -> AsyncMock:
        usecase = AsyncMock(spec=RunForecastUseCase)
        usecase.execute.return_value = ForecastOutputDto(narrative="ok")
        return usecase

    @pytest.fixture()
    def scope_events(self) -> list[str]:
        return []

    @pytest.fixture()
    def run_forecast_scope(
        self, mock_run_forecast: AsyncMock, scope_events: list[str]
    ) -> Callable[[], AbstractAsyncContextManager[RunForecastUseCase]]:
        @asynccontextmanager
        async def scope() -> AsyncIterator[RunForecastUseCase]:
            scope_events.append("enter")
            try:
                yield mock_run_forecast
            finally:
                scope_events.append("exit")

        return scope

    @pytest.fixture()
    def use_case(
        self,
        mock_run_repo: AsyncMock,
        run_forecast_scope: Callable[
            [], AbstractAsyncContextManager[RunForecastUseCase]
        ],
    ) -> CreateAndRunForecastUseCase:
        return CreateAndRunForecastUseCase(mock_run_repo, run_forecast_scope)

    @pytest.fixture()
    def input_dto(self) -> CreateForecastRunInputDto:
        return CreateForecastRunInputDto(
            name="Presidente 2026",
            target_year=2026,
            target_position="Presidente",
            created_by="analyst-1",
            historical_years=[2018, 2022],
            model_parameters={"monte_carlo_iterations": 500},
        )

    @pytest.mark.asyncio
    async def test_returns_pending_run_immediately(
        self,
        use_case: CreateAndRunForecastUseCase,
        mock_run_repo: AsyncMock,
        input_dto: CreateForecastRunInputDto,
    ) -> None:
        run = await use_case.execute(input_dto)

        assert run.id == 5
        assert run.status is ForecastRunStatus.PENDING
        assert run.name == "Presidente 2026"
        assert run.target_position == "Presidente"
        assert run.created_by == "analyst-1"
        assert use_case.pending_tasks == 1
        mock_run_repo.create.assert_awaited_once()

        await use_case.wait_for_pending()

    @pytest.mark.asyncio
    async def test_background_task_runs_forecast(
        self,
        use_case: CreateAndRunForecastUseCase,
        mock_run_forecast: AsyncMock,
        input_dto: CreateForecastRunInputDto,
    ) -> None:
        await use_case.execute(input_dto)
        await use_case.wait_for_pending()
        # done callbacks run on the next loop iteration
        await asyncio.sleep(0)

        mock_run_forecast.execute.assert_awaited_once_with(
            5,
            RunForecastInputDto(
                target_year=2026,
                target_position="Presidente",
                target_state=None,
                historical_years=[2018, 2022],
                model_parameters={"monte_carlo_iterations": 500},
            ),
        )
        assert use_case.pending_tasks == 0

    @pytest.mark.asyncio
    async def test_background_failure_does_not_propagate(
        self,
        use_case: CreateAndRunForecastUseCase,
        mock_run_forecast: AsyncMock,
        input_dto: CreateForecastRunInputDto,
    ) -> None:
        mock_run_forecast.execute.side_effect = InsufficientHistoricalDataException(
            [2018, 2022], "Presidente", None
        )

        run = await use_case.execute(input_dto)
        await use_case.wait_for_pending()
        await asyncio.sleep(0)

        assert run.id == 5
        assert use_case.pending_tasks == 0

    @pytest.mark.asyncio
    async def test_each_run_uses_its_own_scope(
        self,
        use_case: CreateAndRunForecastUseCase,
        mock_run_forecast: AsyncMock,
        scope_events: list[str],
        input_dto: CreateForecastRunInputDto,
    ) -> None:
        await use_case.execute(input_dto)
        await use_case.execute(input_dto)
        await use_case.wait_for_pending()

        assert mock_run_forecast.execute.await_count == 2
        assert scope_events.count("enter") == 2
        assert scope_events.count("exit") == 2

    @pytest.mark.asyncio
    async def test_scope_is_closed_when_run_fails(
        self,
        use_case: CreateAndRunForecastUseCase,
        mock_run_forecast: AsyncMock,
        scope_events: list[str],
        input_dto: CreateForecastRunInputDto,
    ) -> None:
        mock_run_forecast.execute.side_effect = RuntimeError("boom")

        await use_case.execute(input_dto)
        await use_case.wait_for_pending()

        assert scope_events == ["enter", "exit"]

    @pytest.mark.asyncio
    async def test_wait_for_pending_without_tasks(
        self, use_case: CreateAndRunForecastUseCase
    ) -> None:
        await use_case.wait_for_pending()

        assert use_case.pending_tasks == 0

    @pytest.mark.asyncio
    async def test_run_without_id_raises(
        self,
        use_case: CreateAndRunForecastUseCase,
        mock_run_repo: AsyncMock,
        input_dto: CreateForecastRunInputDto,
    ) -> None:
        mock_run_repo.create.side_effect = lambda run: run

        with pytest.raises(RuntimeError):
            await use_case.execute(input_dto)

        assert use_case.pending_tasks == 0
