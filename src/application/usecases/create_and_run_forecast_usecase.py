"""Creates a forecast run and executes it in the background."""

import asyncio

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from src.application.dtos.forecast_dto import (
    CreateForecastRunInputDto,
    ForecastOutputDto,
    RunForecastInputDto,
)
from src.application.usecases.run_forecast_usecase import RunForecastUseCase
from src.common.logging import get_logger
from src.domain.entities.forecast_run import ForecastRun, ForecastRunStatus
from src.domain.repositories.forecast_run_repository import ForecastRunRepository


logger = get_logger(__name__)


class CreateAndRunForecastUseCase:
    """Creates a pending run and schedules it without waiting for it.

    The caller gets the pending run back immediately and polls its status by
    ID. Each background run enters its own ``run_forecast_scope``, which
    yields a RunForecastUseCase bound to a database session of its own, so
    concurrent runs and pollers never share a session. Scheduled tasks are
    referenced until they finish so the event loop does not drop them.
    """

    def __init__(
        self,
        forecast_run_repository: ForecastRunRepository,
        run_forecast_scope: Callable[
            [], AbstractAsyncContextManager[RunForecastUseCase]
        ],
    ) -> None:
        self._run_repo = forecast_run_repository
        self._run_forecast_scope = run_forecast_scope
        self._tasks: set[asyncio.Task[object]] = set()

    async def execute(self, input_dto: CreateForecastRunInputDto) -> ForecastRun:
        """Create the run and start it in the background.

        Must be called from a running event loop.

        Returns:
            The newly created run in ``pending`` status
        """
        run = await self._run_repo.create(
            ForecastRun(
                name=input_dto.name,
                description=input_dto.description,
                target_year=input_dto.target_year,
                target_position=input_dto.target_position,
                target_state=input_dto.target_state,
                target_election_type=input_dto.target_election_type,
                created_by=input_dto.created_by,
                status=ForecastRunStatus.PENDING,
            )
        )
        if run.id is None:
            raise RuntimeError("Forecast run was created without an ID")

        task = asyncio.create_task(
            self._execute_in_scope(run.id, input_dto.to_run_input()),
            name=f"forecast-run-{run.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        logger.info("Forecast run scheduled", run_id=run.id)
        return run

    async def _execute_in_scope(
        self, run_id: int, run_input: RunForecastInputDto
    ) -> ForecastOutputDto:
        async with self._run_forecast_scope() as run_forecast:
            return await run_forecast.execute(run_id, run_input)

    def _on_done(self, task: asyncio.Task[object]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Forecast task cancelled", task=task.get_name())
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Forecast task failed",
                task=task.get_name(),
                error=str(error),
                exc_info=error,
            )

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def wait_for_pending(self) -> None:
        """Wait until every scheduled run has finished (successfully or not)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
