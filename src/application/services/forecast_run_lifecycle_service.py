"""Status transitions of forecast runs."""

from datetime import datetime
from typing import Any

from src.common.logging import get_logger
from src.domain.entities.forecast_run import ForecastRun, ForecastRunStatus
from src.domain.exceptions import (
    ForecastRunNotFoundException,
    InvalidForecastRunStateException,
)
from src.domain.repositories.forecast_run_repository import ForecastRunRepository


logger = get_logger(__name__)


class ForecastRunLifecycleService:
    """Moves a forecast run through pending -> running -> completed | failed."""

    def __init__(self, forecast_run_repository: ForecastRunRepository) -> None:
        self._run_repo = forecast_run_repository

    async def start(self, run_id: int) -> ForecastRun:
        """Mark a pending run as running.

        Raises:
            ForecastRunNotFoundException: If the run does not exist
            InvalidForecastRunStateException: If the run is not pending
        """
        run = await self._run_repo.get_by_id(run_id)
        if run is None:
            raise ForecastRunNotFoundException(run_id)
        if not run.status.can_transition_to(ForecastRunStatus.RUNNING):
            raise InvalidForecastRunStateException(
                run_id, run.status.value, ForecastRunStatus.RUNNING.value
            )

        started_at = datetime.now()
        await self._run_repo.update_fields(
            run_id, status=ForecastRunStatus.RUNNING.value, started_at=started_at
        )
        run.status = ForecastRunStatus.RUNNING
        run.started_at = started_at
        logger.info("Forecast run started", run_id=run_id)
        return run

    async def fail(self, run_id: int) -> None:
        await self._run_repo.update_fields(
            run_id,
            status=ForecastRunStatus.FAILED.value,
            completed_at=datetime.now(),
        )
        logger.warning("Forecast run failed", run_id=run_id)

    async def fail_quietly(self, run_id: int) -> None:
        """Mark the run failed, logging instead of raising on store errors.

        Used while another exception is already propagating.
        """
        try:
            await self.fail(run_id)
        except Exception:
            logger.exception("Could not mark forecast run as failed", run_id=run_id)

    async def complete(self, run_id: int, **fields: Any) -> None:
        """Mark the run completed, storing extra run columns alongside."""
        await self._run_repo.update_fields(
            run_id,
            status=ForecastRunStatus.COMPLETED.value,
            completed_at=datetime.now(),
            **fields,
        )
        logger.info("Forecast run completed", run_id=run_id)
