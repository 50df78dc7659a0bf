"""Tests for ForecastRunRepositoryImpl."""

from datetime import datetime
from typing import Any
from unittest.mock import MagicMock

import pytest

from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError

from src.domain.entities.forecast_run import ForecastRun, ForecastRunStatus
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.forecast_run_repository_impl import (
    ForecastRunRepositoryImpl,
)
from tests.fixtures.row_factories import make_result


def _row(**overrides: Any) -> dict[str, Any]:
    row = {
        "id": 1,
        "name": "Governador SP",
        "description": None,
        "target_year": 2026,
        "target_election_type": None,
        "target_position": "Governador",
        "target_state": "SP",
        "historical_years_used": None,
        "model_parameters": None,
        "narrative": None,
        "status": "pending",
        "started_at": None,
        "completed_at": None,
        "total_simulations": None,
        "created_by": "analyst-1",
        "created_at": datetime(2026, 1, 1),
    }
    row.update(overrides)
    return row


class TestForecastRunRepositoryImpl:
    """Test cases for ForecastRunRepositoryImpl."""

    @pytest.fixture
    def repository(self, mock_session: MagicMock) -> ForecastRunRepositoryImpl:
        return ForecastRunRepositoryImpl(mock_session)

    @pytest.mark.asyncio
    async def test_create(
        self, repository: ForecastRunRepositoryImpl, mock_session: MagicMock
    ) -> None:
        mock_session.execute.return_value = make_result(first=_row())

        run = await repository.create(
            ForecastRun(
                name="Governador SP",
                target_year=2026,
                target_position="Governador",
                target_state="SP",
                created_by="analyst-1",
            )
        )

        assert run.id == 1
        assert run.status is ForecastRunStatus.PENDING
        assert run.target_state == "SP"
        params = mock_session.execute.await_args.args[1]
        assert params["status"] == "pending"
        assert params["created_by"] == "analyst-1"
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_database_error(
        self, repository: ForecastRunRepositoryImpl, mock_session: MagicMock
    ) -> None:
        mock_session.execute.side_effect = SQLAlchemyError("boom")

        with pytest.raises(DatabaseError):
            await repository.create(ForecastRun(name="r", target_year=2026))

        mock_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_by_id(
        self, repository: ForecastRunRepositoryImpl, mock_session: MagicMock
    ) -> None:
        mock_session.execute.return_value = make_result(
            first=_row(
                status="completed",
                historical_years_used=[2022, 2018],
                model_parameters={"monte_carlo_iterations": 100},
                narrative="Texto",
            )
        )

        run = await repository.get_by_id(1)

        assert run is not None
        assert run.status is ForecastRunStatus.COMPLETED
        assert run.historical_years_used == [2022, 2018]
        assert run.model_parameters == {"monte_carlo_iterations": 100}
        assert run.narrative == "Texto"

    @pytest.mark.asyncio
    async def test_get_by_id_not_found(
        self, repository: ForecastRunRepositoryImpl, mock_session: MagicMock
    ) -> None:
        mock_session.execute.return_value = make_result()

        assert await repository.get_by_id(404) is None

    @pytest.mark.asyncio
    async def test_update_fields(
        self, repository: ForecastRunRepositoryImpl, mock_session: MagicMock
    ) -> None:
        started = datetime(2026, 1, 1, 12, 0)
        mock_session.execute.return_value = make_result(
            first=_row(status="running", started_at=started)
        )

        run = await repository.update_fields(1, status="running", started_at=started)

        assert run is not None
        assert run.status is ForecastRunStatus.RUNNING
        query, params = mock_session.execute.await_args.args
        assert "status = :status" in str(query)
        assert "started_at = :started_at" in str(query)
        assert params == {"id": 1, "status": "running", "started_at": started}
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_json_columns(
        self, repository: ForecastRunRepositoryImpl, mock_session: MagicMock
    ) -> None:
        mock_session.execute.return_value = make_result(
            first=_row(model_parameters={"trend_weight": 0.4})
        )

        await repository.update_fields(1, model_parameters={"trend_weight": 0.4})

        query = mock_session.execute.await_args.args[0]
        assert isinstance(query._bindparams["model_parameters"].type, JSONB)

    @pytest.mark.asyncio
    async def test_update_unknown_column(
        self, repository: ForecastRunRepositoryImpl, mock_session: MagicMock
    ) -> None:
        with pytest.raises(ValueError, match="Cannot update"):
            await repository.update_fields(1, target_year=2030)

        mock_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_missing_run(
        self, repository: ForecastRunRepositoryImpl, mock_session: MagicMock
    ) -> None:
        mock_session.execute.return_value = make_result()

        assert await repository.update_fields(9, status="failed") is None

    @pytest.mark.asyncio
    async def test_update_database_error(
        self, repository: ForecastRunRepositoryImpl, mock_session: MagicMock
    ) -> None:
        mock_session.execute.side_effect = SQLAlchemyError("boom")

        with pytest.raises(DatabaseError, match="Failed to update forecast run"):
            await repository.update_fields(1, status="failed")

        mock_session.rollback.assert_awaited_once()
