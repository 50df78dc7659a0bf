"""Forecast run repository implementation using SQLAlchemy."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict
from sqlalchemy import bindparam, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.logging import get_logger
from src.domain.entities.forecast_run import ForecastRun
from src.domain.repositories.forecast_run_repository import ForecastRunRepository
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.base_repository_impl import (
    BaseRepositoryImpl,
    row_to_dict,
)


logger = get_logger(__name__)

JSON_COLUMNS = frozenset({"historical_years_used", "model_parameters"})
UPDATABLE_COLUMNS = frozenset(
    {
        "status",
        "started_at",
        "completed_at",
        "total_simulations",
        "historical_years_used",
        "model_parameters",
        "narrative",
        "description",
    }
)


class ForecastRunModel(PydanticBaseModel):
    """forecast_runs row."""

    model_config = ConfigDict(protected_namespaces=())

    id: int | None = None
    name: str
    description: str | None = None
    target_year: int
    target_election_type: str | None = None
    target_position: str | None = None
    target_state: str | None = None
    historical_years_used: list[int] | None = None
    model_parameters: dict[str, Any] | None = None
    narrative: str | None = None
    status: str = "pending"
    started_at: datetime | None = None
    completed_at: datetime | None = None
    total_simulations: int | None = None
    created_by: str | None = None
    created_at: datetime | None = None


class ForecastRunRepositoryImpl(
    BaseRepositoryImpl[ForecastRun], ForecastRunRepository
):
    """Forecast run repository implementation using SQLAlchemy."""

    table_name = "forecast_runs"

    def __init__(self, session: AsyncSession):
        super().__init__(
            session=session,
            model_class=ForecastRunModel,
        )

    async def create(self, entity: ForecastRun) -> ForecastRun:
        """Insert a forecast run.

        Args:
            entity: Run to create (usually in pending status)

        Returns:
            Created run with ID
        """
        try:
            query = text("""
                INSERT INTO forecast_runs (
                    name, description, target_year, target_election_type,
                    target_position, target_state, status, created_by, created_at
                )
                VALUES (
                    :name, :description, :target_year, :target_election_type,
                    :target_position, :target_state, :status, :created_by, :created_at
                )
                RETURNING *
            """)
            params = {
                "name": entity.name,
                "description": entity.description,
                "target_year": entity.target_year,
                "target_election_type": entity.target_election_type,
                "target_position": entity.target_position,
                "target_state": entity.target_state,
                "status": entity.status.value,
                "created_by": entity.created_by,
                "created_at": datetime.now(),
            }
            result = await self.session.execute(query, params)
            await self.session.commit()

            row = result.first()
            if row is None:
                raise RuntimeError("Failed to create forecast run")
            return self._dict_to_entity(row_to_dict(row))

        except SQLAlchemyError as e:
            logger.error("Database error creating forecast run", error=str(e))
            await self.session.rollback()
            raise DatabaseError(
                "Failed to create forecast run",
                {"entity": str(entity), "error": str(e)},
            ) from e

    async def update_fields(self, run_id: int, **fields: Any) -> ForecastRun | None:
        """Update selected columns of a forecast run.

        Raises:
            ValueError: If a field is not an updatable column
            DatabaseError: If the update fails
        """
        if not fields:
            return await self.get_by_id(run_id)
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update forecast run columns: {sorted(unknown)}")

        assignments = ", ".join(f"{column} = :{column}" for column in fields)
        query = text(
            f"UPDATE forecast_runs SET {assignments} WHERE id = :id RETURNING *"
        ).bindparams(
            *(bindparam(column, type_=JSONB) for column in fields if column in JSON_COLUMNS)
        )
        try:
            result = await self.session.execute(query, {"id": run_id, **fields})
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Database error updating forecast run", run_id=run_id, error=str(e)
            )
            await self.session.rollback()
            raise DatabaseError(
                "Failed to update forecast run",
                {"id": run_id, "fields": sorted(fields), "error": str(e)},
            ) from e

        row = result.first()
        if row is None:
            return None
        return self._dict_to_entity(row_to_dict(row))

    def _to_entity(self, model: ForecastRunModel) -> ForecastRun:
        return ForecastRun(
            id=model.id,
            name=model.name,
            description=model.description,
            target_year=model.target_year,
            target_election_type=model.target_election_type,
            target_position=model.target_position,
            target_state=model.target_state,
            status=model.status,
            started_at=model.started_at,
            completed_at=model.completed_at,
            total_simulations=model.total_simulations,
            historical_years_used=model.historical_years_used,
            model_parameters=model.model_parameters,
            narrative=model.narrative,
            created_by=model.created_by,
        )
