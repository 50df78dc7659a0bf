"""Forecast result repository implementation using SQLAlchemy."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel as PydanticBaseModel
from sqlalchemy import bindparam, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.logging import get_logger
from src.domain.entities.forecast_result import ForecastResult
from src.domain.repositories.forecast_result_repository import (
    ForecastResultRepository,
)
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.base_repository_impl import (
    BaseRepositoryImpl,
    row_to_dict,
)


logger = get_logger(__name__)

_INSERT_QUERY = text("""
    INSERT INTO forecast_results (
        run_id, result_type, entity_name,
        predicted_vote_share, vote_share_lower, vote_share_upper,
        historical_trend, trend_direction, trend_strength,
        confidence, influence_factors, created_at
    )
    VALUES (
        :run_id, :result_type, :entity_name,
        :predicted_vote_share, :vote_share_lower, :vote_share_upper,
        :historical_trend, :trend_direction, :trend_strength,
        :confidence, :influence_factors, :created_at
    )
    RETURNING *
""").bindparams(
    bindparam("historical_trend", type_=JSONB),
    bindparam("influence_factors", type_=JSONB),
)


class ForecastResultModel(PydanticBaseModel):
    """forecast_results row."""

    id: int | None = None
    run_id: int
    result_type: str
    entity_name: str
    predicted_vote_share: float
    vote_share_lower: float
    vote_share_upper: float
    historical_trend: dict[str, list[Any]] | None = None
    trend_direction: str
    trend_strength: float
    confidence: float
    influence_factors: list[dict[str, Any]] | None = None
    created_at: datetime | None = None


class ForecastResultRepositoryImpl(
    BaseRepositoryImpl[ForecastResult], ForecastResultRepository
):
    """Forecast result repository implementation using SQLAlchemy."""

    table_name = "forecast_results"

    def __init__(self, session: AsyncSession):
        super().__init__(
            session=session,
            model_class=ForecastResultModel,
        )

    async def create(self, entity: ForecastResult) -> ForecastResult:
        created = await self.create_many([entity])
        return created[0]

    async def create_many(self, results: list[ForecastResult]) -> list[ForecastResult]:
        """Insert results and commit once.

        Raises:
            ValueError: If a result has no run_id
            DatabaseError: If an insert fails (nothing is committed)
        """
        if not results:
            return []
        missing_run = [r.entity_name for r in results if r.run_id is None]
        if missing_run:
            raise ValueError(f"Forecast results without run_id: {missing_run}")

        created: list[ForecastResult] = []
        try:
            now = datetime.now()
            for entity in results:
                result = await self.session.execute(
                    _INSERT_QUERY, self._to_params(entity, now)
                )
                row = result.first()
                if row is None:
                    raise RuntimeError("Failed to create forecast result")
                created.append(self._dict_to_entity(row_to_dict(row)))
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Database error creating forecast results",
                run_id=results[0].run_id,
                count=len(results),
                error=str(e),
            )
            await self.session.rollback()
            raise DatabaseError(
                "Failed to create forecast results",
                {"run_id": results[0].run_id, "error": str(e)},
            ) from e

        return created

    async def get_by_run_id(
        self, run_id: int, result_type: str | None = None
    ) -> list[ForecastResult]:
        query_text = "SELECT * FROM forecast_results WHERE run_id = :run_id"
        params: dict[str, Any] = {"run_id": run_id}
        if result_type is not None:
            query_text += " AND result_type = :result_type"
            params["result_type"] = result_type
        query_text += " ORDER BY predicted_vote_share DESC, id"

        try:
            result = await self.session.execute(text(query_text), params)
            rows = result.fetchall()
        except SQLAlchemyError as e:
            logger.error(
                "Database error getting forecast results", run_id=run_id, error=str(e)
            )
            raise DatabaseError(
                "Failed to get forecast results", {"run_id": run_id, "error": str(e)}
            ) from e

        return [self._dict_to_entity(row_to_dict(row)) for row in rows]

    @staticmethod
    def _to_params(entity: ForecastResult, created_at: datetime) -> dict[str, Any]:
        return {
            "run_id": entity.run_id,
            "result_type": entity.result_type,
            "entity_name": entity.entity_name,
            "predicted_vote_share": entity.predicted_vote_share,
            "vote_share_lower": entity.vote_share_lower,
            "vote_share_upper": entity.vote_share_upper,
            "historical_trend": entity.historical_trend,
            "trend_direction": entity.trend_direction,
            "trend_strength": entity.trend_strength,
            "confidence": entity.confidence,
            "influence_factors": entity.influence_factors,
            "created_at": created_at,
        }

    def _to_entity(self, model: ForecastResultModel) -> ForecastResult:
        return ForecastResult(
            id=model.id,
            run_id=model.run_id,
            result_type=model.result_type,
            entity_name=model.entity_name,
            predicted_vote_share=model.predicted_vote_share,
            vote_share_lower=model.vote_share_lower,
            vote_share_upper=model.vote_share_upper,
            historical_trend=model.historical_trend,
            trend_direction=model.trend_direction,  # type: ignore[arg-type]
            trend_strength=model.trend_strength,
            confidence=model.confidence,
            influence_factors=model.influence_factors,
        )
