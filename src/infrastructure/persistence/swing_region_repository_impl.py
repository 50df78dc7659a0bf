"""Swing region repository implementation using SQLAlchemy."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel as PydanticBaseModel
from sqlalchemy import bindparam, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.logging import get_logger
from src.domain.entities.swing_region import SwingRegion
from src.domain.repositories.swing_region_repository import SwingRegionRepository
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.base_repository_impl import (
    BaseRepositoryImpl,
    row_to_dict,
)


logger = get_logger(__name__)

_INSERT_QUERY = text("""
    INSERT INTO forecast_swing_regions (
        run_id, region, region_name, position,
        margin_percent, margin_votes, volatility_score, swing_magnitude,
        leading_entity, challenging_entity, sentiment_balance,
        recent_trend_shift, outcome_uncertainty, key_factors, created_at
    )
    VALUES (
        :run_id, :region, :region_name, :position,
        :margin_percent, :margin_votes, :volatility_score, :swing_magnitude,
        :leading_entity, :challenging_entity, :sentiment_balance,
        :recent_trend_shift, :outcome_uncertainty, :key_factors, :created_at
    )
    RETURNING *
""").bindparams(bindparam("key_factors", type_=JSONB))


class SwingRegionModel(PydanticBaseModel):
    """forecast_swing_regions row."""

    id: int | None = None
    run_id: int
    region: str
    region_name: str
    position: str | None = None
    margin_percent: float
    margin_votes: int
    volatility_score: float
    swing_magnitude: float
    leading_entity: str
    challenging_entity: str
    sentiment_balance: str = SwingRegion.SENTIMENT_BALANCE_PLACEHOLDER
    recent_trend_shift: float
    outcome_uncertainty: float
    key_factors: list[dict[str, str]] | None = None
    created_at: datetime | None = None


class SwingRegionRepositoryImpl(
    BaseRepositoryImpl[SwingRegion], SwingRegionRepository
):
    """Swing region repository implementation using SQLAlchemy."""

    table_name = "forecast_swing_regions"

    def __init__(self, session: AsyncSession):
        super().__init__(
            session=session,
            model_class=SwingRegionModel,
        )

    async def create(self, entity: SwingRegion) -> SwingRegion:
        created = await self.create_many([entity])
        return created[0]

    async def create_many(self, regions: list[SwingRegion]) -> list[SwingRegion]:
        """Insert swing regions and commit once.

        Raises:
            ValueError: If a region has no run_id
            DatabaseError: If an insert fails (nothing is committed)
        """
        if not regions:
            return []
        missing_run = [r.region for r in regions if r.run_id is None]
        if missing_run:
            raise ValueError(f"Swing regions without run_id: {missing_run}")

        created: list[SwingRegion] = []
        try:
            now = datetime.now()
            for entity in regions:
                result = await self.session.execute(
                    _INSERT_QUERY, self._to_params(entity, now)
                )
                row = result.first()
                if row is None:
                    raise RuntimeError("Failed to create swing region")
                created.append(self._dict_to_entity(row_to_dict(row)))
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Database error creating swing regions",
                run_id=regions[0].run_id,
                count=len(regions),
                error=str(e),
            )
            await self.session.rollback()
            raise DatabaseError(
                "Failed to create swing regions",
                {"run_id": regions[0].run_id, "error": str(e)},
            ) from e

        return created

    async def get_by_run_id(self, run_id: int) -> list[SwingRegion]:
        try:
            result = await self.session.execute(
                text("""
                    SELECT * FROM forecast_swing_regions
                    WHERE run_id = :run_id
                    ORDER BY volatility_score DESC, id
                """),
                {"run_id": run_id},
            )
            rows = result.fetchall()
        except SQLAlchemyError as e:
            logger.error(
                "Database error getting swing regions", run_id=run_id, error=str(e)
            )
            raise DatabaseError(
                "Failed to get swing regions", {"run_id": run_id, "error": str(e)}
            ) from e

        return [self._dict_to_entity(row_to_dict(row)) for row in rows]

    @staticmethod
    def _to_params(entity: SwingRegion, created_at: datetime) -> dict[str, Any]:
        return {
            "run_id": entity.run_id,
            "region": entity.region,
            "region_name": entity.region_name,
            "position": entity.position,
            "margin_percent": entity.margin_percent,
            "margin_votes": entity.margin_votes,
            "volatility_score": entity.volatility_score,
            "swing_magnitude": entity.swing_magnitude,
            "leading_entity": entity.leading_entity,
            "challenging_entity": entity.challenging_entity,
            "sentiment_balance": entity.sentiment_balance,
            "recent_trend_shift": entity.recent_trend_shift,
            "outcome_uncertainty": entity.outcome_uncertainty,
            "key_factors": entity.key_factors,
            "created_at": created_at,
        }

    def _to_entity(self, model: SwingRegionModel) -> SwingRegion:
        return SwingRegion(
            id=model.id,
            run_id=model.run_id,
            region=model.region,
            region_name=model.region_name,
            position=model.position,
            margin_percent=model.margin_percent,
            margin_votes=model.margin_votes,
            volatility_score=model.volatility_score,
            swing_magnitude=model.swing_magnitude,
            leading_entity=model.leading_entity,
            challenging_entity=model.challenging_entity,
            sentiment_balance=model.sentiment_balance,
            recent_trend_shift=model.recent_trend_shift,
            outcome_uncertainty=model.outcome_uncertainty,
            key_factors=model.key_factors,
        )
