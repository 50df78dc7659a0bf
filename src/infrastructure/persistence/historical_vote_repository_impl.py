"""Historical vote repository implementation using SQLAlchemy."""

from typing import Any

from pydantic import BaseModel as PydanticBaseModel
from sqlalchemy import bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.logging import get_logger
from src.domain.repositories.historical_vote_repository import (
    HistoricalVoteRepository,
)
from src.domain.value_objects.historical_data_point import HistoricalDataPoint
from src.infrastructure.exceptions import DatabaseError
from src.infrastructure.persistence.base_repository_impl import row_to_dict


logger = get_logger(__name__)


class HistoricalPartyVoteModel(PydanticBaseModel):
    """Aggregated row of historical_candidate_votes."""

    year: int
    party: str
    state: str | None = None
    position: str | None = None
    total_votes: int
    candidate_count: int = 0


class HistoricalVoteRepositoryImpl(HistoricalVoteRepository):
    """Reads per-party vote totals from candidate-level results."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_historical_votes_by_party(
        self,
        years: list[int],
        position: str | None = None,
        state: str | None = None,
    ) -> list[HistoricalDataPoint]:
        """Sum candidate votes per year, party, state and position.

        Args:
            years: Election years to include
            position: Office filter (case-insensitive), None for all
            state: State code filter, None for every state

        Returns:
            Aggregated rows ordered by year, party; empty list if none match
        """
        if not years:
            return []

        conditions = ["year IN :years", "party IS NOT NULL"]
        params: dict[str, Any] = {"years": list(years)}
        if position:
            conditions.append("LOWER(position) = LOWER(:position)")
            params["position"] = position
        if state:
            conditions.append("state = :state")
            params["state"] = state

        query = text(f"""
            SELECT
                year,
                party,
                state,
                position,
                COALESCE(SUM(votes), 0) AS total_votes,
                COUNT(DISTINCT candidate_name) AS candidate_count
            FROM historical_candidate_votes
            WHERE {" AND ".join(conditions)}
            GROUP BY year, party, state, position
            ORDER BY year, party
        """).bindparams(bindparam("years", expanding=True))

        try:
            result = await self.session.execute(query, params)
            rows = result.fetchall()
        except SQLAlchemyError as e:
            logger.error(
                "Database error getting historical votes",
                years=years,
                position=position,
                state=state,
                error=str(e),
            )
            raise DatabaseError(
                "Failed to get historical votes by party",
                {"years": years, "position": position, "state": state, "error": str(e)},
            ) from e

        return [
            self._to_data_point(HistoricalPartyVoteModel.model_validate(row_to_dict(r)))
            for r in rows
        ]

    @staticmethod
    def _to_data_point(model: HistoricalPartyVoteModel) -> HistoricalDataPoint:
        return HistoricalDataPoint(
            year=model.year,
            party=model.party,
            region=model.state,
            position=model.position,
            total_votes=model.total_votes,
            candidate_count=model.candidate_count,
        )
