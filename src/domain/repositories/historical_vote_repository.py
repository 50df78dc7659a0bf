"""Historical vote repository interface."""

from abc import ABC, abstractmethod

from src.domain.value_objects.historical_data_point import HistoricalDataPoint


class HistoricalVoteRepository(ABC):
    """Read-only access to historical votes aggregated per party."""

    @abstractmethod
    async def get_historical_votes_by_party(
        self,
        years: list[int],
        position: str | None = None,
        state: str | None = None,
    ) -> list[HistoricalDataPoint]:
        """Get per-party vote totals for the given election years.

        Args:
            years: Election years to include
            position: Office filter, None for all offices
            state: State code filter, None for every state

        Returns:
            One row per (year, party, state, position); empty list if none match
        """
        pass
