"""Party trend value object — Domain layer."""

from dataclasses import dataclass

from src.domain.value_objects.historical_data_point import HistoricalVoteShare


@dataclass(frozen=True)
class PartyTrendData:
    """Trend statistics of one party's vote share series.

    Attributes:
        party: Party name
        historical_votes: Yearly votes and shares, ascending by year
        trend_slope: Least-squares slope in percentage points per year
        volatility: Sample standard deviation of the shares
        avg_growth_rate: Mean period-over-period relative change
    """

    party: str
    historical_votes: tuple[HistoricalVoteShare, ...]
    trend_slope: float
    volatility: float
    avg_growth_rate: float

    @property
    def latest(self) -> HistoricalVoteShare | None:
        """Most recent data point, or None when the series is empty."""
        if not self.historical_votes:
            return None
        return self.historical_votes[-1]

    @property
    def years(self) -> list[int]:
        return [v.year for v in self.historical_votes]

    @property
    def shares(self) -> list[float]:
        return [v.share for v in self.historical_votes]
