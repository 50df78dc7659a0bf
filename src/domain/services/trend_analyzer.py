"""Trend statistics over party vote share series."""

from collections.abc import Iterable, Sequence

import numpy as np

from src.domain.services.historical_data_aggregator import HistoricalDataAggregator
from src.domain.utils.descriptive_stats import mean, sample_standard_deviation
from src.domain.value_objects.historical_data_point import HistoricalDataPoint
from src.domain.value_objects.party_trend import PartyTrendData


class TrendAnalyzer:
    """Fits slope, volatility and growth rate for each party.

    Degenerate inputs (too few points, a vertical fit, zero prior shares)
    yield 0 instead of raising so the pipeline always has a result.
    """

    @staticmethod
    def calculate_trend_slope(points: Sequence[tuple[int, float]]) -> float:
        """Least-squares slope of value against year.

        slope = (nΣxy - ΣxΣy) / (nΣx² - (Σx)²)

        Args:
            points: (year, value) pairs

        Returns:
            Slope per year; 0 for fewer than 2 points or a non-finite fit
        """
        n = len(points)
        if n < 2:
            return 0.0

        xy = np.asarray(points, dtype=float)
        x, y = xy[:, 0], xy[:, 1]

        denominator = n * np.dot(x, x) - x.sum() ** 2
        if denominator == 0:
            return 0.0
        slope = float((n * np.dot(x, y) - x.sum() * y.sum()) / denominator)
        return slope if np.isfinite(slope) else 0.0

    @staticmethod
    def calculate_volatility(values: Sequence[float]) -> float:
        """Sample standard deviation of the values, 0 for fewer than 2."""
        return sample_standard_deviation(values)

    @staticmethod
    def calculate_average_growth_rate(shares: Sequence[float]) -> float:
        """Mean of period-over-period relative changes.

        Periods whose previous share is 0 are skipped.

        Returns:
            Average growth rate, 0 if no period is usable
        """
        arr = np.asarray(shares, dtype=float)
        previous, current = arr[:-1], arr[1:]
        usable = previous > 0
        return mean((current[usable] - previous[usable]) / previous[usable])

    def analyze(
        self, historical_data: Iterable[HistoricalDataPoint]
    ) -> dict[str, PartyTrendData]:
        """Compute trend data for every party in the input.

        Args:
            historical_data: Flat historical rows for all parties

        Returns:
            party -> PartyTrendData
        """
        trends: dict[str, PartyTrendData] = {}
        for party, series in HistoricalDataAggregator.vote_shares(
            historical_data
        ).items():
            shares = [v.share for v in series]
            trends[party] = PartyTrendData(
                party=party,
                historical_votes=series,
                trend_slope=self.calculate_trend_slope(
                    [(v.year, v.share) for v in series]
                ),
                volatility=self.calculate_volatility(shares),
                avg_growth_rate=self.calculate_average_growth_rate(shares),
            )
        return trends
