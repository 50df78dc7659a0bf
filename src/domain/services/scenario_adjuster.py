"""Applies what-if scenario inputs to party trends."""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import ClassVar

from src.domain.value_objects.forecast_scenario import (
    ExternalFactor,
    PartyAdjustment,
    PollingData,
)
from src.domain.value_objects.historical_data_point import HistoricalVoteShare
from src.domain.value_objects.party_trend import PartyTrendData


class ScenarioAdjuster:
    """Rewrites the latest share of party trends according to a scenario.

    All methods return new PartyTrendData objects; inputs are left untouched.
    """

    DEFAULT_POLLING_WEIGHT: ClassVar[float] = 0.30
    EXTERNAL_FACTOR_SENSITIVITY: ClassVar[float] = 0.1
    MIN_VOLATILITY_MULTIPLIER: ClassVar[float] = 0.1

    @staticmethod
    def _with_latest_share(trend: PartyTrendData, share: float) -> PartyTrendData:
        latest = trend.historical_votes[-1]
        votes = trend.historical_votes[:-1] + (
            HistoricalVoteShare(year=latest.year, votes=latest.votes, share=share),
        )
        return replace(trend, historical_votes=votes)

    def apply_polling(
        self,
        trends: Mapping[str, PartyTrendData],
        polls: Iterable[PollingData],
        polling_weight: float | None = None,
    ) -> dict[str, PartyTrendData]:
        """Blend each polled party's latest share with its poll result.

        blended = latest * (1 - weight) + poll * weight
        """
        weight = (
            self.DEFAULT_POLLING_WEIGHT if polling_weight is None else polling_weight
        )
        adjusted = dict(trends)
        for poll in polls:
            trend = adjusted.get(poll.party)
            if trend is None or trend.latest is None:
                continue
            blended = trend.latest.share * (1 - weight) + poll.poll_percent * weight
            adjusted[poll.party] = self._with_latest_share(trend, blended)
        return adjusted

    def apply_party_adjustments(
        self,
        trends: Mapping[str, PartyTrendData],
        adjustments: Mapping[str, PartyAdjustment],
    ) -> dict[str, PartyTrendData]:
        """Add each party's manual vote share adjustment to its latest share."""
        adjusted = dict(trends)
        for party, adjustment in adjustments.items():
            trend = adjusted.get(party)
            if trend is None or trend.latest is None or not adjustment.vote_share_adjust:
                continue
            adjusted[party] = self._with_latest_share(
                trend, trend.latest.share + adjustment.vote_share_adjust
            )
        return adjusted

    def adjust_volatility_multiplier(
        self, multiplier: float, factors: Iterable[ExternalFactor]
    ) -> float:
        """Shift the volatility multiplier by the net external factor impact.

        Positive factors add magnitude / 100, negative factors subtract it; the
        net is scaled by EXTERNAL_FACTOR_SENSITIVITY and the result floored at
        MIN_VOLATILITY_MULTIPLIER.
        """
        factors = list(factors)
        if not factors:
            return multiplier
        total_impact = sum(
            (f.magnitude if f.impact == "positive" else -f.magnitude) / 100
            for f in factors
        )
        return max(
            self.MIN_VOLATILITY_MULTIPLIER,
            multiplier + total_impact * self.EXTERNAL_FACTOR_SENSITIVITY,
        )
