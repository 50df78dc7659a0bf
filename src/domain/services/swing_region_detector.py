"""Detection of contested, volatile regions."""

import logging

from collections.abc import Iterable, Mapping
from typing import ClassVar

from src.domain.constants import region_display_name
from src.domain.entities.swing_region import SwingRegion
from src.domain.services.historical_data_aggregator import HistoricalDataAggregator
from src.domain.value_objects.historical_data_point import HistoricalDataPoint
from src.domain.value_objects.model_parameters import ModelParameters
from src.domain.value_objects.party_trend import PartyTrendData


logger = logging.getLogger(__name__)


class SwingRegionDetector:
    """Flags regions where the top two parties are close and volatile.

    Only the most recent year in each region decides the leader and the
    challenger; their trend volatility comes from the party-level analysis.
    """

    MARGIN_THRESHOLD: ClassVar[float] = 10.0
    VOLATILITY_THRESHOLD: ClassVar[float] = 2.0
    TIGHT_MARGIN_HIGH_IMPACT: ClassVar[float] = 5.0
    HIGH_VOLATILITY_HIGH_IMPACT: ClassVar[float] = 5.0
    UNCERTAINTY_VOLATILITY_SCALE: ClassVar[float] = 5.0

    def __init__(self, parameters: ModelParameters | None = None) -> None:
        self.parameters = parameters or ModelParameters()

    @classmethod
    def is_swing(cls, margin: float, avg_volatility: float) -> bool:
        """A region swings iff its margin is narrow and volatility high."""
        return margin < cls.MARGIN_THRESHOLD and avg_volatility > cls.VOLATILITY_THRESHOLD

    @classmethod
    def outcome_uncertainty(cls, margin: float, avg_volatility: float) -> float:
        return min(
            1.0,
            (cls.MARGIN_THRESHOLD - margin)
            / cls.MARGIN_THRESHOLD
            * avg_volatility
            / cls.UNCERTAINTY_VOLATILITY_SCALE,
        )

    @classmethod
    def key_factors(
        cls, margin: float, avg_volatility: float, recent_trend_shift: float
    ) -> list[dict[str, str]]:
        factors = [
            {
                "factor": "Tight margin",
                "impact": "high" if margin < cls.TIGHT_MARGIN_HIGH_IMPACT else "medium",
            },
            {
                "factor": "High historical volatility",
                "impact": (
                    "high"
                    if avg_volatility > cls.HIGH_VOLATILITY_HIGH_IMPACT
                    else "medium"
                ),
            },
        ]
        if recent_trend_shift > 0:
            factors.append({"factor": "Challenger ascending", "impact": "high"})
        return factors

    def evaluate_region(
        self,
        region: str,
        rows: Iterable[HistoricalDataPoint],
        party_trends: Mapping[str, PartyTrendData],
    ) -> SwingRegion | None:
        """Evaluate one region.

        Returns:
            SwingRegion if the region is classified as swing, else None
        """
        rows = list(rows)
        if not rows:
            return None
        latest_year = max(r.year for r in rows)
        recent = sorted(
            (r for r in rows if r.year == latest_year),
            key=lambda r: r.total_votes,
            reverse=True,
        )
        if len(recent) < 2:
            logger.debug("Region %s has fewer than two parties in %d", region, latest_year)
            return None

        leader, challenger = recent[0], recent[1]
        total_votes = sum(r.total_votes for r in recent)
        margin_votes = leader.total_votes - challenger.total_votes
        margin = margin_votes / total_votes * 100 if total_votes > 0 else 0.0

        leader_trend = party_trends.get(leader.party)
        challenger_trend = party_trends.get(challenger.party)
        leader_volatility = leader_trend.volatility if leader_trend else 0.0
        challenger_volatility = challenger_trend.volatility if challenger_trend else 0.0
        avg_volatility = (leader_volatility + challenger_volatility) / 2

        if not self.is_swing(margin, avg_volatility):
            return None

        recent_trend_shift = (
            challenger_trend.trend_slope if challenger_trend else 0.0
        ) - (leader_trend.trend_slope if leader_trend else 0.0)

        return SwingRegion(
            region=region,
            region_name=region_display_name(region),
            position=leader.position,
            margin_percent=round(margin, 2),
            margin_votes=margin_votes,
            volatility_score=round(avg_volatility, 4),
            swing_magnitude=round(
                avg_volatility * self.parameters.volatility_multiplier, 2
            ),
            leading_entity=leader.party,
            challenging_entity=challenger.party,
            recent_trend_shift=round(recent_trend_shift, 4),
            outcome_uncertainty=round(
                self.outcome_uncertainty(margin, avg_volatility), 4
            ),
            key_factors=self.key_factors(margin, avg_volatility, recent_trend_shift),
        )

    def detect(
        self,
        historical_data: Iterable[HistoricalDataPoint],
        party_trends: Mapping[str, PartyTrendData],
    ) -> list[SwingRegion]:
        """Find swing regions, most volatile first.

        Args:
            historical_data: Flat historical rows (rows without region ignored)
            party_trends: party -> trend data

        Returns:
            Swing regions sorted by volatility score, descending
        """
        regions: list[SwingRegion] = []
        for region, rows in HistoricalDataAggregator.group_by_region(
            historical_data
        ).items():
            swing = self.evaluate_region(region, rows, party_trends)
            if swing is not None:
                regions.append(swing)

        regions.sort(key=lambda r: r.volatility_score, reverse=True)
        return regions
