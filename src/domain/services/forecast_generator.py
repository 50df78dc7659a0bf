"""Per-party vote share forecasts built from trend data."""

import logging
import math

from collections.abc import Mapping
from typing import Any, ClassVar

from src.domain.entities.forecast_result import ForecastResult, TrendDirection
from src.domain.services.monte_carlo_simulator import MonteCarloSimulator
from src.domain.value_objects.model_parameters import ModelParameters
from src.domain.value_objects.monte_carlo_result import MonteCarloResult
from src.domain.value_objects.party_trend import PartyTrendData


logger = logging.getLogger(__name__)


class ForecastGenerator:
    """Projects each party's trend forward and simulates the outcome.

    Projection: last share + slope * years ahead. The simulation spread is
    the historical volatility scaled by the volatility multiplier and by
    sqrt(years ahead), so uncertainty grows like a random walk.
    """

    RISING_SLOPE_THRESHOLD: ClassVar[float] = 0.5
    FALLING_SLOPE_THRESHOLD: ClassVar[float] = -0.5
    MIN_CONFIDENCE: ClassVar[float] = 0.3
    HIGH_VOLATILITY_THRESHOLD: ClassVar[float] = 5.0
    GROWTH_RATE_THRESHOLD: ClassVar[float] = 0.0
    VOLATILITY_FACTOR_WEIGHT: ClassVar[float] = 0.2
    GROWTH_FACTOR_WEIGHT: ClassVar[float] = 0.2

    def __init__(
        self,
        parameters: ModelParameters | None = None,
        simulator: MonteCarloSimulator | None = None,
    ) -> None:
        self.parameters = parameters or ModelParameters()
        self._simulator = simulator or MonteCarloSimulator()

    @classmethod
    def classify_trend(cls, trend_slope: float) -> TrendDirection:
        """Map a slope to rising, falling or stable."""
        if trend_slope > cls.RISING_SLOPE_THRESHOLD:
            return "rising"
        if trend_slope < cls.FALLING_SLOPE_THRESHOLD:
            return "falling"
        return "stable"

    @classmethod
    def calculate_confidence(cls, simulation: MonteCarloResult) -> float:
        """1 - coefficient of variation / 2, floored at MIN_CONFIDENCE.

        A zero mean has no coefficient of variation and gets the floor.
        """
        if simulation.mean == 0:
            return cls.MIN_CONFIDENCE
        confidence = 1 - (simulation.standard_deviation / simulation.mean) * 0.5
        return max(cls.MIN_CONFIDENCE, confidence)

    def influence_factors(
        self, trend: PartyTrendData, direction: TrendDirection
    ) -> list[dict[str, Any]]:
        return [
            {
                "factor": "Historical trend",
                "weight": self.parameters.trend_weight,
                "impact": direction,
            },
            {
                "factor": "Volatility",
                "weight": self.VOLATILITY_FACTOR_WEIGHT,
                "impact": (
                    "high"
                    if trend.volatility > self.HIGH_VOLATILITY_THRESHOLD
                    else "medium"
                ),
            },
            {
                "factor": "Growth rate",
                "weight": self.GROWTH_FACTOR_WEIGHT,
                "impact": (
                    "positive"
                    if trend.avg_growth_rate > self.GROWTH_RATE_THRESHOLD
                    else "negative"
                ),
            },
        ]

    def build_result(
        self,
        trend: PartyTrendData,
        simulation: MonteCarloResult,
        scale: float = 1.0,
    ) -> ForecastResult:
        """Turn a party's trend and simulation into a ForecastResult.

        Args:
            trend: Party trend data
            simulation: Simulated distribution for the party
            scale: Factor applied to the predicted share and its bounds
        """
        direction = self.classify_trend(trend.trend_slope)
        return ForecastResult(
            entity_name=trend.party,
            predicted_vote_share=round(simulation.mean * scale, 4),
            vote_share_lower=round(simulation.lower * scale, 4),
            vote_share_upper=round(simulation.upper * scale, 4),
            historical_trend={"years": trend.years, "vote_shares": trend.shares},
            trend_direction=direction,
            trend_strength=round(abs(trend.trend_slope), 4),
            confidence=round(self.calculate_confidence(simulation), 4),
            influence_factors=self.influence_factors(trend, direction),
        )

    def simulate_party(
        self, trend: PartyTrendData, target_year: int
    ) -> MonteCarloResult | None:
        """Simulate one party's share in ``target_year``.

        Returns:
            The simulation, or None when the party has no history
        """
        latest = trend.latest
        if latest is None:
            return None

        years_delta = target_year - latest.year
        trend_projection = latest.share + trend.trend_slope * years_delta
        adjusted_volatility = (
            trend.volatility
            * self.parameters.volatility_multiplier
            * math.sqrt(max(years_delta, 0))
        )
        return self._simulator.spawn().simulate(
            trend_projection,
            adjusted_volatility,
            0.0,
            self.parameters.monte_carlo_iterations,
            self.parameters.confidence_level,
        )

    def generate(
        self, party_trends: Mapping[str, PartyTrendData], target_year: int
    ) -> list[ForecastResult]:
        """Forecast every party, highest predicted share first.

        Parties without historical votes are skipped.

        Args:
            party_trends: party -> trend data
            target_year: Election year being forecast

        Returns:
            Forecast results sorted by predicted vote share, descending
        """
        results: list[ForecastResult] = []
        for party, trend in party_trends.items():
            simulation = self.simulate_party(trend, target_year)
            if simulation is None:
                logger.debug("Skipping party without history: %s", party)
                continue
            results.append(self.build_result(trend, simulation))

        results.sort(key=lambda r: r.predicted_vote_share, reverse=True)
        return results
