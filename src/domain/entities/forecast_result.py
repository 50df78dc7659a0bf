"""Forecast result entity."""

from typing import Any, Literal

from src.domain.entities.base import BaseEntity


TrendDirection = Literal["rising", "falling", "stable"]


class ForecastResult(BaseEntity):
    """Forecast of one party's vote share for a run."""

    RESULT_TYPE_PARTY = "party"

    def __init__(
        self,
        entity_name: str,
        predicted_vote_share: float,
        vote_share_lower: float,
        vote_share_upper: float,
        trend_direction: TrendDirection,
        trend_strength: float,
        confidence: float,
        historical_trend: dict[str, list[Any]] | None = None,
        influence_factors: list[dict[str, Any]] | None = None,
        result_type: str = RESULT_TYPE_PARTY,
        run_id: int | None = None,
        id: int | None = None,
    ) -> None:
        """Initialize a forecast result.

        Args:
            entity_name: Party name
            predicted_vote_share: Mean simulated vote share (%)
            vote_share_lower: Lower confidence bound (%)
            vote_share_upper: Upper confidence bound (%)
            trend_direction: rising, falling or stable
            trend_strength: Absolute trend slope
            confidence: Heuristic confidence in [0.3, 1]
            historical_trend: {"years": [...], "vote_shares": [...]}
            influence_factors: [{"factor", "weight", "impact"}, ...]
            result_type: Result kind, always "party" for now
            run_id: Owning forecast run ID (set when persisted)
            id: Forecast result ID
        """
        super().__init__(id)
        self.run_id = run_id
        self.result_type = result_type
        self.entity_name = entity_name
        self.predicted_vote_share = predicted_vote_share
        self.vote_share_lower = vote_share_lower
        self.vote_share_upper = vote_share_upper
        self.historical_trend = historical_trend or {"years": [], "vote_shares": []}
        self.trend_direction = trend_direction
        self.trend_strength = trend_strength
        self.confidence = confidence
        self.influence_factors = influence_factors or []

    def __str__(self) -> str:
        return f"{self.entity_name}: {self.predicted_vote_share:.1f}%"
