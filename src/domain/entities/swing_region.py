"""Swing region entity."""

from src.domain.entities.base import BaseEntity


class SwingRegion(BaseEntity):
    """A region whose top two parties are close and historically volatile."""

    # Sentiment is not wired into the forecast yet.
    SENTIMENT_BALANCE_PLACEHOLDER = "0"

    def __init__(
        self,
        region: str,
        region_name: str,
        leading_entity: str,
        challenging_entity: str,
        margin_percent: float,
        margin_votes: int,
        volatility_score: float,
        swing_magnitude: float,
        recent_trend_shift: float,
        outcome_uncertainty: float,
        position: str | None = None,
        key_factors: list[dict[str, str]] | None = None,
        sentiment_balance: str = SENTIMENT_BALANCE_PLACEHOLDER,
        run_id: int | None = None,
        id: int | None = None,
    ) -> None:
        """Initialize a swing region.

        Args:
            region: Region code (state abbreviation)
            region_name: Display name of the region
            leading_entity: Party with most votes in the latest year
            challenging_entity: Runner-up party
            margin_percent: Leader minus challenger, percent of region total
            margin_votes: Leader minus challenger in votes
            volatility_score: Mean volatility of leader and challenger
            swing_magnitude: Volatility scaled by the volatility multiplier
            recent_trend_shift: Challenger slope minus leader slope
            outcome_uncertainty: Heuristic uncertainty in [0, 1]
            position: Office of the leading row
            key_factors: [{"factor", "impact"}, ...]
            sentiment_balance: Fixed placeholder
            run_id: Owning forecast run ID (set when persisted)
            id: Swing region ID
        """
        super().__init__(id)
        self.run_id = run_id
        self.region = region
        self.region_name = region_name
        self.position = position
        self.margin_percent = margin_percent
        self.margin_votes = margin_votes
        self.volatility_score = volatility_score
        self.swing_magnitude = swing_magnitude
        self.leading_entity = leading_entity
        self.challenging_entity = challenging_entity
        self.sentiment_balance = sentiment_balance
        self.recent_trend_shift = recent_trend_shift
        self.outcome_uncertainty = outcome_uncertainty
        self.key_factors = key_factors or []

    def __str__(self) -> str:
        return (
            f"{self.region_name}: {self.leading_entity} vs "
            f"{self.challenging_entity} ({self.margin_percent:.2f}%)"
        )
