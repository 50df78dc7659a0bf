"""What-if scenario value objects — Domain layer."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal


@dataclass(frozen=True)
class PollingData:
    """One opinion poll result for a party."""

    party: str
    poll_percent: float
    poll_date: str | None = None
    source: str | None = None
    sample_size: int | None = None


@dataclass(frozen=True)
class PartyAdjustment:
    """Manual adjustment applied to a party's latest vote share."""

    vote_share_adjust: float | None = None
    turnout_adjust: float | None = None
    reason: str | None = None


@dataclass(frozen=True)
class ExternalFactor:
    """External event shifting overall uncertainty.

    ``magnitude`` is on a 0-10 scale.
    """

    factor: str
    impact: Literal["positive", "negative"]
    magnitude: float


@dataclass(frozen=True)
class ForecastScenario:
    """A prediction scenario layered on top of historical trends.

    Weight fields left as None fall back to the scenario defaults used by
    the scenario forecast.
    """

    id: int
    name: str
    base_year: int
    target_year: int
    state: str | None = None
    position: str | None = None
    polling_data: tuple[PollingData, ...] = ()
    polling_weight: float | None = None
    party_adjustments: dict[str, PartyAdjustment] = field(default_factory=dict)
    external_factors: tuple[ExternalFactor, ...] = ()
    monte_carlo_iterations: int | None = None
    confidence_level: float | None = None
    volatility_multiplier: float | None = None
    historical_weight: float | None = None
    adjustment_weight: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ForecastScenario":
        """Build a scenario from plain JSON-like data.

        Raises:
            KeyError: If id, name, base_year or target_year is missing
        """
        return cls(
            id=data["id"],
            name=data["name"],
            base_year=data["base_year"],
            target_year=data["target_year"],
            state=data.get("state"),
            position=data.get("position"),
            polling_data=tuple(PollingData(**p) for p in data.get("polling_data") or ()),
            polling_weight=data.get("polling_weight"),
            party_adjustments={
                party: PartyAdjustment(**adjustment)
                for party, adjustment in (data.get("party_adjustments") or {}).items()
            },
            external_factors=tuple(
                ExternalFactor(**f) for f in data.get("external_factors") or ()
            ),
            monte_carlo_iterations=data.get("monte_carlo_iterations"),
            confidence_level=data.get("confidence_level"),
            volatility_multiplier=data.get("volatility_multiplier"),
            historical_weight=data.get("historical_weight"),
            adjustment_weight=data.get("adjustment_weight"),
        )
