"""Forecast model parameters — Domain layer."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any


@dataclass(frozen=True)
class ModelParameters:
    """Tunable parameters of a forecast run.

    Attributes:
        monte_carlo_iterations: Samples drawn per party
        confidence_level: Coverage of the reported interval (0.95 = 95%)
        historical_weight_decay: Stored with the run, not used by any formula
        sentiment_weight: Stored with the run, not used by any formula
        trend_weight: Weight reported on the "historical trend" influence factor
        volatility_multiplier: Scales historical volatility into simulation spread
    """

    monte_carlo_iterations: int = 10000
    confidence_level: float = 0.95
    historical_weight_decay: float = 0.85
    sentiment_weight: float = 0.15
    trend_weight: float = 0.4
    volatility_multiplier: float = 1.2

    def __post_init__(self) -> None:
        if self.monte_carlo_iterations < 1:
            raise ValueError("monte_carlo_iterations must be at least 1")
        if not 0 <= self.confidence_level <= 1:
            raise ValueError("confidence_level must be between 0 and 1")

    def with_overrides(self, overrides: Mapping[str, Any] | None) -> "ModelParameters":
        """Return a copy with the given fields replaced.

        None values are ignored so partially filled inputs can be passed as-is.

        Raises:
            ValueError: If an override names an unknown parameter
        """
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown model parameters: {sorted(unknown)}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
