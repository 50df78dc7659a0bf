"""Forecast DTOs."""

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities.forecast_result import ForecastResult
from src.domain.entities.forecast_run import ForecastRun
from src.domain.entities.swing_region import SwingRegion


# =============================================================================
# Input DTOs
# =============================================================================


@dataclass
class RunForecastInputDto:
    """Input for running a forecast on an existing run."""

    target_year: int
    target_position: str | None = None
    target_state: str | None = None
    historical_years: list[int] | None = None
    model_parameters: dict[str, Any] | None = None


@dataclass
class CreateForecastRunInputDto:
    """Input for creating a run and starting it in the background."""

    name: str
    target_year: int
    description: str | None = None
    target_position: str | None = None
    target_state: str | None = None
    target_election_type: str | None = None
    created_by: str | None = None
    historical_years: list[int] | None = None
    model_parameters: dict[str, Any] | None = None

    def to_run_input(self) -> RunForecastInputDto:
        return RunForecastInputDto(
            target_year=self.target_year,
            target_position=self.target_position,
            target_state=self.target_state,
            historical_years=self.historical_years,
            model_parameters=self.model_parameters,
        )


# =============================================================================
# Output DTOs
# =============================================================================


@dataclass
class ForecastOutputDto:
    """Persisted results of a completed forecast run."""

    party_results: list[ForecastResult] = field(default_factory=list)
    swing_regions: list[SwingRegion] = field(default_factory=list)
    narrative: str = ""


@dataclass
class ForecastSummaryOutputDto:
    """Stored run with its leading parties and swing regions."""

    run: ForecastRun
    top_parties: list[ForecastResult] = field(default_factory=list)
    swing_regions: list[SwingRegion] = field(default_factory=list)
    narrative: str | None = None
