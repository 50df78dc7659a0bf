"""Forecast run entity."""

from datetime import datetime
from enum import Enum
from typing import Any

from src.domain.entities.base import BaseEntity


class ForecastRunStatus(str, Enum):
    """Lifecycle status of a forecast run.

    pending -> running -> completed | failed
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ForecastRunStatus.COMPLETED, ForecastRunStatus.FAILED)

    def can_transition_to(self, target: "ForecastRunStatus") -> bool:
        """Return True if moving from this status to ``target`` is allowed."""
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[ForecastRunStatus, frozenset[ForecastRunStatus]] = {
    ForecastRunStatus.PENDING: frozenset(
        {ForecastRunStatus.RUNNING, ForecastRunStatus.FAILED}
    ),
    ForecastRunStatus.RUNNING: frozenset(
        {ForecastRunStatus.COMPLETED, ForecastRunStatus.FAILED}
    ),
    ForecastRunStatus.COMPLETED: frozenset(),
    ForecastRunStatus.FAILED: frozenset(),
}


class ForecastRun(BaseEntity):
    """One execution of the forecasting pipeline.

    The caller creates the run in ``pending``; the forecast use case moves it
    through ``running`` to ``completed`` or ``failed``.
    """

    def __init__(
        self,
        name: str,
        target_year: int,
        target_position: str | None = None,
        target_state: str | None = None,
        target_election_type: str | None = None,
        description: str | None = None,
        created_by: str | None = None,
        status: ForecastRunStatus | str = ForecastRunStatus.PENDING,
        started_at: datetime | None = None,
        completed_at: datetime | None = None,
        total_simulations: int | None = None,
        historical_years_used: list[int] | None = None,
        model_parameters: dict[str, Any] | None = None,
        narrative: str | None = None,
        id: int | None = None,
    ) -> None:
        """Initialize a forecast run.

        Args:
            name: Display name of the run
            target_year: Election year being forecast
            target_position: Office filter (e.g. "Governador"), None for all
            target_state: State code filter, None for national
            target_election_type: Free-form election type label
            description: Optional description
            created_by: ID of the requesting user
            status: Lifecycle status
            started_at: When the run moved to running
            completed_at: When the run reached a terminal status
            total_simulations: Monte Carlo iterations per party
            historical_years_used: Election years that fed the model
            model_parameters: Effective model parameters
            narrative: Generated narrative summary
            id: Forecast run ID
        """
        super().__init__(id)
        self.name = name
        self.target_year = target_year
        self.target_position = target_position
        self.target_state = target_state
        self.target_election_type = target_election_type
        self.description = description
        self.created_by = created_by
        self.status = ForecastRunStatus(status)
        self.started_at = started_at
        self.completed_at = completed_at
        self.total_simulations = total_simulations
        self.historical_years_used = historical_years_used or []
        self.model_parameters = model_parameters or {}
        self.narrative = narrative

    def __str__(self) -> str:
        return f"ForecastRun {self.id} ({self.target_year}, {self.status.value})"
