"""Domain layer exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for the domain layer.

    Attributes:
        message: Human readable message
        details: Extra context for logging and callers
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InsufficientHistoricalDataException(DomainException):
    """No historical vote rows exist for the requested years and scope."""

    def __init__(
        self,
        years: list[int],
        position: str | None = None,
        state: str | None = None,
    ) -> None:
        super().__init__(
            "Insufficient historical data for forecast",
            {"years": years, "position": position, "state": state},
        )
        self.years = years
        self.position = position
        self.state = state


class ForecastRunNotFoundException(DomainException):
    """The forecast run does not exist."""

    def __init__(self, run_id: int) -> None:
        super().__init__(f"Forecast run {run_id} not found", {"run_id": run_id})
        self.run_id = run_id


class InvalidForecastRunStateException(DomainException):
    """A forecast run status transition is not allowed."""

    def __init__(self, run_id: int | None, current: str, requested: str) -> None:
        super().__init__(
            f"Forecast run {run_id} cannot move from {current} to {requested}",
            {"run_id": run_id, "current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested
