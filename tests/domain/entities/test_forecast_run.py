"""Tests for ForecastRun entity."""

import pytest

from src.domain.entities.forecast_run import ForecastRun, ForecastRunStatus


class TestForecastRunStatus:
    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (ForecastRunStatus.PENDING, ForecastRunStatus.RUNNING),
            (ForecastRunStatus.PENDING, ForecastRunStatus.FAILED),
            (ForecastRunStatus.RUNNING, ForecastRunStatus.COMPLETED),
            (ForecastRunStatus.RUNNING, ForecastRunStatus.FAILED),
        ],
    )
    def test_allowed_transitions(
        self, source: ForecastRunStatus, target: ForecastRunStatus
    ) -> None:
        assert source.can_transition_to(target)

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (ForecastRunStatus.PENDING, ForecastRunStatus.COMPLETED),
            (ForecastRunStatus.RUNNING, ForecastRunStatus.PENDING),
            (ForecastRunStatus.COMPLETED, ForecastRunStatus.RUNNING),
            (ForecastRunStatus.COMPLETED, ForecastRunStatus.FAILED),
            (ForecastRunStatus.FAILED, ForecastRunStatus.RUNNING),
        ],
    )
    def test_forbidden_transitions(
        self, source: ForecastRunStatus, target: ForecastRunStatus
    ) -> None:
        assert not source.can_transition_to(target)

    def test_terminal_statuses(self) -> None:
        assert ForecastRunStatus.COMPLETED.is_terminal
        assert ForecastRunStatus.FAILED.is_terminal
        assert not ForecastRunStatus.PENDING.is_terminal
        assert not ForecastRunStatus.RUNNING.is_terminal


class TestForecastRun:
    def test_defaults(self) -> None:
        run = ForecastRun(name="Governador 2026", target_year=2026)

        assert run.status is ForecastRunStatus.PENDING
        assert run.historical_years_used == []
        assert run.model_parameters == {}
        assert run.narrative is None
        assert run.id is None

    def test_status_string_is_converted(self) -> None:
        run = ForecastRun(name="r", target_year=2026, status="running")

        assert run.status is ForecastRunStatus.RUNNING

    def test_invalid_status_string(self) -> None:
        with pytest.raises(ValueError):
            ForecastRun(name="r", target_year=2026, status="archived")

    def test_str(self) -> None:
        run = ForecastRun(name="r", target_year=2026, id=3)

        assert str(run) == "ForecastRun 3 (2026, pending)"
