"""Tests for CLI error handling."""

import click
import pytest

from src.domain.exceptions import ForecastRunNotFoundException
from src.infrastructure.exceptions import DatabaseError
from src.interfaces.cli.base import with_error_handling


def _raising(error: Exception):
    @with_error_handling
    def command() -> None:
        raise error

    return command


class TestWithErrorHandling:
    def test_domain_error_message(self) -> None:
        with pytest.raises(click.ClickException) as exc_info:
            _raising(ForecastRunNotFoundException(3))()

        assert exc_info.value.message == "Forecast run 3 not found"

    def test_infrastructure_error_message(self) -> None:
        with pytest.raises(click.ClickException) as exc_info:
            _raising(DatabaseError("connection refused"))()

        assert exc_info.value.message == "Infrastructure error: connection refused"

    def test_unexpected_error_message(self) -> None:
        with pytest.raises(click.ClickException) as exc_info:
            _raising(KeyError("x"))()

        assert exc_info.value.message == "Unexpected error: 'x'"

    def test_click_errors_pass_through(self) -> None:
        error = click.BadParameter("bad")

        with pytest.raises(click.BadParameter) as exc_info:
            _raising(error)()

        assert exc_info.value is error

    def test_return_value(self) -> None:
        @with_error_handling
        def command() -> int:
            return 5

        assert command() == 5
