"""Shared helpers for CLI commands."""

import functools

from collections.abc import Callable
from typing import Any, TypeVar

import click

from src.common.logging import get_logger
from src.domain.exceptions import DomainException
from src.infrastructure.exceptions import InfrastructureException


logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(func: F) -> F:
    """Turn known exceptions into click errors with a readable message."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except DomainException as e:
            logger.warning("Command failed", error=e.message, details=e.details)
            raise click.ClickException(e.message) from e
        except InfrastructureException as e:
            logger.error("Command failed", error=e.message, details=e.details)
            raise click.ClickException(f"Infrastructure error: {e.message}") from e
        except Exception as e:
            logger.exception("Unexpected error in command")
            raise click.ClickException(f"Unexpected error: {e}") from e

    return wrapper  # type: ignore[return-value]
