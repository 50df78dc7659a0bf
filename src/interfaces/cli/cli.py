"""Command line entry point."""

import click

from src.common.logging import setup_logging
from src.infrastructure.config.settings import get_settings
from src.interfaces.cli.commands.forecast import forecast


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def main(log_level: str | None):
    """Electoral forecast engine."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level, json_format=settings.json_logs)


main.add_command(forecast)


if __name__ == "__main__":
    main()
