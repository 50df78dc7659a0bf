"""Forecast CLI command group."""

import click

from src.interfaces.cli.commands.forecast.run import run
from src.interfaces.cli.commands.forecast.scenario import scenario
from src.interfaces.cli.commands.forecast.summary import summary


@click.group()
def forecast():
    """Vote share forecasting commands."""
    pass


forecast.add_command(run)
forecast.add_command(summary)
forecast.add_command(scenario)
