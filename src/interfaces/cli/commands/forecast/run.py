"""forecast run command."""

import asyncio
import json

import click

from src.application.dtos.forecast_dto import CreateForecastRunInputDto
from src.domain.entities.forecast_run import ForecastRunStatus
from src.interfaces.cli.base import with_error_handling
from src.interfaces.cli.commands.forecast.summary import echo_summary


def _parse_years(value: str | None) -> list[int] | None:
    if not value:
        return None
    try:
        return [int(y) for y in value.split(",") if y.strip()]
    except ValueError as e:
        raise click.BadParameter(f"Invalid year list: {value}") from e


@click.command()
@click.option("--target-year", type=int, required=True, help="Election year to forecast")
@click.option("--name", default=None, help="Run name")
@click.option("--position", default=None, help="Office filter (e.g. Governador)")
@click.option("--state", default=None, help="State code filter (e.g. SP)")
@click.option("--years", default=None, help="Historical years, comma separated")
@click.option(
    "--parameters",
    default=None,
    help='Model parameter overrides as JSON (e.g. \'{"monte_carlo_iterations": 5000}\')',
)
@with_error_handling
def run(
    target_year: int,
    name: str | None,
    position: str | None,
    state: str | None,
    years: str | None,
    parameters: str | None,
):
    """Create a forecast run, execute it and print the summary."""
    try:
        overrides = json.loads(parameters) if parameters else None
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"--parameters is not valid JSON: {e}") from e

    input_dto = CreateForecastRunInputDto(
        name=name or f"Forecast {target_year}",
        target_year=target_year,
        target_position=position,
        target_state=state,
        historical_years=_parse_years(years),
        model_parameters=overrides,
    )
    asyncio.run(_run_forecast(input_dto))


async def _run_forecast(input_dto: CreateForecastRunInputDto) -> None:
    from src.infrastructure.di.container import get_container, init_container

    try:
        container = get_container()
    except RuntimeError:
        container = init_container()

    launcher = container.use_cases.create_and_run_forecast_usecase()
    forecast_run = await launcher.execute(input_dto)
    click.echo(f"Forecast run {forecast_run.id} created, running...")
    await launcher.wait_for_pending()

    summary = await container.use_cases.get_forecast_summary_usecase().execute(
        forecast_run.id
    )
    if summary is None:
        raise click.ClickException(f"Forecast run {forecast_run.id} not found")
    echo_summary(summary)
    if summary.run.status is ForecastRunStatus.FAILED:
        raise click.ClickException(f"Forecast run {forecast_run.id} failed")
