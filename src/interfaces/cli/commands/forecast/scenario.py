"""forecast scenario command."""

import asyncio
import json

from pathlib import Path

import click

from src.application.dtos.forecast_dto import ForecastSummaryOutputDto
from src.domain.entities.forecast_run import ForecastRun
from src.domain.value_objects.forecast_scenario import ForecastScenario
from src.interfaces.cli.base import with_error_handling
from src.interfaces.cli.commands.forecast.summary import echo_summary


def load_scenario(path: Path) -> ForecastScenario:
    """Read a scenario JSON file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ForecastScenario.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise click.BadParameter(f"Invalid scenario file {path}: {e}") from e


@click.command()
@click.argument(
    "scenario_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@with_error_handling
def scenario(scenario_file: Path):
    """Run a what-if scenario forecast from a JSON file."""
    asyncio.run(_run_scenario(load_scenario(scenario_file)))


async def _run_scenario(forecast_scenario: ForecastScenario) -> None:
    from src.infrastructure.di.container import get_container, init_container

    try:
        container = get_container()
    except RuntimeError:
        container = init_container()

    run_repo = container.repositories.forecast_run_repository()
    forecast_run = await run_repo.create(
        ForecastRun(
            name=f"Cenário: {forecast_scenario.name}",
            description=f"Scenario {forecast_scenario.id}",
            target_year=forecast_scenario.target_year,
            target_position=forecast_scenario.position,
            target_state=forecast_scenario.state,
        )
    )
    if forecast_run.id is None:
        raise click.ClickException("Forecast run was created without an ID")

    usecase = container.use_cases.run_scenario_forecast_usecase()
    output = await usecase.execute(forecast_run.id, forecast_scenario)

    stored = await run_repo.get_by_id(forecast_run.id)
    echo_summary(
        ForecastSummaryOutputDto(
            run=stored or forecast_run,
            top_parties=output.party_results,
            swing_regions=output.swing_regions,
            narrative=output.narrative,
        )
    )
