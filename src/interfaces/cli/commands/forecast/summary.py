"""forecast summary command."""

import asyncio

import click

from src.application.dtos.forecast_dto import ForecastSummaryOutputDto
from src.interfaces.cli.base import with_error_handling


def echo_summary(summary: ForecastSummaryOutputDto) -> None:
    """Print a run summary."""
    run = summary.run
    click.echo(f"=== {run.name} (run {run.id}) ===")
    click.echo(f"  Status:       {run.status.value}")
    click.echo(f"  Target year:  {run.target_year}")
    click.echo(f"  Position:     {run.target_position or 'all'}")
    click.echo(f"  State:        {run.target_state or 'national'}")
    if run.historical_years_used:
        years = ", ".join(str(y) for y in run.historical_years_used)
        click.echo(f"  History:      {years}")
    if run.total_simulations:
        click.echo(f"  Simulations:  {run.total_simulations:,} per party")

    if summary.top_parties:
        click.echo("\n=== Party forecasts ===")
        for i, result in enumerate(summary.top_parties, 1):
            click.echo(
                f"  {i:>2}. {result.entity_name:<20} "
                f"{result.predicted_vote_share:6.2f}% "
                f"[{result.vote_share_lower:.2f} - {result.vote_share_upper:.2f}] "
                f"{result.trend_direction:<7} conf {result.confidence:.2f}"
            )

    if summary.swing_regions:
        click.echo("\n=== Swing regions ===")
        for region in summary.swing_regions:
            click.echo(
                f"  {region.region_name}: {region.leading_entity} vs "
                f"{region.challenging_entity}, margin {region.margin_percent:.2f}%, "
                f"uncertainty {region.outcome_uncertainty:.2f}"
            )

    if summary.narrative:
        click.echo("\n=== Narrative ===")
        click.echo(summary.narrative)


@click.command()
@click.argument("run_id", type=int)
@with_error_handling
def summary(run_id: int):
    """Show a stored forecast run."""
    asyncio.run(_show_summary(run_id))


async def _show_summary(run_id: int) -> None:
    from src.infrastructure.di.container import get_container, init_container

    try:
        container = get_container()
    except RuntimeError:
        container = init_container()

    usecase = container.use_cases.get_forecast_summary_usecase()
    result = await usecase.execute(run_id)
    if result is None:
        raise click.ClickException(f"Forecast run {run_id} not found")
    echo_summary(result)
