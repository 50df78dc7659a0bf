"""Dependency injection container.

Providers are grouped the way callers use them::

    container = init_container()
    container.repositories.forecast_run_repository()
    container.services.forecast_narrative_service()
    container.use_cases.get_forecast_summary_usecase()

Every resolved repository gets a new session. A background forecast run
enters ``run_forecast_scope``, whose repositories share one session that is
closed when the run finishes.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from dependency_injector import containers, providers
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.services.forecast_narrative_service import (
    ForecastNarrativeService,
)
from src.application.usecases.create_and_run_forecast_usecase import (
    CreateAndRunForecastUseCase,
)
from src.application.usecases.get_forecast_summary_usecase import (
    GetForecastSummaryUseCase,
)
from src.application.usecases.run_forecast_usecase import RunForecastUseCase
from src.application.usecases.run_scenario_forecast_usecase import (
    RunScenarioForecastUseCase,
)
from src.domain.services.monte_carlo_simulator import MonteCarloSimulator
from src.infrastructure.config.async_database import async_db
from src.infrastructure.config.settings import Settings, get_settings
from src.infrastructure.external.narrative_generation import (
    LangChainNarrativeGenerationService,
    create_chat_model,
)
from src.infrastructure.persistence.forecast_result_repository_impl import (
    ForecastResultRepositoryImpl,
)
from src.infrastructure.persistence.forecast_run_repository_impl import (
    ForecastRunRepositoryImpl,
)
from src.infrastructure.persistence.historical_vote_repository_impl import (
    HistoricalVoteRepositoryImpl,
)
from src.infrastructure.persistence.swing_region_repository_impl import (
    SwingRegionRepositoryImpl,
)


@asynccontextmanager
async def run_forecast_session_scope(
    session_factory: Callable[[], AsyncSession],
    narrative_service: ForecastNarrativeService,
    simulator: MonteCarloSimulator,
) -> AsyncIterator[RunForecastUseCase]:
    """Yield a RunForecastUseCase whose repositories share one new session."""
    async with session_factory() as session:
        yield RunForecastUseCase(
            forecast_run_repository=ForecastRunRepositoryImpl(session),
            forecast_result_repository=ForecastResultRepositoryImpl(session),
            swing_region_repository=SwingRegionRepositoryImpl(session),
            historical_vote_repository=HistoricalVoteRepositoryImpl(session),
            narrative_service=narrative_service,
            simulator=simulator,
        )


class DatabaseContainer(containers.DeclarativeContainer):
    """Database session provider."""

    async_session = providers.Factory(lambda: async_db.async_session_maker())


class RepositoryContainer(containers.DeclarativeContainer):
    """Repository providers."""

    database = providers.DependenciesContainer()

    forecast_run_repository = providers.Factory(
        ForecastRunRepositoryImpl, session=database.async_session
    )
    forecast_result_repository = providers.Factory(
        ForecastResultRepositoryImpl, session=database.async_session
    )
    swing_region_repository = providers.Factory(
        SwingRegionRepositoryImpl, session=database.async_session
    )
    historical_vote_repository = providers.Factory(
        HistoricalVoteRepositoryImpl, session=database.async_session
    )


class ServiceContainer(containers.DeclarativeContainer):
    """External service and simulation providers."""

    settings = providers.Dependency(instance_of=Settings)

    chat_model = providers.Singleton(create_chat_model, settings=settings)
    narrative_generation_service = providers.Singleton(
        LangChainNarrativeGenerationService, llm=chat_model
    )
    forecast_narrative_service = providers.Factory(
        ForecastNarrativeService, narrative_service=narrative_generation_service
    )
    monte_carlo_simulator = providers.Singleton(
        MonteCarloSimulator, rng=settings.provided.forecast_random_seed
    )


class UseCaseContainer(containers.DeclarativeContainer):
    """Use case providers."""

    database = providers.DependenciesContainer()
    repositories = providers.DependenciesContainer()
    services = providers.DependenciesContainer()

    run_scenario_forecast_usecase = providers.Factory(
        RunScenarioForecastUseCase,
        forecast_run_repository=repositories.forecast_run_repository,
        forecast_result_repository=repositories.forecast_result_repository,
        swing_region_repository=repositories.swing_region_repository,
        historical_vote_repository=repositories.historical_vote_repository,
        narrative_service=services.forecast_narrative_service,
        simulator=services.monte_carlo_simulator,
    )
    run_forecast_scope = providers.Factory(
        run_forecast_session_scope,
        session_factory=database.async_session.provider,
        narrative_service=services.forecast_narrative_service,
        simulator=services.monte_carlo_simulator,
    )
    # Singleton: holds references to the background tasks it schedules.
    create_and_run_forecast_usecase = providers.Singleton(
        CreateAndRunForecastUseCase,
        forecast_run_repository=repositories.forecast_run_repository,
        run_forecast_scope=run_forecast_scope.provider,
    )
    get_forecast_summary_usecase = providers.Factory(
        GetForecastSummaryUseCase,
        forecast_run_repository=repositories.forecast_run_repository,
        forecast_result_repository=repositories.forecast_result_repository,
        swing_region_repository=repositories.swing_region_repository,
    )


class Container(containers.DeclarativeContainer):
    """Application container."""

    settings = providers.Singleton(get_settings)

    database = providers.Container(DatabaseContainer)
    repositories = providers.Container(RepositoryContainer, database=database)
    services = providers.Container(ServiceContainer, settings=settings)
    use_cases = providers.Container(
        UseCaseContainer,
        database=database,
        repositories=repositories,
        services=services,
    )


_container: Container | None = None


def init_container() -> Container:
    """Create the global container."""
    global _container
    _container = Container()
    return _container


def get_container() -> Container:
    """Return the global container.

    Raises:
        RuntimeError: If init_container() has not been called
    """
    if _container is None:
        raise RuntimeError("Container not initialized. Call init_container() first.")
    return _container


def reset_container() -> None:
    global _container
    _container = None
