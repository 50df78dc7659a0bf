"""forecast scenario command tests."""

import json

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import click
import pytest

from click.testing import CliRunner

from src.application.dtos.forecast_dto import ForecastOutputDto
from src.application.usecases.run_scenario_forecast_usecase import (
    RunScenarioForecastUseCase,
)
from src.domain.entities.forecast_run import ForecastRun
from src.domain.repositories.forecast_run_repository import ForecastRunRepository
from src.interfaces.cli.commands.forecast.scenario import load_scenario, scenario


_DI_PATH = "src.infrastructure.di.container"

SCENARIO = {
    "id": 4,
    "name": "Polarização",
    "base_year": 2022,
    "target_year": 2026,
    "polling_data": [{"party": "PA", "poll_percent": 45.0}],
}


@pytest.fixture
def scenario_file(tmp_path: Path) -> Path:
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps(SCENARIO), encoding="utf-8")
    return path


class TestLoadScenario:
    def test_loads_file(self, scenario_file: Path) -> None:
        loaded = load_scenario(scenario_file)

        assert loaded.id == 4
        assert loaded.polling_data[0].party == "PA"

    def test_missing_field(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"id": 1}), encoding="utf-8")

        with pytest.raises(click.BadParameter):
            load_scenario(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(click.BadParameter):
            load_scenario(path)


class TestScenarioCommand:
    @patch(f"{_DI_PATH}.get_container")
    def test_runs_scenario(
        self, mock_get_container: MagicMock, scenario_file: Path
    ) -> None:
        mock_container = MagicMock()
        mock_get_container.return_value = mock_container
        run_repo = AsyncMock(spec=ForecastRunRepository)
        created = ForecastRun(name="Cenário: Polarização", target_year=2026, id=12)
        run_repo.create.return_value = created
        run_repo.get_by_id.return_value = created
        mock_container.repositories.forecast_run_repository.return_value = run_repo
        usecase = AsyncMock(spec=RunScenarioForecastUseCase)
        usecase.execute.return_value = ForecastOutputDto(narrative="Narrativa.")
        mock_container.use_cases.run_scenario_forecast_usecase.return_value = usecase

        runner = CliRunner()
        result = runner.invoke(scenario, [str(scenario_file)])

        assert result.exit_code == 0, result.output
        assert "Cenário: Polarização (run 12)" in result.output
        assert "Narrativa." in result.output
        created_run = run_repo.create.await_args.args[0]
        assert created_run.target_year == 2026
        assert usecase.execute.await_args.args[0] == 12
        assert usecase.execute.await_args.args[1].name == "Polarização"

    def test_missing_file(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(scenario, [str(tmp_path / "missing.json")])

        assert result.exit_code == 2
