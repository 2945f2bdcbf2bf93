"""CLI tests for the MPR command."""

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
from click.testing import CliRunner

from model_pricing_registry import config_paths
from model_pricing_registry.cli import app
from model_pricing_registry.cli.utils.helpers import ExitCode


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def pricing_file(write_json: Callable[[str, Any], Path], pricing_source: Dict[str, Any]) -> Path:
    """Pricing file with the shared pricing source."""
    return write_json("prices.json", pricing_source)


def _invoke(cli_runner: CliRunner, pricing_file: Path, *args: str) -> Any:
    return cli_runner.invoke(app, ["--pricing-path", str(pricing_file), *args])


class TestGlobalOptions:
    """Tests for the root command."""

    def test_version(self, cli_runner: CliRunner) -> None:
        """--version prints the versions and exits."""
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "MPR CLI version" in result.stdout

    def test_help_without_command(self, cli_runner: CliRunner) -> None:
        """Running without a command shows help."""
        result = cli_runner.invoke(app, [])
        assert result.exit_code == 0
        assert "models" in result.stdout

    def test_invalid_alias(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """Aliases must look like NAME=TARGET."""
        result = _invoke(cli_runner, pricing_file, "--alias", "broken", "models", "list")
        assert result.exit_code == ExitCode.INVALID_USAGE

    def test_invalid_preset(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """Unknown presets are rejected by click."""
        result = _invoke(cli_runner, pricing_file, "--preset", "nope", "models", "list")
        assert result.exit_code == 2


class TestModelsCommands:
    """Tests for `mpr models`."""

    def test_list(self, cli_runner: CliRunner, pricing_file: Path, pricing_source: Dict[str, Any]) -> None:
        """All keys are listed in dataset order."""
        result = _invoke(cli_runner, pricing_file, "models", "list")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["models"] == list(pricing_source)
        assert data["count"] == len(pricing_source)

    def test_list_filter(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """--filter keeps keys containing the text."""
        result = _invoke(cli_runner, pricing_file, "models", "list", "--filter", "glm")
        data = json.loads(result.stdout)
        assert data["models"] == ["glm-4.5", "zai/glm-4.5"]

    def test_get(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """models get shows the resolved key, phase and pricing."""
        result = _invoke(cli_runner, pricing_file, "models", "get", "claude-sonnet-4-20250514")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["key"] == "claude-sonnet-4-20250514"
        assert data["phase"] == "direct"
        assert data["pricing"]["input_cost_per_token"] == 3e-6
        assert data["per_million"]["input"] == pytest.approx(3.0)
        assert data["context_limit"] == 1_000_000

    def test_get_fuzzy(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """Fuzzy matches report their score."""
        result = _invoke(cli_runner, pricing_file, "models", "get", "glm")
        data = json.loads(result.stdout)
        assert data["key"] == "zai/glm-4.5"
        assert data["phase"] == "fuzzy"
        assert data["score"] == 95

    def test_get_with_alias(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """--alias routes a name to another key."""
        result = _invoke(cli_runner, pricing_file, "--alias", "my-model=gpt-5", "models", "get", "my-model")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["key"] == "gpt-5"

    def test_get_not_found(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """Unknown models exit with MODEL_NOT_FOUND."""
        result = _invoke(cli_runner, pricing_file, "models", "get", "totally-unknown-model-xyz")
        assert result.exit_code == ExitCode.MODEL_NOT_FOUND
        assert "not found" in result.stderr

    def test_no_pricing_data(self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing pricing source exits with DATA_SOURCE_ERROR."""
        monkeypatch.setattr(config_paths, "get_bundled_pricing_path", lambda: tmp_path / "missing.json")
        result = cli_runner.invoke(app, ["--pricing-path", str(tmp_path / "nope.json"), "models", "list"])
        assert result.exit_code == ExitCode.DATA_SOURCE_ERROR
        assert "No pricing data available" in result.stderr


class TestCostCommand:
    """Tests for `mpr cost`."""

    def test_cost(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """Total cost is reported in USD."""
        result = _invoke(
            cli_runner,
            pricing_file,
            "cost",
            "claude-sonnet-4-20250514",
            "--input",
            "300000",
            "--output",
            "250000",
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        expected = (200_000 * 3e-6 + 100_000 * 6e-6) + (200_000 * 1.5e-5 + 50_000 * 2.25e-5)
        assert data["total_cost"] == pytest.approx(expected)
        assert data["key"] == "claude-sonnet-4-20250514"
        assert "breakdown" not in data

    def test_cost_breakdown(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """--breakdown adds per-category costs."""
        result = _invoke(
            cli_runner,
            pricing_file,
            "cost",
            "gpt-5",
            "--input",
            "1000",
            "--cache-read",
            "1000",
            "--cache-creation",
            "10",
            "--breakdown",
        )
        data = json.loads(result.stdout)
        assert data["breakdown"]["input_cost"] == pytest.approx(1000 * 1.25e-6)
        assert data["breakdown"]["cache_read_cost"] == pytest.approx(1000 * 1.25e-7)
        assert data["breakdown"]["cache_creation_cost"] == 0.0
        assert data["breakdown"]["total_cost"] == pytest.approx(data["total_cost"])

    def test_cost_not_found(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """Unknown models exit with MODEL_NOT_FOUND instead of printing zero."""
        result = _invoke(cli_runner, pricing_file, "cost", "totally-unknown-model-xyz", "--input", "10")
        assert result.exit_code == ExitCode.MODEL_NOT_FOUND
        assert result.stdout == ""

    def test_negative_tokens_rejected(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """Token counts must be non-negative."""
        result = _invoke(cli_runner, pricing_file, "cost", "gpt-5", "--input", "-1")
        assert result.exit_code == 2

    def test_preset_none_disables_prefixes(self, cli_runner: CliRunner, write_json: Callable[[str, Any], Path]) -> None:
        """With --preset none a bare id no longer finds the openai/ key directly."""
        path = write_json("prefixed.json", {"openai/gpt-x": {"input_cost_per_token": 1e-6}})

        default = cli_runner.invoke(app, ["--pricing-path", str(path), "models", "get", "gpt-x"])
        disabled = cli_runner.invoke(app, ["--pricing-path", str(path), "--preset", "none", "models", "get", "gpt-x"])

        assert json.loads(default.stdout)["phase"] == "direct"
        assert json.loads(disabled.stdout)["phase"] == "suffix"


class TestDataCommands:
    """Tests for `mpr data`."""

    def test_paths(self, cli_runner: CliRunner, pricing_file: Path) -> None:
        """The active pricing file is the first existing candidate."""
        result = _invoke(cli_runner, pricing_file, "data", "paths")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["active_pricing_file"] == str(pricing_file)
        assert data["pricing_files"][0] == {"path": str(pricing_file), "exists": True}
        assert data["overrides_file"] is None

    def test_env(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        """MPR_* variables are reported, set or not."""
        monkeypatch.setenv("MPR_PRICING_PATH", "/tmp/prices.json")
        result = cli_runner.invoke(app, ["data", "env"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["environment_variables"]["MPR_PRICING_PATH"] == {"value": "/tmp/prices.json", "set": True}
        assert data["environment_variables"]["MPR_OVERRIDES_PATH"]["set"] is False
