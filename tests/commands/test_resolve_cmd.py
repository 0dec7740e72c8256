"""Tests for ``compositectl resolve`` and ``compositectl specs``."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from compositectl.cli import cli


class TestResolveCommand:
    @pytest.mark.usefixtures("api_router")
    def test_resolve(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-q", "-c", str(config_file), "resolve", "core/router"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "core/router/1.0.0/20240101000000"

    def test_requires_reference(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-c", str(config_file), "resolve"])
        assert result.exit_code == 2

    def test_origin_required(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-c", str(config_file), "resolve", "redis"])
        assert result.exit_code == 1
        assert "origin required" in result.output


@pytest.mark.usefixtures("api_router")
class TestSpecsCommand:
    def test_specs_after_build(
        self, cli_runner: CliRunner, config_file: Path, plan_file: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "out"
        built = cli_runner.invoke(
            cli, ["-c", str(config_file), "build", str(plan_file), "-o", str(out)]
        )
        assert built.exit_code == 0, built.output
        result = cli_runner.invoke(
            cli, ["-c", str(config_file), "specs", str(out), "--group", "prod"]
        )
        assert result.exit_code == 0, result.output
        assert "router:router.prod" in result.output

    def test_unknown_set(
        self, cli_runner: CliRunner, config_file: Path, plan_file: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "out"
        cli_runner.invoke(cli, ["-c", str(config_file), "build", str(plan_file), "-o", str(out)])
        result = cli_runner.invoke(cli, ["-c", str(config_file), "specs", str(out), "--set", "x"])
        assert result.exit_code == 1
        assert "Service set 'x'" in result.output
