"""Tests for the root compositectl CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from compositectl import __version__
from compositectl.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "compositectl" in result.output
    for command in ("build", "validate", "resolve", "specs"):
        assert command in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize(
    "flag", ["--json", "-q", "--quiet", "-v", "--verbose", "--log-json", "--no-install"]
)
def test_global_flags_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--help"])
    assert result.exit_code == 0


def test_invalid_config_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    bad = tmp_path / "compositectl.toml"
    bad.write_text("[store\n")
    result = cli_runner.invoke(cli, ["-c", str(bad), "resolve", "core/x"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.output
