"""Tests for workspace discovery: config walk-up, nearest plan, config checks."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from compositectl.config.discovery import CONFIG_ENV_VAR, find_config, find_plan, load_config
from compositectl.config.settings import CompositeSettings


class TestFindConfig:
    def test_walks_up(self, tmp_path: Path) -> None:
        config = tmp_path / "compositectl.toml"
        config.write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == config.resolve()

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "compositectl.toml").write_text("")
        other = tmp_path / "other.toml"
        other.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))
        assert find_config(tmp_path) == other

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "compositectl.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None


class TestFindPlan:
    def test_nearest_plan_wins(self, tmp_path: Path) -> None:
        (tmp_path / "composite.toml").write_text("")
        plan_dir = tmp_path / "plans" / "api"
        cwd = plan_dir / "hooks"
        cwd.mkdir(parents=True)
        plan = plan_dir / "composite.toml"
        plan.write_text("")
        assert find_plan(cwd, tmp_path, "composite.toml") == plan.resolve()

    def test_stops_at_root(self, tmp_path: Path) -> None:
        (tmp_path / "composite.toml").write_text("")
        root = tmp_path / "ws"
        cwd = root / "sub"
        cwd.mkdir(parents=True)
        assert find_plan(cwd, root, "composite.toml") is None

    def test_start_outside_root(self, tmp_path: Path) -> None:
        root = tmp_path / "ws"
        root.mkdir()
        (root / "composite.toml").write_text("")
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        assert find_plan(elsewhere, root, "composite.toml") is None

    def test_custom_plan_name(self, tmp_path: Path) -> None:
        plan = tmp_path / "stack.toml"
        plan.write_text("")
        assert find_plan(tmp_path, tmp_path, "stack.toml") == plan.resolve()

    def test_absolute_plan_file_not_searched(self, tmp_path: Path) -> None:
        plan = tmp_path / "composite.toml"
        plan.write_text("")
        assert find_plan(tmp_path, tmp_path, str(plan)) is None


class TestLoadConfig:
    def test_sparse_tables_returned(self, tmp_path: Path) -> None:
        path = tmp_path / "compositectl.toml"
        path.write_text('[build]\noutput_dir = "dist"\n')
        assert load_config(path) == {"build": {"output_dir": "dist"}}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "compositectl.toml"
        path.write_text("[store\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            load_config(path)

    def test_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "compositectl.toml"
        path.write_bytes(b'[build]\ntarget = "\xff"\n')
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            load_config(path)

    def test_unknown_section_named(self, tmp_path: Path) -> None:
        path = tmp_path / "compositectl.toml"
        path.write_text('[stor]\npkg_root = "/opt/pkgs"\n')
        with pytest.raises(click.ClickException, match="stor"):
            load_config(path)

    def test_unknown_key_named(self, tmp_path: Path) -> None:
        path = tmp_path / "compositectl.toml"
        path.write_text('[build]\ntargte = "aarch64-linux"\n')
        with pytest.raises(click.ClickException, match=r"build\.targte"):
            load_config(path)

    def test_wrong_type(self, tmp_path: Path) -> None:
        path = tmp_path / "compositectl.toml"
        path.write_text('[store]\ninstaller = "hab pkg install"\n')
        with pytest.raises(click.ClickException, match=r"store\.installer"):
            load_config(path)


class TestSettingsDiscovery:
    def test_plan_found_from_subdirectory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "compositectl.toml").write_text("")
        plan_dir = tmp_path / "plans" / "api"
        cwd = plan_dir / "hooks"
        cwd.mkdir(parents=True)
        (plan_dir / "composite.toml").write_text("")
        monkeypatch.chdir(cwd)
        settings = CompositeSettings.from_cli()
        assert settings.workspace_root.resolve() == tmp_path.resolve()
        assert settings.plan_path == (plan_dir / "composite.toml").resolve()

    def test_plan_file_name_from_config(self, tmp_path: Path) -> None:
        (tmp_path / "compositectl.toml").write_text('[build]\nplan_file = "stack.toml"\n')
        (tmp_path / "stack.toml").write_text("")
        settings = CompositeSettings.from_cli(workspace_root=tmp_path)
        assert settings.plan_path == (tmp_path / "stack.toml").resolve()

    def test_no_plan(self, tmp_path: Path) -> None:
        settings = CompositeSettings.from_cli(workspace_root=tmp_path)
        assert settings.plan_path is None
