"""Fixtures for CLI command tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.conftest import API_ROUTER_PLAN, write_plan


@pytest.fixture
def config_file(tmp_path: Path, pkg_root: Path) -> Path:
    """compositectl.toml pointing the store at the temporary package root."""
    path = tmp_path / "compositectl.toml"
    path.write_text(
        f'[store]\npkg_root = "{pkg_root.as_posix()}"\nno_install = true\n'
        "[plugins]\nenabled = false\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def plan_file(tmp_path: Path) -> Path:
    return write_plan(tmp_path, API_ROUTER_PLAN)
