"""Shared pytest fixtures and test helpers for compositectl tests."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from compositectl.config.models import StoreConfig
from compositectl.config.settings import CompositeSettings
from compositectl.infrastructure.workspace import Workspace
from compositectl.services.telemetry import disable_telemetry

type MakePackage = Callable[..., Path]


def install_package(
    pkg_root: Path,
    ident: str,
    *,
    binds: str | None = None,
    binds_optional: str | None = None,
    exports: str | None = None,
    service: bool = True,
    hook_dir: bool = False,
) -> Path:
    """Lay out a fake installed package under *pkg_root*.

    *ident* is fully qualified (``origin/name/version/release``). Metadata
    files are only written when given, so tests can exercise absent files.
    """
    path = pkg_root / ident
    path.mkdir(parents=True, exist_ok=True)
    (path / "MANIFEST").write_text(f"# {ident}\n", encoding="utf-8")
    if service:
        hook = path / "hooks" / "run" if hook_dir else path / "run"
        hook.parent.mkdir(parents=True, exist_ok=True)
        hook.write_text("#!/bin/sh\nexec true\n", encoding="utf-8")
    for filename, content in (
        ("BINDS", binds),
        ("BINDS_OPTIONAL", binds_optional),
        ("EXPORTS", exports),
    ):
        if content is not None:
            (path / filename).write_text(content, encoding="utf-8")
    return path


def write_plan(root: Path, text: str, name: str = "composite.toml") -> Path:
    """Write a plan file into *root* and return its path."""
    plan = root / name
    plan.write_text(text, encoding="utf-8")
    return plan


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep COMPOSITECTL_* variables and verbose telemetry from leaking between tests."""
    for name in list(os.environ):
        if name.startswith("COMPOSITECTL_"):
            monkeypatch.delenv(name)
    disable_telemetry()


@pytest.fixture
def pkg_root(tmp_path: Path) -> Path:
    """Empty package root under the test's temp directory."""
    root = tmp_path / "pkgs"
    root.mkdir()
    return root


@pytest.fixture
def make_package(pkg_root: Path) -> MakePackage:
    """Factory: ``make_package("core/api/1.0.0/20240101000000", binds=...)``."""

    def _make(ident: str, **kwargs: object) -> Path:
        return install_package(pkg_root, ident, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def settings(tmp_path: Path, pkg_root: Path) -> CompositeSettings:
    """Settings rooted at *tmp_path* with installs disabled."""
    return CompositeSettings.from_cli(
        workspace_root=tmp_path,
        no_install=True,
        store=StoreConfig(pkg_root=str(pkg_root)),
    )


@pytest.fixture
def workspace(settings: CompositeSettings) -> Workspace:
    """Workspace over the temporary package root, without plugins."""
    return Workspace(settings)


@pytest.fixture
def api_router(make_package: MakePackage) -> None:
    """The two-service ``core/api`` + ``core/router`` installation."""
    make_package("core/api/1.0.0/20240101000000", binds="router=listen_addr\n")
    make_package("core/router/1.0.0/20240101000000", exports="listen_addr=0.0.0.0:9631\n")


API_ROUTER_PLAN = """\
services = ["core/api", "core/router"]

[package]
origin = "core"
name = "builder"
version = "1.0.0"
release = "20240601000000"

[bind_map]
"core/api" = ["router:core/router"]
"""
