"""Locate the workspace of a composite build.

Two files mark a workspace. ``compositectl.toml`` sets its root and its
configuration; the plan file (``composite.toml`` unless ``[build]
plan_file`` says otherwise) names the composite to build. A build started
from inside a plan's subdirectory still finds both::

    repo/compositectl.toml        <- config, workspace root
    repo/plans/api/composite.toml <- nearest plan
    repo/plans/api/hooks/         <- cwd

``COMPOSITECTL_CONFIG`` (or ``--config``) skips the config walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from compositectl.config.models import CompositeConfig

CONFIG_FILENAME = "compositectl.toml"
CONFIG_ENV_VAR = "COMPOSITECTL_CONFIG"


def _ancestors(start: Path, stop: Path | None = None) -> list[Path]:
    """*start* and its parents, innermost first.

    With *stop*, the chain ends there and is empty when *start* lies
    outside it.
    """
    current = start.resolve()
    chain = [current, *current.parents]
    if stop is None:
        return chain
    stop = stop.resolve()
    if stop not in chain:
        return []
    return chain[: chain.index(stop) + 1]


def find_config(start: Path | None = None) -> Path | None:
    """The config in effect for a build started at *start* (default: cwd).

    An env override that names a missing file means "no config", not a
    fall back to the walk.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    for directory in _ancestors(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_plan(start: Path, root: Path, plan_file: str) -> Path | None:
    """Nearest *plan_file* from *start* up to the workspace *root*.

    An absolute *plan_file* is not searched for; the workspace resolves it.
    """
    if Path(plan_file).is_absolute():
        return None
    for directory in _ancestors(start, stop=root):
        candidate = directory / plan_file
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> dict[str, Any]:
    """Read and check the sections of the config file at *path*.

    Returns the raw tables so unset keys stay unset for the settings
    merge. Unknown sections or keys and wrong value types are rejected
    here, naming the file, rather than surfacing as a settings error.
    """
    try:
        data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc

    try:
        CompositeConfig.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        msg = f"Invalid config in {path}: {problems}"
        raise click.ClickException(msg) from exc
    return data
