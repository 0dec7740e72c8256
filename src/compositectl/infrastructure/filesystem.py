"""Filesystem operations: plan files, run hooks, rendered metadata.

Pure parsing/rendering lives in :mod:`compositectl.domain`. This module
handles actual file I/O and path checks.
"""

from __future__ import annotations

from pathlib import Path

from compositectl.domain.errors import InvalidPlanError
from compositectl.domain.plan import CompositePlan, parse_plan
from compositectl.domain.types import RUN_HOOKS

# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------


def read_plan(path: Path) -> CompositePlan:
    """Read and validate a composite plan file."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise InvalidPlanError(str(path), "file not found") from exc
    return parse_plan(text, source=str(path))


# ---------------------------------------------------------------------------
# Installed packages
# ---------------------------------------------------------------------------


def has_run_hook(pkg_path: Path) -> bool:
    """Whether the package at *pkg_path* has a ``run`` or ``hooks/run`` entry point."""
    return any((pkg_path / hook).exists() for hook in RUN_HOOKS)


# ---------------------------------------------------------------------------
# Rendered metadata
# ---------------------------------------------------------------------------


def write_metadata_files(output_dir: Path, files: dict[str, str]) -> list[Path]:
    """Write rendered metadata files into *output_dir*.

    Creates the directory if needed. Files are written in name order and
    the written paths are returned in the same order.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for name in sorted(files):
        path = output_dir / name
        path.write_text(files[name], encoding="utf-8")
        written.append(path)
    return written
