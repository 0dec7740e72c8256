"""Command: expand a built composite into per-service run specs."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from compositectl.commands._base import CompositeCommand

if TYPE_CHECKING:
    from compositectl.commands._context import AppContext


@click.command(
    cls=CompositeCommand,
    examples="""\
  compositectl specs results
  compositectl specs /hab/pkgs/core/builder/1.0.0/20240101000000 --group prod
  compositectl specs results --set frontend""",
)
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--group", default="default", show_default=True, help="Service group suffix.")
@click.option("--set", "set_name", default=None, help="Only members of this named set.")
@click.pass_obj
def specs(app: AppContext, directory: Path, group: str, set_name: str | None) -> None:
    """Read composite metadata in DIRECTORY and print one spec per service."""
    from compositectl.services.specs import CompositeSpecService

    svc = CompositeSpecService(app.workspace)
    app.run(lambda: svc.expand(directory, group=group, set_name=set_name))
