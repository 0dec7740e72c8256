"""Command: build a composite package's metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from compositectl.commands._base import CompositeCommand

if TYPE_CHECKING:
    from compositectl.commands._context import AppContext


@click.command(
    cls=CompositeCommand,
    examples="""\
  compositectl build
  compositectl build plans/builder.toml
  compositectl build -o dist/builder
  compositectl --no-install build
  compositectl --json build""",
)
@click.argument("plan", required=False, type=click.Path(dir_okay=False))
@click.option(
    "-o",
    "--output",
    "output",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the rendered metadata files (default: [build] output_dir).",
)
@click.pass_obj
def build(app: AppContext, plan: str | None, output: str | None) -> None:
    """Validate a composite plan and write its metadata files."""
    from compositectl.services.build import CompositeBuildService

    workspace = app.workspace
    svc = CompositeBuildService(workspace)
    app.run(lambda: svc.build(workspace.plan_path(plan), workspace.output_dir(output)))
