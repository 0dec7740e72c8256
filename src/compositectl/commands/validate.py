"""Command: validate a composite plan without writing anything."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from compositectl.commands._base import CompositeCommand

if TYPE_CHECKING:
    from compositectl.commands._context import AppContext


@click.command(
    cls=CompositeCommand,
    examples="""\
  compositectl validate
  compositectl validate plans/builder.toml
  compositectl -v validate""",
)
@click.argument("plan", required=False, type=click.Path(dir_okay=False))
@click.pass_obj
def validate(app: AppContext, plan: str | None) -> None:
    """Resolve services and check every bind mapping and service set."""
    from compositectl.services.build import CompositeBuildService

    workspace = app.workspace
    svc = CompositeBuildService(workspace)
    app.run(lambda: svc.validate(workspace.plan_path(plan)))
