"""Command: show what service references resolve to."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from compositectl.commands._base import CompositeCommand

if TYPE_CHECKING:
    from compositectl.commands._context import AppContext


@click.command(
    cls=CompositeCommand,
    examples="""\
  compositectl resolve core/redis
  compositectl resolve core/builder-api core/builder-router/1.2.0
  compositectl --no-install -q resolve core/redis""",
)
@click.argument("references", nargs=-1, required=True)
@click.pass_obj
def resolve(app: AppContext, references: tuple[str, ...]) -> None:
    """Install and resolve REFERENCES to fully-qualified idents."""
    from compositectl.services.resolve import ResolveService

    svc = ResolveService(app.workspace)
    app.run(lambda: svc.resolve(list(references)))
