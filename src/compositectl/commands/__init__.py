"""Subcommand modules for compositectl.

Provides register_commands(), which imports each command module only
when the root group is built.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every standalone command on the root CLI group."""
    from compositectl.commands.build import build
    from compositectl.commands.resolve import resolve
    from compositectl.commands.specs import specs
    from compositectl.commands.validate import validate

    cli.add_command(build)
    cli.add_command(validate)
    cli.add_command(resolve)
    cli.add_command(specs)
