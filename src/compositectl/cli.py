"""Root CLI group for compositectl with global flags and command registration."""

from __future__ import annotations

import click

from compositectl import __version__
from compositectl.commands import register_commands
from compositectl.commands._base import CompositeGroup
from compositectl.commands._context import AppContext
from compositectl.config.settings import CompositeSettings


@click.group(
    cls=CompositeGroup,
    invoke_without_command=True,
    examples="""\
  compositectl validate
  compositectl build -o results
  compositectl resolve core/redis
  compositectl specs results --group prod""",
)
@click.version_option(version=__version__, prog_name="compositectl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Override config file path.",
)
@click.option("--no-install", is_flag=True, help="Never invoke the package installer.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    no_install: bool,
) -> None:
    """compositectl: build and validate composite service packages."""
    ctx.ensure_object(dict)
    flags = {
        "json_output": json_output,
        "quiet": quiet,
        "verbose": verbose,
        "log_json": log_json,
        "no_install": no_install,
    }
    # Unset flags must not shadow COMPOSITECTL_* env vars.
    settings = CompositeSettings.from_cli(
        config_path=config_path,
        **{name: value for name, value in flags.items() if value},
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
