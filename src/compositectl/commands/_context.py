"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Provides lazy Workspace initialization and
centralized result emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import click

from compositectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from compositectl.config.settings import CompositeSettings
    from compositectl.infrastructure.workspace import Workspace
    from compositectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The workspace is created on first use so ``--help`` and ``--version``
    never load plugins or touch the package store.
    """

    def __init__(self, settings: CompositeSettings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None

        from compositectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from compositectl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def workspace(self) -> Workspace:
        """The workspace (created lazily on first access)."""
        if self._workspace is None:
            from compositectl.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
            self._workspace.init_plugins()
        return self._workspace

    def run(self, operation: Callable[[], ServiceResult]) -> None:
        """Run a service operation and emit its result.

        Store I/O errors are not composite errors; they escape the
        service layer and are reported here as a Click error.
        """
        try:
            result = operation()
        except OSError as exc:
            raise click.ClickException(f"Package store I/O failed: {exc}") from exc
        self.emit(result)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr so piped output
          stays clean.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON output already carries the warnings.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
