"""Rich/JSON output helpers.

The CLI renders a ServiceResult either for humans (Rich tables and
colors) or for machines (``--json``). ``--quiet`` prints only the
essentials: resolved idents, written files, or a status line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from compositectl.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output mode selected by the global CLI flags."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON wins over quiet; quiet wins over the Rich renderers.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    from compositectl.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
