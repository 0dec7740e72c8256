"""Rich Console factory and theme for compositectl output.

Consoles render into a StringIO buffer so ``format_result() -> str``
stays a plain function. Rich disables color codes on its own when the
output is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

COMPOSITE_THEME = Theme(
    {
        "cmp.ok": "bold green",
        "cmp.error": "bold red",
        "cmp.warning": "bold yellow",
        "cmp.op": "bold cyan",
        "cmp.key": "dim",
        "cmp.ident": "bold blue",
        "cmp.ref": "bold",
        "cmp.path": "dim",
        "cmp.bind": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width for stable output.
    """
    return Console(
        file=StringIO(),
        theme=COMPOSITE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
