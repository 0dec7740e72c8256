"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console backed by StringIO; the caller
extracts the text via ``get_output(console)``. Renderers are dispatched
by ``result.op`` in :func:`render_result`. Unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from compositectl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from compositectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text when Rich detects no terminal, which is the case
    inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    d = result.data
    if result.op == "build_composite":
        return "\n".join(d.get("files", []))
    if result.op == "validate_composite":
        return str(d.get("ident", f"OK: {result.op}"))
    items = d.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("ident", "")) for item in items if isinstance(item, dict))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="cmp.ok")
    op = Text(f"  {result.op}", style="cmp.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="cmp.key")
    if key == "ident":
        v = Text(str(value), style="cmp.ident")
    elif key.endswith("path") or key.endswith("_dir"):
        v = Text(str(value), style="cmp.path")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _resolved_table(resolved: dict[str, str]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Reference", style="cmp.ref", no_wrap=True)
    table.add_column("Resolved", style="cmp.ident", no_wrap=True)
    for reference, ident in resolved.items():
        table.add_row(reference, ident)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="cmp.error")
    op = Text(f"  {result.op}", style="cmp.op")
    console.print(label, op, Text(": "), msg)

    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        if err.detail:
            console.print(Text("  detail:", style="dim"))
            for k, v in err.detail.items():
                console.print(f"    {k}: {v}")


# ── Composite renderers ───────────────────────────────────────────────


def _render_composite(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render validate_composite and build_composite results."""
    d = result.data
    _status_line(console, result)
    for key in ("ident", "target", "bind_count", "output_dir"):
        if key in d:
            _field(console, key, d[key])

    if d.get("resolved"):
        console.print()
        console.print(_resolved_table(d["resolved"]))

    if d.get("files") and verbose:
        console.print()
        console.print(Text("  files:", style="cmp.key"))
        for name in d["files"]:
            console.print(f"    {name}")

    if verbose and d.get("unmapped"):
        console.print()
        console.print(Text("  unmapped binds:", style="cmp.warning"))
        for u in d["unmapped"]:
            console.print(f"    {u['service']}: [cmp.bind]{u['bind_name']}[/cmp.bind]")

    if verbose:
        _render_meta(console, result)


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "count", result.data.get("count", 0))

    items = result.data.get("items", [])
    if not items:
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Reference", style="cmp.ref", no_wrap=True)
    table.add_column("Resolved", style="cmp.ident", no_wrap=True)
    table.add_column("Service")
    if verbose:
        table.add_column("Path", style="cmp.path")
    for item in items:
        row = [item["reference"], item["ident"], "yes" if item["is_service"] else "no"]
        if verbose:
            row.append(item["path"])
        table.add_row(*row)
    console.print()
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_specs(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "ident", d.get("ident", ""))
    _field(console, "type", d.get("pkg_type", ""))
    if d.get("set_name"):
        _field(console, "set", d["set_name"])

    items = d.get("items", [])
    if items:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Service", style="cmp.ident", no_wrap=True)
        table.add_column("Group")
        table.add_column("Binds", style="cmp.bind")
        for item in items:
            table.add_row(item["ident"], item["group"], " ".join(item.get("binds", [])))
        console.print()
        console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line plus all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "validate_composite": _render_composite,
    "build_composite": _render_composite,
    "resolve_services": _render_resolve,
    "composite_specs": _render_specs,
}
