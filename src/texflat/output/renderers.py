"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from texflat.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from texflat.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
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
        return f"ERROR: {result.op} — {msg}"

    # Plans list target names only, one per line
    files = result.data.get("files")
    if result.op == "plan_flatten" and isinstance(files, list):
        return "\n".join(str(item.get("target", "")) for item in files)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="texflat.ok")
    op = Text(f"  {result.op}", style="texflat.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    style = "texflat.path" if key in ("input", "output", "path") else ""
    console.print(
        Text.assemble((f"  {key}: ", "texflat.key"), (str(value), style)), soft_wrap=True
    )


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
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


def _file_table(files: list[dict[str, Any]]) -> Table:
    """Build a Rich Table of source → flat target rows."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Source", style="texflat.path")
    table.add_column("Target", style="texflat.target", no_wrap=True)
    table.add_column("Kind")

    for item in files:
        document = bool(item.get("document"))
        kind = Text("rewrite" if document else "copy", style=style_for_kind(document))
        table.add_row(
            Text(str(item.get("source", ""))), Text(str(item.get("target", ""))), kind
        )
    return table


def _render_collisions(console: Console, collisions: list[dict[str, Any]]) -> None:
    console.print(Text(f"  collisions ({len(collisions)}):", style="texflat.warning"))
    for c in collisions:
        console.print(
            Text(f"    {c.get('previous')} + {c.get('current')} -> {c.get('flat_name')}")
        )


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="texflat.error")
    op = Text(f"  {result.op}", style="texflat.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg), soft_wrap=True)

    if err is None or not err.detail:
        return
    collisions = err.detail.get("collisions")
    if isinstance(collisions, list):
        _render_collisions(console, collisions)
    if verbose:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            if k != "collisions":
                console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_flatten(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in (
        "input",
        "output",
        "file_count",
        "document_count",
        "copied_count",
        "reference_count",
        "collision_count",
    ):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        files = result.data.get("files") or []
        if files:
            console.print()
            console.print(_file_table(files))
        _render_meta(console, result)


def _render_plan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("input", "output", "file_count", "document_count"):
        if key in result.data:
            _field(console, key, result.data[key])

    files = result.data.get("files") or []
    if files:
        console.print()
        console.print(_file_table(files))

    collisions = result.data.get("collisions") or []
    if collisions:
        console.print()
        _render_collisions(console, collisions)
    if verbose:
        _render_meta(console, result)


def _render_rewrite(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("path", "reference_count"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "flatten": _render_flatten,
    "plan_flatten": _render_plan,
    "rewrite": _render_rewrite,
}
