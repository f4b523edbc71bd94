"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from ctrctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from ctrctl.services.result import ServiceResult

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

EMPTY_MESSAGE = "No containers found."


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    width: int | None = None,
) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console(width=width)
    opts = _RenderOptions(verbose=verbose, timestamp_format=timestamp_format)

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, opts)
    else:
        _render_error(result, console, opts)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("number", "")) for item in items if isinstance(item, dict))

    return f"OK: {result.op}"


def format_timestamp(value: str, fmt: str = DEFAULT_TIMESTAMP_FORMAT) -> str:
    """Render an ISO-8601 stamp in local time; unparseable input is returned as-is."""
    try:
        stamp = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return str(value)
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone()
    return stamp.strftime(fmt)


# ── Helpers ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class _RenderOptions:
    verbose: bool
    timestamp_format: str


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="ctr.ok")
    op = Text(f"  {result.op}", style="ctr.op")
    console.print(Text.assemble(label, op))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="ctr.key")
    if key == "number":
        v = Text(str(value), style="ctr.number")
    elif key == "isoCode":
        v = Text(str(value), style="ctr.iso")
    elif key == "createdAt":
        v = Text(str(value), style="ctr.stamp")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _container_table(items: list[dict[str, Any]], opts: _RenderOptions) -> Table:
    """Build a Rich Table for a list of serialized containers."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", style="ctr.index", justify="right")
    table.add_column("Number", style="ctr.number", no_wrap=True)
    table.add_column("ISO")
    table.add_column("Added", style="ctr.stamp")
    if opts.verbose:
        table.add_column("Created At", style="dim")

    for item in items:
        created = str(item.get("createdAt", ""))
        row = [
            str(item.get("index", "")),
            str(item.get("number", "")),
            str(item.get("isoCode", "")),
            format_timestamp(created, opts.timestamp_format),
        ]
        if opts.verbose:
            row.append(created)
        table.add_row(*(Text(cell) for cell in row))
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, opts: _RenderOptions) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="ctr.error")
    op = Text(f"  {result.op}", style="ctr.op")
    console.print(Text.assemble(label, op, ": ", msg))

    if opts.verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Query renderers ───────────────────────────────────────────────────


def _render_list(result: ServiceResult, console: Console, opts: _RenderOptions) -> None:
    """Render list_containers as a table, or the empty-state message."""
    items = result.data.get("items", [])
    if result.data.get("loading"):
        console.print("Loading containers...")
        return
    if not items:
        console.print(EMPTY_MESSAGE)
        return
    console.print(_container_table(items, opts))
    console.print(f"\n{result.data.get('count', len(items))} containers")


def _render_check(result: ServiceResult, console: Console, opts: _RenderOptions) -> None:
    _status_line(console, result)
    for key in ("number", "isoCode"):
        if key in result.data:
            _field(console, key, result.data[key])


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, opts: _RenderOptions) -> None:
    """Render add/edit/delete results."""
    _status_line(console, result)
    for key in ("number", "isoCode", "createdAt", "removed"):
        if key in result.data:
            _field(console, key, result.data[key])
    if "fields_changed" in result.data:
        _field(console, "fields_changed", ", ".join(result.data["fields_changed"]) or "none")


def _render_batch(result: ServiceResult, console: Console, opts: _RenderOptions) -> None:
    """Render apply_batch results: counts, per-entry errors, final collection."""
    _status_line(console, result)
    _field(console, "applied", result.data.get("applied", 0))
    _field(console, "failed", result.data.get("failed", 0))

    for entry in result.data.get("results", []):
        if not entry.get("ok"):
            console.print(
                Text.assemble(
                    "  ",
                    ("error", "ctr.error"),
                    f" index={entry.get('index')}: {entry.get('error')}",
                )
            )

    items = result.data.get("items", [])
    console.print()
    if items:
        console.print(_container_table(items, opts))
    else:
        console.print(EMPTY_MESSAGE)


def _render_import(result: ServiceResult, console: Console, opts: _RenderOptions) -> None:
    _status_line(console, result)
    _field(console, "imported", result.data.get("imported", 0))
    if opts.verbose:
        for item in result.data.get("items", []):
            console.print(Text(f"    {item.get('number')}  {item.get('isoCode')}"))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, opts: _RenderOptions) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_Renderer = Callable[["ServiceResult", "Console", _RenderOptions], None]

_OP_RENDERERS: dict[str, _Renderer] = {
    "list_containers": _render_list,
    "check_container": _render_check,
    "add_container": _render_mutation,
    "edit_container": _render_mutation,
    "delete_container": _render_mutation,
    "apply_batch": _render_batch,
    "import_records": _render_import,
}
