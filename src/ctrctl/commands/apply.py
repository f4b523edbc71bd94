"""Command: replay a batch of add/edit/delete operations."""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING, Any

import click

from ctrctl.commands._base import CtrCommand
from ctrctl.services.result import ServiceResult

if TYPE_CHECKING:
    from ctrctl.commands._context import AppContext


def _read_json_list(stream: IO[str], op: str) -> list[Any] | ServiceResult:
    """Parse *stream* as a JSON array, or return a failed result describing why."""
    try:
        payload = json.load(stream)
    except json.JSONDecodeError as exc:
        return ServiceResult.failure(op, "INVALID_FORMAT", f"Invalid JSON in {stream.name}: {exc}")
    if not isinstance(payload, list):
        return ServiceResult.failure(
            op, "INVALID_FORMAT", f"Expected a JSON array in {stream.name}"
        )
    return payload


@click.command(
    cls=CtrCommand,
    examples="""\
  ctrctl apply ops.json
  ctrctl apply ops.json --keep-going
  ctrctl apply ops.json --records containers.json
  echo '[{"op": "add", "number": "MSCU1234565", "isoCode": "22G1"}]' | ctrctl apply -""",
)
@click.argument("script", type=click.File("r", encoding="utf-8"))
@click.option("--keep-going", is_flag=True, help="Continue past failed entries.")
@click.option(
    "--records",
    "records_file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="Import exported records before applying the script.",
)
@click.pass_obj
def apply(
    app: AppContext,
    script: IO[str],
    keep_going: bool,
    records_file: IO[str] | None,
) -> None:
    """Apply SCRIPT, a JSON array of add/edit/delete entries ('-' for stdin)."""
    operations = _read_json_list(script, "apply_batch")
    if isinstance(operations, ServiceResult):
        app.emit(operations)
        return

    if records_file is not None:
        records = _read_json_list(records_file, "import_records")
        if isinstance(records, ServiceResult):
            app.emit(records)
            return
        imported = app.tracker.import_records(records)
        if not imported.ok:
            app.emit(imported)
            return

    app.emit(app.tracker.apply_batch(operations, keep_going=keep_going))
