"""Command: export containers as serialized records."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from ctrctl.commands._base import CtrCommand

if TYPE_CHECKING:
    from ctrctl.commands._context import AppContext


@click.command(
    cls=CtrCommand,
    examples="""\
  ctrctl export
  ctrctl export > containers.json
  ctrctl apply ops.json --records containers.json""",
)
@click.pass_obj
def export(app: AppContext) -> None:
    """Print the collection as a JSON array of {number, isoCode, createdAt}."""
    result = app.tracker.export_containers()
    if app.settings.json_output or not result.ok:
        app.emit(result)
        return
    click.echo(json.dumps(result.data["records"], indent=2))
