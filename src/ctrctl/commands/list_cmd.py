"""Command: list tracked containers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ctrctl.commands._base import CtrCommand

if TYPE_CHECKING:
    from ctrctl.commands._context import AppContext


@click.command(
    "list",
    cls=CtrCommand,
    examples="""\
  ctrctl list
  ctrctl -v list
  ctrctl --json list
  ctrctl -q list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List containers in display order (waits for the initial load)."""
    app.emit(app.tracker.list_containers())
