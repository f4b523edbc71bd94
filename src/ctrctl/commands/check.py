"""Command: pre-flight check a candidate container."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from ctrctl.commands._base import CtrCommand

if TYPE_CHECKING:
    from ctrctl.commands._context import AppContext


@click.command(
    cls=CtrCommand,
    examples="""\
  ctrctl check MSCU1234565 22G1
  ctrctl --json check TCNU1234567 45G1""",
)
@click.argument("number")
@click.argument("iso_code")
@click.pass_obj
def check(app: AppContext, number: str, iso_code: str) -> None:
    """Check that NUMBER and ISO_CODE could be added (required fields, unique number)."""
    app.emit(app.tracker.check_container(number, iso_code))
