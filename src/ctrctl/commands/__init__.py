"""Subcommand modules for ctrctl.

Provides register_commands() which uses deferred imports to keep
``ctrctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from ctrctl.commands.apply import apply
    from ctrctl.commands.check import check
    from ctrctl.commands.export import export
    from ctrctl.commands.list_cmd import list_cmd

    cli.add_command(list_cmd)
    cli.add_command(check)
    cli.add_command(apply)
    cli.add_command(export)
