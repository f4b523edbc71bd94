"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy registry initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import click

from ctrctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from ctrctl.config.models import RegistryConfig
    from ctrctl.config.settings import CtrSettings
    from ctrctl.services.registry import ContainerRegistry
    from ctrctl.services.result import ServiceResult
    from ctrctl.services.tracker import TrackerService

logger = logging.getLogger(__name__)


async def open_registry(config: RegistryConfig) -> ContainerRegistry:
    """Create a registry inside the running loop and wait for its initial load."""
    from ctrctl.services.registry import ContainerRegistry

    registry = ContainerRegistry(
        seed=config.seed_records(),
        load_delay=config.load_delay_seconds,
    )
    if registry.load_task is not None:
        await registry.load_task
    return registry


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The registry is
    created lazily on first use so ``--help`` and ``--version`` never
    wait on the simulated initial load.
    """

    def __init__(self, settings: CtrSettings) -> None:
        self.settings = settings
        self._tracker: TrackerService | None = None

        # Configure structured logging
        from ctrctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def tracker(self) -> TrackerService:
        """The tracker service over a fully loaded registry (created lazily)."""
        if self._tracker is None:
            from ctrctl.services.tracker import TrackerService

            registry = asyncio.run(open_registry(self.settings.registry))
            logger.debug("Registry ready with %d containers", len(registry))
            self._tracker = TrackerService(registry)
        return self._tracker

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            timestamp_format=self.settings.output.timestamp_format,
            width=self.settings.output.width,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
