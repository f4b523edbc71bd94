"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich tables and styled fields)
or machines (--json). The formatter layer adapts ServiceResult to the
requested output mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ctrctl.output.renderers import DEFAULT_TIMESTAMP_FORMAT, render_quiet, render_result

if TYPE_CHECKING:
    from ctrctl.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output mode flags resolved from CLI settings."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    width: int | None = None


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON wins over quiet, quiet wins over the Rich renderers.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(
        result,
        verbose=settings.verbose,
        timestamp_format=settings.timestamp_format,
        width=settings.width,
    )
