"""Shared pytest fixtures and test helpers for ctrctl tests."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from click.testing import CliRunner

from ctrctl.domain.records import ContainerRecord
from ctrctl.services.registry import ContainerRegistry
from ctrctl.services.tracker import TrackerService

BASE_TIME = datetime(2024, 5, 1, 9, 30, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from an empty directory with no config and no load delay."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CTRCTL_CONFIG", raising=False)
    monkeypatch.setenv("CTRCTL_REGISTRY__LOAD_DELAY_SECONDS", "0")


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() side effects from CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    ctr = logging.getLogger("ctrctl")
    ctr_level = ctr.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    ctr.setLevel(ctr_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def registry() -> ContainerRegistry:
    """Empty, unloaded registry (no event loop, so nothing is scheduled)."""
    return ContainerRegistry(load_delay=0, autoload=False)


@pytest.fixture
def loaded_registry(registry: ContainerRegistry) -> ContainerRegistry:
    """Registry after the initial load has completed."""
    asyncio.run(registry.load_initial())
    return registry


@pytest.fixture
def tracker(loaded_registry: ContainerRegistry) -> TrackerService:
    """TrackerService over a loaded registry."""
    return TrackerService(loaded_registry)


@pytest.fixture
def change_log(registry: ContainerRegistry) -> Generator[list[str]]:
    """Records one entry per change notification from ``registry``."""
    calls: list[str] = []
    unsubscribe = registry.subscribe(lambda: calls.append("changed"))
    yield calls
    unsubscribe()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def stamp(minutes: int) -> datetime:
    """A fixed, distinct creation stamp ``minutes`` after BASE_TIME."""
    return BASE_TIME + timedelta(minutes=minutes)


def make_record(number: str, iso_code: str = "22G1", minutes: int = 0) -> ContainerRecord:
    """Build a record stamped ``minutes`` after BASE_TIME."""
    return ContainerRecord(number=number, iso_code=iso_code, created_at=stamp(minutes))
