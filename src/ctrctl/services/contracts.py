"""Typed payload contracts for service and adapter boundaries.

These models validate operation payload shapes before they leave the
service layer so key regressions (for example ``items`` vs ``records``)
fail fast in tests and during development.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class ContainerItem(BaseModel):
    """One serialized container row."""

    model_config = ConfigDict(extra="allow")

    number: str
    isoCode: str  # noqa: N815 - serialized key
    createdAt: str  # noqa: N815 - serialized key


class ListedContainer(ContainerItem):
    """A container row with its 1-based display position."""

    index: int


class ListContainersData(BaseModel):
    """Payload contract for ``TrackerService.list_containers``."""

    count: int
    loading: bool
    state: Literal["uninitialized", "loading", "ready"]
    items: list[ListedContainer]


class BatchEntryResult(BaseModel):
    """Outcome of one entry in ``TrackerService.apply_batch``."""

    index: int
    op: str
    ok: bool
    number: str | None = None
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)


class BatchResultData(BaseModel):
    """Payload contract for ``TrackerService.apply_batch``."""

    applied: int
    failed: int
    results: list[BatchEntryResult]
    count: int
    items: list[ListedContainer]
