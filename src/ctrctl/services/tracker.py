"""TrackerService — the command facade adapters call instead of the registry.

Pipeline for each mutation: VALIDATE → BUILD → APPLY → RESPOND.

This is the recovery boundary: domain exceptions raised by the registry
or the record codec are converted into failed :class:`ServiceResult`
values here and never escape to the adapter.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ctrctl.domain.errors import FormatError, NotFoundError
from ctrctl.domain.ids import DEFAULT_CLOCK, CreationClock
from ctrctl.domain.records import ContainerRecord
from ctrctl.domain.validation import validate_record
from ctrctl.services.base import BaseService
from ctrctl.services.contracts import BatchResultData, ListContainersData, dump_validated
from ctrctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from ctrctl.services.registry import ContainerRegistry

logger = logging.getLogger(__name__)

BATCH_OPS: tuple[str, ...] = ("add", "edit", "delete")


class TrackerService(BaseService):
    """Add, edit, delete, list, and import container records."""

    def __init__(self, registry: ContainerRegistry, *, clock: CreationClock | None = None) -> None:
        super().__init__(registry)
        self._clock = clock or DEFAULT_CLOCK

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_containers(self) -> ServiceResult:
        """Return the current collection in display order."""
        items = _listed(self._registry.snapshot())
        data = dump_validated(
            ListContainersData,
            {
                "count": len(items),
                "loading": self._registry.is_loading,
                "state": str(self._registry.state),
                "items": items,
            },
        )
        return ServiceResult(ok=True, op="list_containers", data=data)

    def export_containers(self) -> ServiceResult:
        """Serialize the current collection for export."""
        records = [r.to_dict() for r in self._registry.snapshot()]
        return ServiceResult(
            ok=True,
            op="export_containers",
            data={"count": len(records), "records": records},
        )

    def check_container(
        self,
        number: str,
        iso_code: str,
        *,
        created_at: datetime | None = None,
    ) -> ServiceResult:
        """Run the add/edit pre-flight check without changing anything."""
        op = "check_container"
        vr = self._registry.validate(number, iso_code, created_at=created_at)
        if not vr.valid:
            return _validation_failure(op, vr.errors)
        return ServiceResult(
            ok=True,
            op=op,
            data={"number": number, "isoCode": iso_code, "valid": True},
            warnings=list(vr.warnings),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_container(self, number: str, iso_code: str) -> ServiceResult:
        """Validate and append a new container stamped with the current time."""
        op = "add_container"

        # ── VALIDATE ─────────────────────────────────────────────
        vr = self._registry.validate(number, iso_code)
        if not vr.valid:
            return _validation_failure(op, vr.errors)

        # ── BUILD ────────────────────────────────────────────────
        record = ContainerRecord(
            number=number,
            iso_code=iso_code,
            created_at=self._clock.next_stamp(),
        )

        # ── APPLY ────────────────────────────────────────────────
        self._registry.add(record)

        # ── RESPOND ──────────────────────────────────────────────
        return ServiceResult(ok=True, op=op, data=record.to_dict(), warnings=list(vr.warnings))

    def edit_container(
        self,
        created_at: datetime,
        *,
        number: str | None = None,
        iso_code: str | None = None,
    ) -> ServiceResult:
        """Replace the number and/or ISO code of an existing container.

        The record keeps its ``created_at``, so its identity and display
        position survive the edit.
        """
        op = "edit_container"

        # ── VALIDATE ─────────────────────────────────────────────
        current = self._registry.find(created_at)
        if current is None:
            return _not_found(op, created_at)

        try:
            updated = current.derive_copy(number=number, iso_code=iso_code)
        except ValidationError as exc:
            return _validation_failure(op, [_describe(error) for error in exc.errors()])
        vr = self._registry.validate(updated.number, updated.iso_code, created_at=created_at)
        if not vr.valid:
            return _validation_failure(op, vr.errors)

        # ── APPLY ────────────────────────────────────────────────
        try:
            self._registry.update(updated)
        except NotFoundError as exc:
            return _not_found(op, exc.created_at)

        # ── RESPOND ──────────────────────────────────────────────
        fields_changed = [
            name
            for name, before, after in (
                ("number", current.number, updated.number),
                ("isoCode", current.iso_code, updated.iso_code),
            )
            if before != after
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={**updated.to_dict(), "fields_changed": fields_changed},
            warnings=list(vr.warnings),
        )

    def delete_container(self, created_at: datetime) -> ServiceResult:
        """Delete a container by identity. Deleting a missing container succeeds."""
        op = "delete_container"
        existing = self._registry.find(created_at)
        removed = self._registry.remove_by_created_at(created_at)

        warnings: list[str] = []
        data: dict[str, Any] = {"createdAt": created_at.isoformat(), "removed": removed}
        if existing is not None:
            data["number"] = existing.number
        else:
            warnings.append(f"No container with createdAt {created_at.isoformat()}")
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def apply_batch(
        self,
        operations: list[Any],
        *,
        keep_going: bool = False,
    ) -> ServiceResult:
        """Replay add/edit/delete entries in order.

        Entry shapes::

            {"op": "add", "number": "MSCU1234565", "isoCode": "22G1"}
            {"op": "edit", "target": "MSCU1234565", "number": "MSCU7654321"}
            {"op": "delete", "target": "MSCU7654321"}

        ``edit`` and ``delete`` address containers by their current
        number. Stops at the first failure unless *keep_going*. Entries
        applied before a failure stay applied.
        """
        op = "apply_batch"
        results: list[dict[str, Any]] = []
        failed = 0

        for index, entry in enumerate(operations):
            result = self._apply_entry(entry)
            results.append(
                {
                    "index": index,
                    "op": result.op,
                    "ok": result.ok,
                    "number": result.data.get("number"),
                    "error": result.error.message if result.error else None,
                    "warnings": list(result.warnings),
                }
            )
            if result.ok:
                continue
            failed += 1
            if not keep_going:
                return ServiceResult.failure(
                    op,
                    "BATCH_FAILED",
                    f"Entry {index} failed: {results[-1]['error']}",
                    detail={"results": results},
                )

        items = _listed(self._registry.snapshot())
        data = dump_validated(
            BatchResultData,
            {
                "applied": len(results) - failed,
                "failed": failed,
                "results": results,
                "count": len(items),
                "items": items,
            },
        )
        if failed:
            return ServiceResult(
                ok=False,
                op=op,
                data=data,
                error=ServiceError(
                    code="BATCH_PARTIAL",
                    message=f"{failed} of {len(operations)} entries failed",
                ),
            )
        return ServiceResult(ok=True, op=op, data=data)

    def import_records(self, payload: list[dict[str, Any]]) -> ServiceResult:
        """Deserialize and append previously exported records.

        Nothing is added unless every record parses, has a fresh identity,
        and passes the pre-flight check.
        """
        op = "import_records"
        try:
            records = [ContainerRecord.from_dict(item) for item in payload]
        except FormatError as exc:
            return ServiceResult.failure(op, "INVALID_FORMAT", str(exc))

        accepted: list[ContainerRecord] = list(self._registry.snapshot())
        for record in records:
            if any(existing.identity == record.identity for existing in accepted):
                return ServiceResult.failure(
                    op,
                    "DUPLICATE_IDENTITY",
                    f"Container with createdAt {record.created_at.isoformat()} already exists",
                    detail={"number": record.number},
                )
            vr = validate_record(
                record.number, record.iso_code, accepted, created_at=record.created_at
            )
            if not vr.valid:
                return _validation_failure(op, vr.errors)
            accepted.append(record)

        for record in records:
            self._registry.add(record)
        logger.debug("Imported %d containers", len(records))
        return ServiceResult(
            ok=True,
            op=op,
            data={"imported": len(records), "items": [r.to_dict() for r in records]},
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _apply_entry(self, entry: Any) -> ServiceResult:
        if not isinstance(entry, dict):
            return ServiceResult.failure(
                "apply_batch",
                "INVALID_OPERATION",
                f"Batch entry must be an object, got {type(entry).__name__}",
            )

        kind = entry.get("op")
        if kind not in BATCH_OPS:
            return ServiceResult.failure(
                str(kind),
                "INVALID_OPERATION",
                f"Unknown batch op {kind!r}; expected one of {', '.join(BATCH_OPS)}",
            )

        if kind == "add":
            return self.add_container(_text(entry, "number"), _text(entry, "isoCode", "iso_code"))

        target = _text(entry, "target")
        current = self._registry.find_by_number(target)
        if kind == "delete":
            if current is None:
                return ServiceResult(
                    ok=True,
                    op="delete_container",
                    data={"number": target, "removed": False},
                    warnings=[f"No container numbered {target}"],
                )
            return self.delete_container(current.created_at)

        if current is None:
            return ServiceResult.failure(
                "edit_container",
                "NOT_FOUND",
                f"No container numbered {target}",
                detail={"number": target},
            )
        return self.edit_container(
            current.created_at,
            number=entry.get("number"),
            iso_code=entry.get("isoCode", entry.get("iso_code")),
        )


def _listed(records: tuple[ContainerRecord, ...]) -> list[dict[str, Any]]:
    return [{"index": i, **r.to_dict()} for i, r in enumerate(records, start=1)]


def _text(entry: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return str(value)
    return ""


def _describe(error: Any) -> str:
    field = ".".join(str(part) for part in error["loc"])
    return f"{field}: {error['msg']}" if field else str(error['msg'])


def _validation_failure(op: str, errors: list[str]) -> ServiceResult:
    return ServiceResult.failure(
        op,
        "VALIDATION_FAILED",
        "; ".join(errors),
        detail={"errors": errors},
    )


def _not_found(op: str, created_at: datetime) -> ServiceResult:
    return ServiceResult.failure(
        op,
        "NOT_FOUND",
        f"Container with createdAt {created_at.isoformat()} not found",
        detail={"createdAt": created_at.isoformat()},
    )
