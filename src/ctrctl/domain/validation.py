"""Pre-flight checks shared by every add and edit flow.

Callers run :func:`validate_record` before constructing or replacing a
record. The registry itself never enforces these rules; ``add`` accepts
whatever it is given.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from ctrctl.domain.records import ContainerRecord


@dataclass(frozen=True)
class ValidationResult:
    """Result of a pre-flight validation check."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def find_conflicting_number(
    records: Iterable[ContainerRecord],
    number: str,
    exclude_created_at: datetime | None = None,
) -> ContainerRecord | None:
    """Return the first record using *number* whose ``created_at`` is not *exclude_created_at*.

    Excluding the candidate's own stamp lets an edit keep its unchanged
    number without tripping the uniqueness check.
    """
    for record in records:
        if record.number == number and record.created_at != exclude_created_at:
            return record
    return None


def validate_record(
    number: str,
    iso_code: str,
    records: Iterable[ContainerRecord],
    *,
    created_at: datetime | None = None,
) -> ValidationResult:
    """Check required fields and number uniqueness for a candidate record.

    Args:
        number: Candidate container number.
        iso_code: Candidate ISO code.
        records: The current collection to check uniqueness against.
        created_at: The candidate's own stamp when editing, None when adding.
    """
    errors: list[str] = []
    if not number.strip():
        errors.append("Container number is required")
    if not iso_code.strip():
        errors.append("ISO code is required")

    if number.strip():
        conflict = find_conflicting_number(records, number, created_at)
        if conflict is not None:
            errors.append(f"Container number already exists: {number}")

    return ValidationResult(valid=not errors, errors=errors)
