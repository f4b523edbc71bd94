"""ContainerRecord — the immutable value type for one tracked container.

Field names are snake_case in Python; the serialized shape keeps the
camelCase keys ``number``, ``isoCode`` and ``createdAt``::

    {"number": "TCNU1234567", "isoCode": "22G1", "createdAt": "2024-05-01T09:30:00+00:00"}

Construction performs no business validation. Empty numbers or codes are
representable; rejecting them is the job of
:func:`ctrctl.domain.validation.validate_record`, run before construction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ctrctl.domain.errors import FormatError
from ctrctl.domain.ids import RecordIdentity

SERIALIZED_KEYS: tuple[str, ...] = ("number", "isoCode", "createdAt")


class ContainerRecord(BaseModel):
    """One tracked shipping container.

    Attributes:
        number: Human-facing container number (may be edited).
        iso_code: Short ISO type/size code, e.g. ``22G1``.
        created_at: Creation stamp. Assigned once and kept across edits;
            it is the record's identity.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    number: str
    iso_code: str = Field(alias="isoCode")
    created_at: datetime = Field(alias="createdAt")

    @property
    def identity(self) -> RecordIdentity:
        return RecordIdentity(self.created_at)

    def derive_copy(
        self,
        *,
        number: str | None = None,
        iso_code: str | None = None,
        created_at: datetime | None = None,
    ) -> ContainerRecord:
        """Return a new record, falling back to this record's value for each unset field."""
        return ContainerRecord(
            number=self.number if number is None else number,
            iso_code=self.iso_code if iso_code is None else iso_code,
            created_at=self.created_at if created_at is None else created_at,
        )

    def to_dict(self) -> dict[str, str]:
        """Serialize to the ``number`` / ``isoCode`` / ``createdAt`` map."""
        return {
            "number": self.number,
            "isoCode": self.iso_code,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContainerRecord:
        """Deserialize a record produced by :meth:`to_dict`.

        Raises:
            FormatError: A required key is absent or null, or ``createdAt``
                is not an ISO-8601 timestamp string.
        """
        if not isinstance(data, dict):
            msg = f"Invalid container record: expected a mapping, got {type(data).__name__}"
            raise FormatError(msg)
        missing = [key for key in SERIALIZED_KEYS if data.get(key) is None]
        if missing:
            raise FormatError(
                f"Invalid container record: missing required fields: {', '.join(missing)}"
            )

        raw_created = data["createdAt"]
        if not isinstance(raw_created, str):
            msg = f"Invalid createdAt: expected a timestamp string, got {raw_created!r}"
            raise FormatError(msg)
        try:
            created_at = datetime.fromisoformat(raw_created)
        except ValueError as exc:
            raise FormatError(f"Invalid createdAt timestamp: {raw_created!r}") from exc

        try:
            return cls(number=data["number"], iso_code=data["isoCode"], created_at=created_at)
        except ValidationError as exc:
            msg = f"Invalid container record: {exc.error_count()} field error(s)"
            raise FormatError(msg) from exc
