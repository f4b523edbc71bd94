"""Domain exceptions raised by the record codec and the registry."""

from __future__ import annotations

from datetime import datetime


class FormatError(ValueError):
    """A serialized container record is missing fields or malformed."""


class NotFoundError(LookupError):
    """No record in the registry carries the requested identity."""

    def __init__(self, created_at: datetime) -> None:
        self.created_at = created_at
        msg = f"Container with createdAt {created_at.isoformat()} not found for update."
        super().__init__(msg)
