"""Record identity and creation-stamp generation.

A record's ``created_at`` doubles as its permanent key. ``RecordIdentity``
wraps it so matching code never compares raw timestamps, and
``CreationClock`` guarantees that two stamps issued by one clock never
collide, even inside a single clock tick.

INVARIANT: Identities are permanent. Editing a record never changes it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

_TICK = timedelta(microseconds=1)


@dataclass(frozen=True)
class RecordIdentity:
    """Opaque, hashable key for a container record."""

    stamp: datetime

    def __str__(self) -> str:
        return self.stamp.isoformat()


class CreationClock:
    """Issues strictly increasing UTC creation stamps.

    If the wall clock has not advanced since the previous stamp (or has
    gone backwards), the next stamp is the previous one plus one
    microsecond.
    """

    def __init__(self) -> None:
        self._last: datetime | None = None

    def next_stamp(self) -> datetime:
        now = datetime.now(UTC)
        if self._last is not None and now <= self._last:
            now = self._last + _TICK
        self._last = now
        return now


# Process-wide clock shared by services that are not given their own.
DEFAULT_CLOCK = CreationClock()
