"""Seed data appended by the registry's initial load."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from ctrctl.domain.records import ContainerRecord


@dataclass(frozen=True)
class SeedRecord:
    """A seed entry whose creation stamp is relative to load time."""

    number: str
    iso_code: str
    age: timedelta

    def materialize(self, now: datetime | None = None) -> ContainerRecord:
        now = now or datetime.now(UTC)
        return ContainerRecord(
            number=self.number,
            iso_code=self.iso_code,
            created_at=now - self.age,
        )


DEFAULT_SEED: tuple[SeedRecord, ...] = (
    SeedRecord("TCNU1234567", "22G1", timedelta(days=10)),
    SeedRecord("GESU9876543", "45G1", timedelta(days=5)),
)
