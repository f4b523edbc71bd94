"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ctrctl.toml only contains overrides.
An empty or missing ctrctl.toml reproduces the stock seed data and delay.
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, Field

from ctrctl.domain.seed import SeedRecord


class SeedRecordConfig(BaseModel):
    """One ``[[registry.seed]]`` entry."""

    model_config = {"frozen": True}

    number: str
    iso_code: str
    age_days: float = 0.0

    def to_seed(self) -> SeedRecord:
        return SeedRecord(self.number, self.iso_code, timedelta(days=self.age_days))


def _default_seed() -> list[SeedRecordConfig]:
    return [
        SeedRecordConfig(number="TCNU1234567", iso_code="22G1", age_days=10),
        SeedRecordConfig(number="GESU9876543", iso_code="45G1", age_days=5),
    ]


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    load_delay_seconds: float = Field(default=1.0, ge=0.0)
    seed: list[SeedRecordConfig] = Field(default_factory=_default_seed)

    def seed_records(self) -> tuple[SeedRecord, ...]:
        return tuple(entry.to_seed() for entry in self.seed)


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    width: int = 120
    timestamp_format: str = "%Y-%m-%d %H:%M"

