"""ContainerRegistry — the authoritative in-memory collection of records.

Lifecycle: UNINITIALIZED → LOADING → READY.
Constructing a registry inside a running event loop schedules
:meth:`ContainerRegistry.load_initial` immediately; outside a loop the
owner awaits it (``asyncio.run(registry.load_initial())``).

Every mutation and load-state transition notifies observers
synchronously, in registration order, after the change is applied.

INVARIANT: No two records share a ``created_at``. Matching is always by
:class:`~ctrctl.domain.ids.RecordIdentity`, never by ``number``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from enum import StrEnum

from ctrctl.domain.errors import NotFoundError
from ctrctl.domain.ids import RecordIdentity
from ctrctl.domain.records import ContainerRecord
from ctrctl.domain.seed import DEFAULT_SEED, SeedRecord
from ctrctl.domain.validation import ValidationResult, find_conflicting_number, validate_record

logger = logging.getLogger(__name__)

Observer = Callable[[], None]


class RegistryState(StrEnum):
    """Registry lifecycle states."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class ContainerRegistry:
    """Owns the ordered collection of container records.

    Mutations before the registry is READY are allowed; deferring them
    until the load completes is the caller's responsibility.

    Parameters:
        seed: Records appended by the initial load.
        load_delay: Seconds the initial load suspends for, simulating a
            remote fetch.
        autoload: Schedule ``load_initial`` on the running loop at
            construction time.
    """

    def __init__(
        self,
        *,
        seed: Sequence[SeedRecord] = DEFAULT_SEED,
        load_delay: float = 1.0,
        autoload: bool = True,
    ) -> None:
        self._records: list[ContainerRecord] = []
        self._observers: list[Observer] = []
        self._seed = tuple(seed)
        self._load_delay = load_delay
        self._state = RegistryState.UNINITIALIZED
        self._loading = False
        self._load_task: asyncio.Task[None] | None = None
        if autoload:
            self._load_task = self._schedule_initial_load()

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def load_task(self) -> asyncio.Task[None] | None:
        """The initial-load task scheduled at construction, if any."""
        return self._load_task

    def snapshot(self) -> tuple[ContainerRecord, ...]:
        """The records in display order, as of this call."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def find(self, created_at: datetime) -> ContainerRecord | None:
        """Return the record with this creation stamp, or None."""
        index = self._index_of(RecordIdentity(created_at))
        return None if index is None else self._records[index]

    def find_by_number(self, number: str) -> ContainerRecord | None:
        """Return the first record with this number, or None."""
        return next((r for r in self._records if r.number == number), None)

    def find_conflicting_number(
        self,
        number: str,
        exclude_created_at: datetime | None = None,
    ) -> ContainerRecord | None:
        """Return a record already using *number* other than *exclude_created_at*."""
        return find_conflicting_number(self._records, number, exclude_created_at)

    def validate(
        self,
        number: str,
        iso_code: str,
        *,
        created_at: datetime | None = None,
    ) -> ValidationResult:
        """Run the shared pre-flight check against the current collection."""
        return validate_record(number, iso_code, self._records, created_at=created_at)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """Register a zero-argument change callback. Returns an unsubscribe function."""
        self._observers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Observer) -> None:
        """Remove a callback. Unknown callbacks are ignored."""
        if callback in self._observers:
            self._observers.remove(callback)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, record: ContainerRecord) -> None:
        """Append *record*. Uniqueness is checked by callers beforehand."""
        self._records.append(record)
        logger.debug("Added container %s (%s)", record.number, record.identity)
        self._notify()

    def remove(self, record: ContainerRecord) -> bool:
        """Remove the entry matching *record*'s identity.

        A miss is a no-op, but observers are notified either way.
        Returns True when an entry was removed.
        """
        return self.remove_by_created_at(record.created_at)

    def remove_by_created_at(self, created_at: datetime) -> bool:
        """Remove the entry with this creation stamp. Same semantics as :meth:`remove`."""
        identity = RecordIdentity(created_at)
        index = self._index_of(identity)
        if index is None:
            logger.debug("Remove found no container with createdAt %s", identity)
        else:
            removed = self._records.pop(index)
            logger.debug("Removed container %s (%s)", removed.number, identity)
        self._notify()
        return index is not None

    def update(self, record: ContainerRecord) -> None:
        """Replace the entry with *record*'s identity in place.

        Raises:
            NotFoundError: No entry has that identity. State is unchanged
                and observers are not notified.
        """
        index = self._index_of(record.identity)
        if index is None:
            logger.warning("Update target missing: createdAt %s", record.identity)
            raise NotFoundError(record.created_at)
        self._records[index] = record
        logger.debug("Updated container %s (%s)", record.number, record.identity)
        self._notify()

    async def load_initial(self) -> None:
        """Populate the collection with seed data after a simulated fetch delay.

        Runs at most once per registry; later calls return immediately.
        """
        if self._state is not RegistryState.UNINITIALIZED:
            logger.debug("Initial load already %s; skipping", self._state)
            return

        self._state = RegistryState.LOADING
        self._loading = True
        logger.debug("Initial load started (delay=%ss)", self._load_delay)
        self._notify()

        await asyncio.sleep(self._load_delay)

        now = datetime.now(UTC)
        for entry in self._seed:
            record = entry.materialize(now)
            if self._index_of(record.identity) is not None:
                logger.warning(
                    "Skipping seed %s: identity %s in use", record.number, record.identity
                )
                continue
            self._records.append(record)

        self._loading = False
        self._state = RegistryState.READY
        logger.debug("Initial load finished with %d containers", len(self._records))
        self._notify()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _schedule_initial_load(self) -> asyncio.Task[None] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; initial load deferred to owner")
            return None
        return loop.create_task(self.load_initial())

    def _index_of(self, identity: RecordIdentity) -> int | None:
        for index, existing in enumerate(self._records):
            if existing.identity == identity:
                return index
        return None

    def _notify(self) -> None:
        for callback in list(self._observers):
            callback()
