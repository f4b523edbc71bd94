"""BaseService — abstract foundation for ctrctl services.

Every service receives a :class:`ContainerRegistry` at construction time
and performs all reads and writes through its public API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ctrctl.services.registry import ContainerRegistry


class BaseService:
    """Abstract base for service-layer classes.

    Usage::

        class TrackerService(BaseService):
            def add_container(self, number: str, iso_code: str) -> ServiceResult:
                vr = self._registry.validate(number, iso_code)
                ...
    """

    def __init__(self, registry: ContainerRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ContainerRegistry:
        return self._registry
