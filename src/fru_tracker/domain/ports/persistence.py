"""Ports for persisting inventory resources.

Implementations raise :class:`~fru_tracker.domain.errors.StoreUnavailableError`
for any failure of the backing store. ``add`` and ``update`` apply to a single
record; durability comes from committing the surrounding unit of work.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fru_tracker.domain.model import Device, DiscoverySnapshot, Resource


@runtime_checkable
class Repository[TResource: Resource](Protocol):
    """Minimal contract for a store of one resource kind."""

    def get(self, uid: str) -> TResource | None: ...

    def list_all(self) -> Sequence[TResource]: ...

    def add(self, resource: TResource) -> None: ...

    def update(self, resource: TResource) -> None: ...


@runtime_checkable
class DeviceRepository(Repository["Device"], Protocol):
    """Persistence contract for devices."""

    def children_of(self, uid: str) -> list[str]:
        """Return the identities of devices whose parent is ``uid``."""
        ...


@runtime_checkable
class SnapshotRepository(Repository["DiscoverySnapshot"], Protocol):
    """Persistence contract for discovery snapshots."""

    def list_unfinished(self) -> Sequence[DiscoverySnapshot]:
        """Return snapshots that are not ``Completed``, oldest first."""
        ...
