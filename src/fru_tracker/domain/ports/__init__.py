"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import DeviceRepository, Repository, SnapshotRepository
from .unit_of_work import (
    ReconciliationRepositories,
    ReconciliationUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "DeviceRepository",
    "ReconciliationRepositories",
    "ReconciliationUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "SnapshotRepository",
    "UnitOfWork",
]
