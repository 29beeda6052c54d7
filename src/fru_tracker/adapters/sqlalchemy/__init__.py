"""SQLAlchemy adapter package for fru-tracker."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    device_table,
    discovery_snapshot_table,
    mapper_registry,
    start_mappers,
)
from .repositories import (
    SqlAlchemyDeviceRepository,
    SqlAlchemyResourceRepository,
    SqlAlchemySnapshotRepository,
)
from .unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyDeviceRepository",
    "SqlAlchemyReconciliationUnitOfWork",
    "SqlAlchemyResourceRepository",
    "SqlAlchemySnapshotRepository",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "device_table",
    "discovery_snapshot_table",
    "is_started",
    "mapper_registry",
    "shutdown",
    "startup",
]
