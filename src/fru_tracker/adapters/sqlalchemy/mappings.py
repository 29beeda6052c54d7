"""SQLAlchemy mapping metadata for the fru-tracker domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    String,
    Table,
    Text,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from fru_tracker.domain.model import Device, DiscoverySnapshot, SnapshotPhase

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UID_LENGTH = 64


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _resource_columns() -> list[Column[object]]:
    return [
        Column("uid", String(UID_LENGTH), primary_key=True),
        Column("name", String, nullable=False),
        Column("api_version", String, nullable=False),
        Column("created_at", UTCDateTime(), nullable=False),
        Column("updated_at", UTCDateTime(), nullable=False),
    ]


device_table = Table(
    "device",
    mapper_registry.metadata,
    *_resource_columns(),
    Column("device_type", String, nullable=False, default=""),
    Column("manufacturer", String, nullable=False, default=""),
    Column("part_number", String, nullable=False, default=""),
    Column("serial_number", String, nullable=False, default=""),
    # no foreign key: deletion of devices happens outside this store's callers
    Column("parent_id", String(UID_LENGTH), nullable=True),
    Column("parent_serial_number", String, nullable=False, default=""),
    Column("properties", JSON, nullable=False, default=dict),
    Column("phase", String, nullable=False, default=""),
    Column("message", String, nullable=False, default=""),
    Column("ready", Boolean, nullable=False, default=False),
    Index("ix_device_serial_number", "serial_number"),
    Index("ix_device_parent_id", "parent_id"),
)

discovery_snapshot_table = Table(
    "discovery_snapshot",
    mapper_registry.metadata,
    *_resource_columns(),
    Column("raw_data", Text, nullable=False),
    Column(
        "phase",
        Enum(
            SnapshotPhase,
            native_enum=False,
            values_callable=lambda phases: [phase.value for phase in phases],
        ),
        nullable=False,
        default=SnapshotPhase.PENDING,
    ),
    Column("message", String, nullable=False, default=""),
    Column("ready", Boolean, nullable=False, default=False),
    Index("ix_discovery_snapshot_phase", "phase"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Device, device_table)
    mapper_registry.map_imperatively(DiscoverySnapshot, discovery_snapshot_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
