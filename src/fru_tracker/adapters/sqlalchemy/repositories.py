"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from fru_tracker.adapters.sqlalchemy.mappings import device_table, discovery_snapshot_table
from fru_tracker.domain.errors import StoreUnavailableError
from fru_tracker.domain.model import Device, DiscoverySnapshot, Resource, SnapshotPhase

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Table
    from sqlalchemy.orm import Session


class SqlAlchemyResourceRepository[TResource: Resource]:
    """Shared get/list/add/update for one mapped resource kind.

    Writes are flushed immediately so store failures surface at the call site as
    ``StoreUnavailableError``; committing is left to the unit of work.
    """

    def __init__(self, session: Session, resource_cls: type[TResource], table: Table) -> None:
        self.session = session
        self._resource_cls = resource_cls
        self._table = table

    def get(self, uid: str) -> TResource | None:
        try:
            return self.session.get(self._resource_cls, uid)
        except SQLAlchemyError as exc:
            raise self._unavailable("get", uid, exc) from exc

    def list_all(self) -> Sequence[TResource]:
        stmt = select(self._resource_cls).order_by(self._table.c.created_at, self._table.c.uid)
        try:
            return self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise self._unavailable("list", None, exc) from exc

    def add(self, resource: TResource) -> None:
        self._write("create", resource)

    def update(self, resource: TResource) -> None:
        self._write("update", resource)

    def _write(self, operation: str, resource: TResource) -> None:
        try:
            self.session.add(resource)
            self.session.flush()
        except SQLAlchemyError as exc:
            raise self._unavailable(operation, resource.uid, exc) from exc

    def _unavailable(
        self, operation: str, uid: str | None, exc: SQLAlchemyError
    ) -> StoreUnavailableError:
        target = self._resource_cls.KIND if uid is None else f"{self._resource_cls.KIND} {uid}"
        return StoreUnavailableError(f"Failed to {operation} {target}: {exc}")


class SqlAlchemyDeviceRepository(SqlAlchemyResourceRepository[Device]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Device, device_table)

    def children_of(self, uid: str) -> list[str]:
        stmt = (
            select(device_table.c.uid)
            .where(device_table.c.parent_id == uid)
            .order_by(device_table.c.uid)
        )
        try:
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            raise self._unavailable("list children of", uid, exc) from exc


class SqlAlchemySnapshotRepository(SqlAlchemyResourceRepository[DiscoverySnapshot]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, DiscoverySnapshot, discovery_snapshot_table)

    def list_unfinished(self) -> Sequence[DiscoverySnapshot]:
        table = discovery_snapshot_table
        stmt = (
            select(DiscoverySnapshot)
            .where(table.c.phase != SnapshotPhase.COMPLETED)
            .order_by(table.c.created_at, table.c.uid)
        )
        try:
            return self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise self._unavailable("list unfinished", None, exc) from exc


if TYPE_CHECKING:
    from fru_tracker.domain.ports.persistence import DeviceRepository, SnapshotRepository

    _session_stub = cast("Session", object())
    _device_repo: DeviceRepository = SqlAlchemyDeviceRepository(_session_stub)
    _snapshot_repo: SnapshotRepository = SqlAlchemySnapshotRepository(_session_stub)
