"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from fru_tracker.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    is_started,
    startup,
)
from fru_tracker.config import get_identity_config
from fru_tracker.domain.model import DiscoverySnapshot, ResourceKind, uid_factory, utcnow
from fru_tracker.domain.ports.unit_of_work import ReconciliationUnitOfWork
from fru_tracker.domain.reconciliation import DiscoverySnapshotReconciler

if TYPE_CHECKING:
    from datetime import datetime

    from fru_tracker.config import IdentityConfig
    from fru_tracker.domain.model import Device, UidFactory
    from fru_tracker.domain.reconciliation import ReconciliationOutcome

UnitOfWorkFactory = Callable[[], ReconciliationUnitOfWork]


log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyReconciliationUnitOfWork


def _uid_factory(identity: IdentityConfig | None) -> UidFactory:
    return uid_factory((identity or get_identity_config()).prefixes)


def build_reconciler(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    identity: IdentityConfig | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> DiscoverySnapshotReconciler:
    """Wire a reconciler to the configured adapters."""

    return DiscoverySnapshotReconciler(
        unit_of_work_factory=unit_of_work_factory or _default_unit_of_work_factory(),
        new_uid=_uid_factory(identity),
        clock=clock,
    )


def submit_discovery_snapshot(
    raw_data: str,
    *,
    name: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    identity: IdentityConfig | None = None,
) -> DiscoverySnapshot:
    """Store a new, pending snapshot holding ``raw_data`` as collected."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    uid = _uid_factory(identity)(ResourceKind.DISCOVERY_SNAPSHOT)
    now = utcnow()
    snapshot = DiscoverySnapshot(
        uid=uid,
        name=name or uid,
        raw_data=raw_data,
        created_at=now,
        updated_at=now,
    )
    with effective_uow() as uow:
        uow.repositories.snapshots.add(snapshot)
        uow.commit()
    log.info("Submitted discovery snapshot %s (%s)", snapshot.uid, snapshot.name)
    return snapshot


def reconcile_discovery_snapshot(
    snapshot_uid: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    identity: IdentityConfig | None = None,
) -> ReconciliationOutcome:
    """Reconcile one snapshot using the configured adapters."""

    reconciler = build_reconciler(unit_of_work_factory=unit_of_work_factory, identity=identity)
    outcome = reconciler.reconcile(snapshot_uid)
    log.info(
        f"Finished reconciling {snapshot_uid}: phase={outcome.phase}, "
        f"processed={outcome.processed}, links_updated={outcome.links_updated}"
    )
    return outcome


def reconcile_pending_snapshots(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    identity: IdentityConfig | None = None,
) -> list[ReconciliationOutcome]:
    """Reconcile every snapshot that is not ``Completed``, one after another.

    Snapshots are processed serially in creation order; a store failure stops the
    sweep and propagates, leaving the remaining snapshots for the next call.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        pending = [snapshot.uid for snapshot in uow.repositories.snapshots.list_unfinished()]
    log.info("Found %d unfinished discovery snapshots", len(pending))

    reconciler = build_reconciler(unit_of_work_factory=effective_uow, identity=identity)
    return [reconciler.reconcile(uid) for uid in pending]


def load_device_tree(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> tuple[list[Device], dict[str, list[str]]]:
    """Return all devices and, per device uid, the uids of its children."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        devices = uow.repositories.devices
        listed = list(devices.list_all())
        children = {device.uid: devices.children_of(device.uid) for device in listed}
    return listed, children
