"""Reconciler for discovery snapshots.

A run walks the snapshot through its lifecycle and composes the stages:

1) decode the raw payload into device specs
2) index the current devices by discovery URI and serial number
3) pass 1: upsert one device per URI
4) pass 2: link touched devices to their parents

Runs are single-writer: callers must serialize runs that may touch the same
devices.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from fru_tracker.domain.errors import MalformedPayloadError, SnapshotNotFoundError
from fru_tracker.domain.model import utcnow

from .decode import decode_snapshot_payload
from .index import build_device_index
from .link import link_parents
from .results import ReconciliationOutcome
from .upsert import upsert_devices

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from fru_tracker.domain.model import DiscoverySnapshot, UidFactory
    from fru_tracker.domain.ports import ReconciliationUnitOfWork

    from .results import LinkResult, UpsertResult

log = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE: Final[str] = "Failed to parse rawData: {detail}"
COMPLETED_MESSAGE: Final[str] = (
    "Snapshot processed. {processed} devices created/updated. {links} parent links updated."
)


@dataclass(slots=True)
class DiscoverySnapshotReconciler:
    """Reconcile one discovery snapshot into the device inventory per call."""

    unit_of_work_factory: Callable[[], ReconciliationUnitOfWork]
    new_uid: UidFactory
    clock: Callable[[], datetime] = field(default=utcnow)

    def reconcile(self, snapshot_uid: str) -> ReconciliationOutcome:
        """Run one reconciliation of ``snapshot_uid``.

        Raises ``SnapshotNotFoundError`` for an unknown snapshot and
        ``StoreUnavailableError`` when devices cannot be listed or the snapshot
        status cannot be saved. A malformed payload is recorded as phase ``Error``
        and reported through ``ReconciliationOutcome.error`` instead.
        """

        with self.unit_of_work_factory() as uow:
            snapshot = uow.repositories.snapshots.get(snapshot_uid)
            if snapshot is None:
                raise SnapshotNotFoundError(snapshot_uid)
            label = snapshot.name or snapshot.uid

            if snapshot.is_completed:
                log.info("Reconciling %s: Already completed, skipping.", label)
                return ReconciliationOutcome(
                    snapshot_uid=snapshot.uid,
                    phase=snapshot.phase,
                    message=snapshot.message,
                    short_circuited=True,
                )

            log.info("Reconciling %s: Starting reconciliation", label)
            snapshot.start_processing(now=self.clock())
            self._save(uow, snapshot)

            try:
                specs = decode_snapshot_payload(snapshot.raw_data)
            except MalformedPayloadError as exc:
                return self._fail(uow, snapshot, exc, label=label)

            index = build_device_index(uow.repositories.devices)
            log.info(
                "Reconciling %s: Loaded %d devices by URI and %d by Serial",
                label,
                len(index.by_uri),
                len(index.by_serial),
            )

            upsert = upsert_devices(
                specs,
                index=index,
                uow=uow,
                new_uid=self.new_uid,
                clock=self.clock,
                label=label,
            )
            link = link_parents(
                upsert.touched,
                index=index,
                uow=uow,
                clock=self.clock,
                label=label,
            )
            return self._complete(uow, snapshot, upsert, link, label=label)

    def _fail(
        self,
        uow: ReconciliationUnitOfWork,
        snapshot: DiscoverySnapshot,
        error: MalformedPayloadError,
        *,
        label: str,
    ) -> ReconciliationOutcome:
        # Recorded on the snapshot, not raised: callers see success unless they
        # inspect the returned outcome.
        log.warning("Reconciling %s: Payload rejected, marking snapshot as Error: %s", label, error)
        snapshot.fail(PARSE_FAILURE_MESSAGE.format(detail=error), now=self.clock())
        self._save(uow, snapshot)
        return ReconciliationOutcome(
            snapshot_uid=snapshot.uid,
            phase=snapshot.phase,
            message=snapshot.message,
            error=error,
        )

    def _complete(
        self,
        uow: ReconciliationUnitOfWork,
        snapshot: DiscoverySnapshot,
        upsert: UpsertResult,
        link: LinkResult,
        *,
        label: str,
    ) -> ReconciliationOutcome:
        message = COMPLETED_MESSAGE.format(processed=upsert.processed, links=link.links_updated)
        snapshot.complete(message, now=self.clock())
        self._save(uow, snapshot)
        log.info(
            "Reconciling %s: Successfully reconciled (created=%d, updated=%d, skipped=%d, "
            "failed=%d, links=%d)",
            label,
            upsert.created,
            upsert.updated,
            upsert.skipped,
            upsert.failed + link.failed,
            link.links_updated,
        )
        return ReconciliationOutcome(
            snapshot_uid=snapshot.uid,
            phase=snapshot.phase,
            message=snapshot.message,
            upsert=upsert,
            link=link,
        )

    @staticmethod
    def _save(uow: ReconciliationUnitOfWork, snapshot: DiscoverySnapshot) -> None:
        uow.repositories.snapshots.update(snapshot)
        uow.commit()
