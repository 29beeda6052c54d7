"""Pass 2: resolve declared parent serial numbers into parent identifiers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fru_tracker.domain.errors import StoreUnavailableError, UnresolvedReferenceError

from .persist import persist_device
from .results import ItemAction, ItemOutcome, LinkResult

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import datetime

    from fru_tracker.domain.model import Device
    from fru_tracker.domain.ports import ReconciliationUnitOfWork

    from .index import DeviceIndex

log = logging.getLogger(__name__)

NO_PARENT_REASON = "no parent serial number"
UNCHANGED_REASON = "parent already linked"


def link_parents(
    touched: Mapping[str, Device],
    *,
    index: DeviceIndex,
    uow: ReconciliationUnitOfWork,
    clock: Callable[[], datetime],
    label: str = "",
) -> LinkResult:
    """Link every touched device to the device carrying its parent serial number.

    One relaxation pass: parents are looked up in ``index`` as the upsert pass
    left it. Unresolvable parents and failed writes leave the device's previous
    ``parent_id`` in place.
    """

    log.info("Reconciling %s (Pass 2): Linking parent relationships...", label)
    result = LinkResult()
    for uri, device in touched.items():
        parent_serial = device.parent_serial_number
        if not parent_serial:
            result.record(ItemOutcome.skipped(uri, NO_PARENT_REASON, device_uid=device.uid))
            continue

        try:
            parent = _resolve_parent(device, parent_serial, index)
        except UnresolvedReferenceError as exc:
            log.error(
                "Reconciling %s (Pass 2): Unresolved reference for child %s (serial %s): %s",
                label,
                device.name,
                device.serial_number,
                exc,
            )
            result.record(ItemOutcome.skipped(uri, str(exc), device_uid=device.uid))
            continue

        if device.parent_id == parent.uid:
            result.record(ItemOutcome.skipped(uri, UNCHANGED_REASON, device_uid=device.uid))
            continue

        log.info(
            "Reconciling %s (Pass 2): Linking %s (UID: %s) to parent %s (UID: %s)",
            label,
            device.name,
            device.uid,
            parent.name,
            parent.uid,
        )
        device.link_parent(parent, now=clock())
        try:
            persist_device(uow, device, create=False)
        except StoreUnavailableError as exc:
            log.error(
                "Reconciling %s (Pass 2): Failed to update parent link for %s: %s",
                label,
                device.name,
                exc,
            )
            result.record(ItemOutcome.failed(uri, str(exc), device_uid=device.uid))
            continue
        result.record(ItemOutcome.succeeded(uri, ItemAction.LINKED, device.uid))
    return result


def _resolve_parent(device: Device, parent_serial: str, index: DeviceIndex) -> Device:
    parent = index.resolve_serial(parent_serial)
    if parent.uid == device.uid:
        raise UnresolvedReferenceError(f"device {device.uid} names itself as parent")
    return parent
