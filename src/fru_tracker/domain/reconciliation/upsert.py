"""Pass 1: create or update one device per discovery URI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fru_tracker.domain.errors import StoreUnavailableError, UnresolvedReferenceError
from fru_tracker.domain.model import REDFISH_URI_PROPERTY, Device, ResourceKind

from .persist import persist_device
from .results import ItemAction, ItemOutcome, UpsertResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

    from fru_tracker.domain.model import DeviceSpec, UidFactory
    from fru_tracker.domain.ports import ReconciliationUnitOfWork

    from .index import DeviceIndex

log = logging.getLogger(__name__)

MISSING_URI_REASON = f"missing {REDFISH_URI_PROPERTY}"


def upsert_devices(
    specs: Iterable[DeviceSpec],
    *,
    index: DeviceIndex,
    uow: ReconciliationUnitOfWork,
    new_uid: UidFactory,
    clock: Callable[[], datetime],
    label: str = "",
) -> UpsertResult:
    """Upsert ``specs`` in input order, keyed by their ``redfish_uri`` property.

    Devices created here are added to ``index`` straight away so that later specs
    in the same batch can link to them. A spec without a URI, or whose write
    fails, is recorded and skipped; the pass always runs to the end.
    """

    result = UpsertResult()
    for position, spec in enumerate(specs):
        try:
            uri = _require_uri(spec)
        except UnresolvedReferenceError as exc:
            log.error("Reconciling %s (Pass 1): Skipping device #%d, %s", label, position, exc)
            result.record(ItemOutcome.skipped(f"#{position}", MISSING_URI_REASON))
            continue

        existing = index.find_by_uri(uri)
        try:
            if existing is None:
                device = _create(spec, uri, uow=uow, new_uid=new_uid, now=clock(), label=label)
                index.register_created(uri, device)
                action = ItemAction.CREATED
            else:
                device = _update(existing, spec, uri, uow=uow, now=clock(), label=label)
                action = ItemAction.UPDATED
        except StoreUnavailableError as exc:
            log.error("Reconciling %s (Pass 1): Failed to upsert device %s: %s", label, uri, exc)
            uid = existing.uid if existing is not None else None
            result.record(ItemOutcome.failed(uri, str(exc), device_uid=uid))
            continue

        result.touched[uri] = device
        result.record(ItemOutcome.succeeded(uri, action, device.uid))
    return result


def _require_uri(spec: DeviceSpec) -> str:
    uri = spec.redfish_uri
    if uri is None:
        raise UnresolvedReferenceError(f"missing or empty {REDFISH_URI_PROPERTY}")
    return uri


def _create(
    spec: DeviceSpec,
    uri: str,
    *,
    uow: ReconciliationUnitOfWork,
    new_uid: UidFactory,
    now: datetime,
    label: str,
) -> Device:
    log.info("Reconciling %s (Pass 1): Creating new device: %s", label, uri)
    device = Device.from_spec(spec, uid=new_uid(ResourceKind.DEVICE), name=uri, now=now)
    persist_device(uow, device, create=True)
    return device


def _update(
    device: Device,
    spec: DeviceSpec,
    uri: str,
    *,
    uow: ReconciliationUnitOfWork,
    now: datetime,
    label: str,
) -> Device:
    log.info(
        "Reconciling %s (Pass 1): Updating existing device: %s (UID: %s)", label, uri, device.uid
    )
    # parent_id survives: apply_spec never touches it
    device.apply_spec(spec, now=now)
    persist_device(uow, device, create=False)
    return device
