"""URI/serial lookup tables over the current device universe."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fru_tracker.domain.errors import UnresolvedReferenceError
from fru_tracker.domain.model import Device

if TYPE_CHECKING:
    from fru_tracker.domain.ports import DeviceRepository

log = logging.getLogger(__name__)


@dataclass(slots=True)
class DeviceIndex:
    """Devices keyed by discovery URI and by serial number.

    Rebuilt from a full listing at the start of every run, then extended by the
    upsert pass as it creates devices.
    """

    by_uri: dict[str, Device] = field(default_factory=dict[str, Device])
    by_serial: dict[str, Device] = field(default_factory=dict[str, Device])

    def find_by_uri(self, uri: str) -> Device | None:
        return self.by_uri.get(uri)

    def resolve_serial(self, serial_number: str) -> Device:
        try:
            return self.by_serial[serial_number]
        except KeyError:
            raise UnresolvedReferenceError(
                f"no device with serial number {serial_number!r}"
            ) from None

    def register_created(self, uri: str, device: Device) -> None:
        self.by_uri[uri] = device
        if device.serial_number:
            self.by_serial[device.serial_number] = device


def build_device_index(devices: DeviceRepository) -> DeviceIndex:
    """List every device once and index it.

    A listing failure propagates as ``StoreUnavailableError``; no partial index is
    ever returned.
    """

    index = DeviceIndex()
    for item in devices.list_all():
        if not isinstance(item, Device):
            log.error("Found non-device item %r in device storage, skipping", item)
            continue
        uri = item.redfish_uri
        if uri is None:
            log.warning("Device %s has no redfish_uri, skipping from URI map", item.uid)
        else:
            index.by_uri[uri] = item
        if item.serial_number:
            index.by_serial[item.serial_number] = item
    return index
