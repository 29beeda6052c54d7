"""Device records and the discovery-sourced part of their spec."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from pydantic import JsonValue

from .base import Resource
from .enums import ResourceKind

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

REDFISH_URI_PROPERTY = "redfish_uri"

type Properties = dict[str, JsonValue]


@dataclass(frozen=True, slots=True, kw_only=True)
class DeviceSpec:
    """Device attributes as reported by discovery.

    The resolved parent identifier is absent: it is owned by the
    link pass and lives on :class:`Device` only.
    """

    device_type: str = ""
    manufacturer: str = ""
    part_number: str = ""
    serial_number: str = ""
    parent_serial_number: str = ""
    properties: Mapping[str, JsonValue] = field(default_factory=dict)

    @property
    def redfish_uri(self) -> str | None:
        return redfish_uri_of(self.properties)


def redfish_uri_of(properties: Mapping[str, JsonValue] | None) -> str | None:
    """Return the non-empty string ``redfish_uri`` property, if there is one."""

    if not properties:
        return None
    value = properties.get(REDFISH_URI_PROPERTY)
    if not isinstance(value, str) or not value:
        return None
    return value


@dataclass(eq=False, kw_only=True)
class Device(Resource):
    KIND: ClassVar[ResourceKind] = ResourceKind.DEVICE

    device_type: str = ""
    manufacturer: str = ""
    part_number: str = ""
    serial_number: str = ""
    parent_id: str | None = None
    parent_serial_number: str = ""
    properties: Properties = field(default_factory=dict)

    # status
    phase: str = ""
    message: str = ""
    ready: bool = False

    @classmethod
    def from_spec(cls, spec: DeviceSpec, *, uid: str, name: str, now: datetime) -> Device:
        device = cls(uid=uid, name=name, created_at=now, updated_at=now)
        device.apply_spec(spec, now=now)
        return device

    @property
    def spec(self) -> DeviceSpec:
        return DeviceSpec(
            device_type=self.device_type,
            manufacturer=self.manufacturer,
            part_number=self.part_number,
            serial_number=self.serial_number,
            parent_serial_number=self.parent_serial_number,
            properties=dict(self.properties or {}),
        )

    @property
    def redfish_uri(self) -> str | None:
        return redfish_uri_of(self.properties)

    def apply_spec(self, spec: DeviceSpec, *, now: datetime) -> None:
        """Overwrite the discovery-sourced fields; ``parent_id`` is left as it is."""

        self.device_type = spec.device_type
        self.manufacturer = spec.manufacturer
        self.part_number = spec.part_number
        self.serial_number = spec.serial_number
        self.parent_serial_number = spec.parent_serial_number
        self.properties = dict(spec.properties)
        self.touch(now)

    def link_parent(self, parent: Device, *, now: datetime) -> None:
        if parent.uid == self.uid:
            raise ValueError(f"Device {self.uid} cannot be its own parent")
        self.parent_id = parent.uid
        self.touch(now)
