"""Snapshot decoder: raw discovery payload -> ordered device specs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from fru_tracker.domain.errors import MalformedPayloadError
from fru_tracker.domain.model import DeviceSpec

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

log = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 3


def _none_to_blank(value: object) -> object:
    return "" if value is None else value


class DeviceDescriptor(BaseModel):
    """One collector-reported device, as it appears on the wire.

    ``parentID`` is not modelled: resolved parents only come from the link pass.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    device_type: str = Field(default="", alias="deviceType")
    manufacturer: str = ""
    part_number: str = Field(default="", alias="partNumber")
    serial_number: str = Field(default="", alias="serialNumber")
    parent_serial_number: str = Field(default="", alias="parentSerialNumber")
    properties: dict[str, JsonValue] = Field(default_factory=dict)

    _null_strings = field_validator(
        "device_type",
        "manufacturer",
        "part_number",
        "serial_number",
        "parent_serial_number",
        mode="before",
    )(_none_to_blank)

    @field_validator("properties", mode="before")
    @classmethod
    def _null_properties(cls, value: object) -> object:
        return {} if value is None else value

    def to_spec(self) -> DeviceSpec:
        return DeviceSpec(
            device_type=self.device_type,
            manufacturer=self.manufacturer,
            part_number=self.part_number,
            serial_number=self.serial_number,
            parent_serial_number=self.parent_serial_number,
            properties=dict(self.properties),
        )


# A JSON ``null`` document is an empty batch, not a malformed one.
_PAYLOAD_ADAPTER: TypeAdapter[list[DeviceDescriptor] | None] = TypeAdapter(
    list[DeviceDescriptor] | None
)


def decode_snapshot_payload(raw_data: str | bytes | None) -> list[DeviceSpec]:
    """Decode ``raw_data`` as a JSON array of device descriptors.

    Raises :class:`MalformedPayloadError` when the document as a whole does not
    decode; no descriptors are returned in that case.
    """

    if raw_data is None:
        raise MalformedPayloadError("payload is empty")
    try:
        descriptors = _PAYLOAD_ADAPTER.validate_json(raw_data)
    except ValidationError as exc:
        raise MalformedPayloadError(_describe(exc.errors())) from exc
    if descriptors is None:
        log.debug("Payload is JSON null; treating it as an empty batch")
        return []
    return [descriptor.to_spec() for descriptor in descriptors]


def _describe(errors: list[ErrorDetails]) -> str:
    parts: list[str] = []
    for error in errors[:MAX_REPORTED_ERRORS]:
        location = ".".join(str(part) for part in error["loc"]) or "payload"
        parts.append(f"{location}: {error['msg']}")
    if len(errors) > MAX_REPORTED_ERRORS:
        parts.append(f"... {len(errors) - MAX_REPORTED_ERRORS} more")
    return "; ".join(parts)
