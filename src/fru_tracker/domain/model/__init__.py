"""Domain model for the device inventory."""

from __future__ import annotations

from .base import API_VERSION, Resource, utcnow
from .device import REDFISH_URI_PROPERTY, Device, DeviceSpec, Properties, redfish_uri_of
from .enums import ResourceKind, SnapshotPhase
from .identity import UidFactory, UnknownResourceKindError, generate_uid, uid_factory
from .snapshot import PROCESSING_MESSAGE, DiscoverySnapshot, InvalidPhaseTransitionError

__all__ = [
    "API_VERSION",
    "PROCESSING_MESSAGE",
    "REDFISH_URI_PROPERTY",
    "Device",
    "DeviceSpec",
    "DiscoverySnapshot",
    "InvalidPhaseTransitionError",
    "Properties",
    "Resource",
    "ResourceKind",
    "SnapshotPhase",
    "UidFactory",
    "UnknownResourceKindError",
    "generate_uid",
    "redfish_uri_of",
    "uid_factory",
    "utcnow",
]
