"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ResourceKind(StrEnum):
    DEVICE = "Device"
    DISCOVERY_SNAPSHOT = "DiscoverySnapshot"


class SnapshotPhase(StrEnum):
    """Processing lifecycle of a discovery snapshot."""

    PENDING = "Pending"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    ERROR = "Error"
