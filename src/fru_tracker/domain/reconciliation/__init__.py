"""Discovery-snapshot reconciliation core.

Flow of one run:
1) decode the snapshot payload into device specs
2) index existing devices by discovery URI and serial number
3) pass 1 (upsert): create or update one device per URI
4) pass 2 (link): resolve parent serial numbers into parent identifiers
5) record the outcome on the snapshot
"""

from __future__ import annotations

from .decode import DeviceDescriptor, decode_snapshot_payload
from .engine import DiscoverySnapshotReconciler
from .index import DeviceIndex, build_device_index
from .link import link_parents
from .results import (
    ItemAction,
    ItemOutcome,
    LinkResult,
    OutcomeStatus,
    ReconciliationOutcome,
    UpsertResult,
)
from .upsert import upsert_devices

__all__ = [
    "DeviceDescriptor",
    "DeviceIndex",
    "DiscoverySnapshotReconciler",
    "ItemAction",
    "ItemOutcome",
    "LinkResult",
    "OutcomeStatus",
    "ReconciliationOutcome",
    "UpsertResult",
    "build_device_index",
    "decode_snapshot_payload",
    "link_parents",
    "upsert_devices",
]
