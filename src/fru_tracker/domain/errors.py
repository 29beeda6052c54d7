"""Error taxonomy of the reconciliation core."""

from __future__ import annotations


class ReconciliationError(Exception):
    """Base class for reconciliation failures."""


class MalformedPayloadError(ReconciliationError):
    """The snapshot's raw payload is not an array of device descriptors.

    Terminal for the run. The reconciler records it on the snapshot instead of
    raising it.
    """


class StoreUnavailableError(ReconciliationError):
    """The backing store failed to list, read or write a record."""


class UnresolvedReferenceError(ReconciliationError):
    """A descriptor lacks its discovery key or names an unknown parent.

    Always item-level: caught inside the passes and recorded as a skipped item.
    """


class SnapshotNotFoundError(ReconciliationError, LookupError):
    """No snapshot exists with the requested identity."""

    def __init__(self, uid: str) -> None:
        super().__init__(f"Discovery snapshot {uid} not found")
        self.uid = uid
