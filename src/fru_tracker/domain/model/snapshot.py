"""Discovery snapshots and their processing lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Final

from .base import Resource
from .enums import ResourceKind, SnapshotPhase

if TYPE_CHECKING:
    from datetime import datetime

PROCESSING_MESSAGE: Final[str] = "Reconciler has started processing the snapshot."

# Completed is terminal; Processing and Error may be re-entered by a new run.
_ALLOWED_TRANSITIONS: Final[dict[SnapshotPhase, frozenset[SnapshotPhase]]] = {
    SnapshotPhase.PENDING: frozenset({SnapshotPhase.PROCESSING}),
    SnapshotPhase.PROCESSING: frozenset(
        {SnapshotPhase.PROCESSING, SnapshotPhase.COMPLETED, SnapshotPhase.ERROR}
    ),
    SnapshotPhase.ERROR: frozenset({SnapshotPhase.PROCESSING}),
    SnapshotPhase.COMPLETED: frozenset(),
}


class InvalidPhaseTransitionError(RuntimeError):
    """Raised when a snapshot is moved along an edge the lifecycle does not allow."""

    def __init__(self, uid: str, current: SnapshotPhase, target: SnapshotPhase) -> None:
        super().__init__(f"Snapshot {uid}: cannot move from {current} to {target}")
        self.current = current
        self.target = target


@dataclass(eq=False, kw_only=True)
class DiscoverySnapshot(Resource):
    KIND: ClassVar[ResourceKind] = ResourceKind.DISCOVERY_SNAPSHOT

    raw_data: str
    phase: SnapshotPhase = SnapshotPhase.PENDING
    message: str = ""
    ready: bool = False

    @property
    def is_completed(self) -> bool:
        return self.phase == SnapshotPhase.COMPLETED

    def start_processing(self, *, now: datetime) -> None:
        self._move_to(SnapshotPhase.PROCESSING, PROCESSING_MESSAGE, ready=False, now=now)

    def fail(self, message: str, *, now: datetime) -> None:
        self._move_to(SnapshotPhase.ERROR, message, ready=False, now=now)

    def complete(self, message: str, *, now: datetime) -> None:
        self._move_to(SnapshotPhase.COMPLETED, message, ready=True, now=now)

    def _move_to(
        self,
        target: SnapshotPhase,
        message: str,
        *,
        ready: bool,
        now: datetime,
    ) -> None:
        current = SnapshotPhase(self.phase or SnapshotPhase.PENDING)
        if target not in _ALLOWED_TRANSITIONS[current]:
            raise InvalidPhaseTransitionError(self.uid, current, target)
        self.phase = target
        self.message = message
        self.ready = ready
        self.touch(now)
