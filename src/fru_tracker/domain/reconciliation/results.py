"""Per-item outcomes and run summaries of a reconciliation run."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fru_tracker.domain.errors import ReconciliationError
    from fru_tracker.domain.model import Device, SnapshotPhase


class OutcomeStatus(StrEnum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


class ItemAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    LINKED = "linked"


@dataclass(slots=True, frozen=True, kw_only=True)
class ItemOutcome:
    """What happened to one descriptor (upsert pass) or one device (link pass).

    ``key`` is the discovery URI, or ``#<position>`` for a descriptor without one.
    """

    key: str
    status: OutcomeStatus
    action: ItemAction | None = None
    device_uid: str | None = None
    reason: str | None = None

    @classmethod
    def succeeded(cls, key: str, action: ItemAction, device_uid: str) -> ItemOutcome:
        return cls(key=key, status=OutcomeStatus.SUCCEEDED, action=action, device_uid=device_uid)

    @classmethod
    def skipped(cls, key: str, reason: str, *, device_uid: str | None = None) -> ItemOutcome:
        return cls(key=key, status=OutcomeStatus.SKIPPED, reason=reason, device_uid=device_uid)

    @classmethod
    def failed(cls, key: str, reason: str, *, device_uid: str | None = None) -> ItemOutcome:
        return cls(key=key, status=OutcomeStatus.FAILED, reason=reason, device_uid=device_uid)


@dataclass(slots=True)
class _PassResult:
    outcomes: list[ItemOutcome] = field(default_factory=list[ItemOutcome])

    def record(self, outcome: ItemOutcome) -> None:
        self.outcomes.append(outcome)

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    def actions(self) -> Counter[ItemAction]:
        return Counter(
            outcome.action
            for outcome in self.outcomes
            if outcome.status is OutcomeStatus.SUCCEEDED and outcome.action is not None
        )

    @property
    def skipped(self) -> int:
        return self.count(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(OutcomeStatus.FAILED)


@dataclass(slots=True)
class UpsertResult(_PassResult):
    """Outcome of the upsert pass.

    ``touched`` maps each URI created or updated in this run to its device and is
    the candidate set of the link pass.
    """

    touched: dict[str, Device] = field(default_factory=dict[str, "Device"])

    @property
    def processed(self) -> int:
        return self.count(OutcomeStatus.SUCCEEDED)

    @property
    def created(self) -> int:
        return self.actions()[ItemAction.CREATED]

    @property
    def updated(self) -> int:
        return self.actions()[ItemAction.UPDATED]


@dataclass(slots=True)
class LinkResult(_PassResult):
    @property
    def links_updated(self) -> int:
        return self.actions()[ItemAction.LINKED]


@dataclass(slots=True, kw_only=True)
class ReconciliationOutcome:
    """Result of one ``reconcile`` call.

    ``error`` carries a decode failure that was recorded on the snapshot rather
    than raised; callers that only look at exceptions will not see it.
    """

    snapshot_uid: str
    phase: SnapshotPhase
    message: str
    upsert: UpsertResult | None = None
    link: LinkResult | None = None
    error: ReconciliationError | None = None
    short_circuited: bool = False

    @property
    def processed(self) -> int:
        return self.upsert.processed if self.upsert is not None else 0

    @property
    def links_updated(self) -> int:
        return self.link.links_updated if self.link is not None else 0

    @property
    def succeeded(self) -> bool:
        return self.error is None
