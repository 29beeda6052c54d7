"""
Base building blocks:
resource identity, naming and timestamps shared by every stored kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from fru_tracker.domain.model.enums import ResourceKind

API_VERSION = "example.fabrica.dev/v1"


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class Resource:
    """Identity is assigned once at creation and never changes afterwards."""

    uid: str
    name: str
    api_version: str = API_VERSION
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # class-level discriminator; subclasses must override
    KIND: ClassVar[ResourceKind]

    @property
    def kind(self) -> ResourceKind:
        return self.KIND

    def touch(self, now: datetime) -> None:
        """Record a modification at ``now``."""
        self.updated_at = now
