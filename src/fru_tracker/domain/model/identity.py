"""Generation of prefixed resource identities (``dev-1a2b3c4d``)."""

from __future__ import annotations

import secrets
from collections.abc import Callable, Mapping

from .enums import ResourceKind

type UidFactory = Callable[[ResourceKind], str]

UID_RANDOM_BYTES = 4


class UnknownResourceKindError(ValueError):
    """Raised when no identity prefix is known for a resource kind."""


def generate_uid(kind: ResourceKind, *, prefixes: Mapping[str, str]) -> str:
    """Return a fresh identity for ``kind`` using the configured prefix map."""

    prefix = prefixes.get(kind)
    if not prefix:
        raise UnknownResourceKindError(f"No identity prefix registered for {kind}")
    return f"{prefix}-{secrets.token_hex(UID_RANDOM_BYTES)}"


def uid_factory(prefixes: Mapping[str, str]) -> UidFactory:
    """Bind ``prefixes`` into a factory usable by the reconciler."""

    frozen = dict(prefixes)

    def _factory(kind: ResourceKind) -> str:
        return generate_uid(kind, prefixes=frozen)

    return _factory
