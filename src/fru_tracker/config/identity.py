"""Identity prefixes per resource kind."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

ID_PREFIXES_ENV_VAR: Final[str] = "FRU_TRACKER_ID_PREFIXES"

DEFAULT_ID_PREFIXES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "Device": "dev",
        "DiscoverySnapshot": "dis",
    }
)


@dataclass(frozen=True, slots=True)
class IdentityConfig:
    """Maps a resource kind (``"Device"``) to the prefix of its generated identities."""

    prefixes: Mapping[str, str] = field(default_factory=lambda: DEFAULT_ID_PREFIXES)

    def prefix_for(self, kind: str) -> str:
        try:
            return self.prefixes[kind]
        except KeyError:
            raise ConfigurationError(f"No identity prefix configured for kind {kind!r}") from None


def _parse_prefixes(value: str) -> dict[str, str]:
    # Format: "Device=dev,DiscoverySnapshot=dis"
    prefixes: dict[str, str] = {}
    for entry in value.split(","):
        if not entry.strip():
            continue
        kind, sep, prefix = entry.partition("=")
        if not sep or not kind.strip() or not prefix.strip():
            raise ConfigurationError(f"Invalid identity prefix entry: {entry!r}")
        prefixes[kind.strip()] = prefix.strip()
    return prefixes


def get_identity_config() -> IdentityConfig:
    override = optional_env_var(ID_PREFIXES_ENV_VAR)
    if override is None:
        return IdentityConfig()
    return IdentityConfig(prefixes={**DEFAULT_ID_PREFIXES, **_parse_prefixes(override)})
