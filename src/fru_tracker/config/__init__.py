"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .identity import DEFAULT_ID_PREFIXES, IdentityConfig, get_identity_config
from .logging import configure_logging, resolve_log_level
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_ID_PREFIXES",
    "ConfigurationError",
    "DatabaseConfig",
    "IdentityConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_identity_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
    "resolve_log_level",
]
