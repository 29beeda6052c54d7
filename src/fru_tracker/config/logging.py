"""Shared logging helpers for fru-tracker."""

from __future__ import annotations

import logging
import os

from .errors import ConfigurationError

LOG_LEVEL_ENV_VAR = "FRU_TRACKER_LOG_LEVEL"


def resolve_log_level(value: str | None = None) -> int:
    """Translate a level name (``"debug"``, ``"WARNING"`` ...) into a logging level."""

    name = (value if value is not None else os.getenv(LOG_LEVEL_ENV_VAR, "INFO")).strip()
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ConfigurationError(f"Unknown log level: {name!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with terse, CLI-friendly defaults.

    ``level`` falls back to ``FRU_TRACKER_LOG_LEVEL`` (default INFO). Pass
    ``force=True`` to reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level if level is not None else resolve_log_level(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
