from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fru_tracker.config import (
    DEFAULT_ID_PREFIXES,
    ConfigurationError,
    IdentityConfig,
    MissingConfigurationError,
    StorageConfig,
    get_database_config,
    get_identity_config,
    get_storage_config,
    optional_env_var,
    require_env_var,
    require_env_vars,
    resolve_log_level,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FRU_A", "1")
    monkeypatch.setenv("FRU_B", "2")

    assert require_env_vars(["FRU_A", "FRU_B"]) == {"FRU_A": "1", "FRU_B": "2"}


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FRU_A", "   ")
    monkeypatch.delenv("FRU_B", raising=False)

    with pytest.raises(MissingConfigurationError, match="FRU_A, FRU_B"):
        require_env_vars(["FRU_B", "FRU_A"])


def test_require_env_var_single(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FRU_A", "value")

    assert require_env_var("FRU_A") == "value"


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FRU_A", "")

    assert optional_env_var("FRU_A") is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), (" info ", logging.INFO)],
)
def test_resolve_log_level(value: str, expected: int) -> None:
    assert resolve_log_level(value) == expected


def test_resolve_log_level_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FRU_TRACKER_LOG_LEVEL", "error")

    assert resolve_log_level() == logging.ERROR


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="chatty"):
        resolve_log_level("chatty")


def test_default_identity_prefixes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FRU_TRACKER_ID_PREFIXES", raising=False)

    config = get_identity_config()

    assert config.prefix_for("Device") == "dev"
    assert config.prefix_for("DiscoverySnapshot") == "dis"


def test_identity_prefixes_can_be_overridden(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FRU_TRACKER_ID_PREFIXES", "Device=fru, ")

    config = get_identity_config()

    assert config.prefix_for("Device") == "fru"
    assert config.prefix_for("DiscoverySnapshot") == DEFAULT_ID_PREFIXES["DiscoverySnapshot"]


def test_malformed_identity_override_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FRU_TRACKER_ID_PREFIXES", "Device")

    with pytest.raises(ConfigurationError):
        get_identity_config()


def test_unknown_kind_has_no_prefix() -> None:
    with pytest.raises(ConfigurationError):
        IdentityConfig().prefix_for("Rack")


def test_storage_config_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("FRU_TRACKER_DATA_DIR", str(tmp_path / "data"))

    config = get_storage_config()

    assert config.database_path() == (tmp_path / "data" / "fru_tracker.db").resolve()
    assert (tmp_path / "data").is_dir()


def test_storage_default_follows_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("FRU_TRACKER_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    config = get_storage_config()

    assert config.resolve_data_dir() == (tmp_path / "fru-tracker").resolve()


def test_database_uri_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"


def test_database_uri_falls_back_to_storage(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    storage = StorageConfig(data_dir=tmp_path)

    uri = get_database_config(storage=storage).uri

    assert uri == f"sqlite+pysqlite:///{tmp_path.resolve() / 'fru_tracker.db'}"
