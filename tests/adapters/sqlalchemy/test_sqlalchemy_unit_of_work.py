from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError

from fru_tracker.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyReconciliationUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from fru_tracker.domain.errors import StoreUnavailableError
from tests.helpers.inventory import make_device

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from sqlalchemy.engine import Engine


def test_unit_of_work_requires_startup() -> None:
    shutdown()

    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyReconciliationUnitOfWork()


def test_startup_twice_requires_force(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    try:
        with pytest.raises(StartupError):
            startup(engine=sqlite_engine)
        startup(engine=sqlite_engine, force=True)
        assert configured_engine() is sqlite_engine
    finally:
        shutdown()


def test_startup_builds_engine_from_uri() -> None:
    startup(database_uri="sqlite+pysqlite:///:memory:", force=True)
    try:
        engine = configured_engine()
        assert engine is not None
        assert engine.url.drivername == "sqlite+pysqlite"
    finally:
        shutdown()


def test_startup_reads_database_uri_from_environment(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    database = tmp_path / "inventory.db"
    monkeypatch.setenv("DATABASE_URI", f"sqlite+pysqlite:///{database}")
    startup(force=True)
    try:
        engine = configured_engine()
        assert engine is not None
        assert engine.url.database == str(database)
    finally:
        shutdown()
    assert database.exists()


def test_repositories_require_an_open_unit_of_work(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReconciliationUnitOfWork],
) -> None:
    uow = sqlite_unit_of_work()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_committed_writes_are_visible_to_the_next_unit_of_work(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReconciliationUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.devices.add(make_device("/r1", uid="dev-00000001"))
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.devices.get("dev-00000001") is not None


def test_uncommitted_writes_roll_back_on_error(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReconciliationUnitOfWork],
) -> None:
    def write_then_fail() -> None:
        with sqlite_unit_of_work() as uow:
            uow.repositories.devices.add(make_device("/r1", uid="dev-00000001"))
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        write_then_fail()

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.devices.get("dev-00000001") is None


def test_commit_failure_surfaces_as_store_unavailable(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReconciliationUnitOfWork],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def failing_commit() -> None:
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    with sqlite_unit_of_work() as uow:
        monkeypatch.setattr(uow.session, "commit", failing_commit)
        with pytest.raises(StoreUnavailableError, match="database is locked"):
            uow.commit()


def test_unit_of_work_binds_to_started_engine(
    sqlite_unit_of_work: Callable[[], SqlAlchemyReconciliationUnitOfWork],
    sqlite_engine: Engine,
) -> None:
    with sqlite_unit_of_work() as uow:
        assert uow.session.get_bind() is sqlite_engine


def test_fresh_engine_gets_tables_on_startup() -> None:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    startup(engine=engine, force=True)
    try:
        with SqlAlchemyReconciliationUnitOfWork() as uow:
            assert list(uow.repositories.snapshots.list_all()) == []
    finally:
        shutdown()
