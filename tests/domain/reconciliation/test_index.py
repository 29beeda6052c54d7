from __future__ import annotations

import logging

import pytest

from fru_tracker.domain.errors import StoreUnavailableError, UnresolvedReferenceError
from fru_tracker.domain.reconciliation import build_device_index
from tests.helpers.inventory import InMemoryDeviceRepository, make_device


def test_index_keys_devices_by_uri_and_serial() -> None:
    repo = InMemoryDeviceRepository()
    repo.seed(
        make_device("/r1", uid="dev-1", serial="S1"),
        make_device("/r2", uid="dev-2", serial="S2"),
    )

    index = build_device_index(repo)

    assert index.by_uri["/r1"].uid == "dev-1"
    assert index.by_serial["S2"].uid == "dev-2"


def test_device_without_uri_is_indexed_by_serial_only(caplog: pytest.LogCaptureFixture) -> None:
    repo = InMemoryDeviceRepository()
    repo.seed(make_device(None, uid="dev-1", serial="S1"))

    with caplog.at_level(logging.WARNING):
        index = build_device_index(repo)

    assert index.by_uri == {}
    assert index.by_serial["S1"].uid == "dev-1"
    assert "dev-1 has no redfish_uri" in caplog.text


def test_device_without_serial_is_indexed_by_uri_only() -> None:
    repo = InMemoryDeviceRepository()
    repo.seed(make_device("/r1", uid="dev-1"))

    index = build_device_index(repo)

    assert set(index.by_uri) == {"/r1"}
    assert index.by_serial == {}


def test_listing_failure_propagates() -> None:
    repo = InMemoryDeviceRepository(fail_listing=True)

    with pytest.raises(StoreUnavailableError):
        build_device_index(repo)


def test_register_created_extends_both_maps() -> None:
    index = build_device_index(InMemoryDeviceRepository())
    device = make_device("/r1", uid="dev-1", serial="S1")

    index.register_created("/r1", device)

    assert index.find_by_uri("/r1") is device
    assert index.resolve_serial("S1") is device


def test_resolve_unknown_serial_raises() -> None:
    index = build_device_index(InMemoryDeviceRepository())

    with pytest.raises(UnresolvedReferenceError, match="S9"):
        index.resolve_serial("S9")
