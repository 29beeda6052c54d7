from __future__ import annotations

from fru_tracker.domain.reconciliation import (
    DeviceIndex,
    OutcomeStatus,
    build_device_index,
    link_parents,
)
from fru_tracker.domain.reconciliation.link import NO_PARENT_REASON, UNCHANGED_REASON
from tests.helpers.inventory import FakeStore, TickingClock, make_device


def _run(store: FakeStore, touched_uris: list[str], index: DeviceIndex | None = None):
    index = index or build_device_index(store.devices)
    touched = {uri: index.by_uri[uri] for uri in touched_uris}
    uow = store.unit_of_work()
    result = link_parents(touched, index=index, uow=uow, clock=TickingClock(), label="test")
    return result, uow


def test_links_child_to_parent_by_serial() -> None:
    store = FakeStore()
    store.devices.seed(
        make_device("/chassis", uid="dev-00000001", serial="C1"),
        make_device("/node", uid="dev-00000002", serial="N1", parent_serial="C1"),
    )

    result, uow = _run(store, ["/chassis", "/node"])

    assert result.links_updated == 1
    assert store.devices.records["dev-00000002"].parent_id == "dev-00000001"
    assert store.devices.ops("update") == ["dev-00000002"]
    assert uow.commits == 1
    assert result.outcomes[0].reason == NO_PARENT_REASON


def test_existing_link_is_not_rewritten() -> None:
    store = FakeStore()
    store.devices.seed(
        make_device("/chassis", uid="dev-00000001", serial="C1"),
        make_device(
            "/node",
            uid="dev-00000002",
            serial="N1",
            parent_serial="C1",
            parent_id="dev-00000001",
        ),
    )

    result, _ = _run(store, ["/node"])

    assert result.links_updated == 0
    assert result.outcomes[0].reason == UNCHANGED_REASON
    assert store.devices.writes == []


def test_unresolved_parent_keeps_previous_link() -> None:
    store = FakeStore()
    store.devices.seed(
        make_device(
            "/node",
            uid="dev-00000002",
            serial="N1",
            parent_serial="GONE",
            parent_id="dev-old00000",
        ),
    )

    result, _ = _run(store, ["/node"])

    assert result.skipped == 1
    assert "GONE" in (result.outcomes[0].reason or "")
    assert store.devices.records["dev-00000002"].parent_id == "dev-old00000"
    assert store.devices.writes == []


def test_self_parent_is_unresolved() -> None:
    store = FakeStore()
    store.devices.seed(make_device("/node", uid="dev-00000001", serial="N1", parent_serial="N1"))

    result, _ = _run(store, ["/node"])

    assert result.outcomes[0].status is OutcomeStatus.SKIPPED
    assert store.devices.records["dev-00000001"].parent_id is None


def test_untouched_devices_are_not_linked() -> None:
    store = FakeStore()
    store.devices.seed(
        make_device("/chassis", uid="dev-00000001", serial="C1"),
        make_device("/node", uid="dev-00000002", serial="N1", parent_serial="C1"),
    )

    result, _ = _run(store, ["/chassis"])

    assert result.links_updated == 0
    assert store.devices.records["dev-00000002"].parent_id is None


def test_failed_link_write_is_isolated() -> None:
    store = FakeStore()
    store.devices.seed(
        make_device("/chassis", uid="dev-00000001", serial="C1"),
        make_device("/a", uid="dev-00000002", serial="A", parent_serial="C1"),
        make_device("/b", uid="dev-00000003", serial="B", parent_serial="C1"),
    )
    store.devices.fail_when = lambda op, device: device.uid == "dev-00000002"

    result, uow = _run(store, ["/a", "/b"])

    assert result.failed == 1
    assert result.links_updated == 1
    assert uow.rollbacks == 1
    assert store.devices.records["dev-00000002"].parent_id is None
    assert store.devices.records["dev-00000003"].parent_id == "dev-00000001"
