"""Single-record writes, each committed on its own."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fru_tracker.domain.errors import StoreUnavailableError

if TYPE_CHECKING:
    from fru_tracker.domain.model import Device
    from fru_tracker.domain.ports import ReconciliationUnitOfWork


def persist_device(uow: ReconciliationUnitOfWork, device: Device, *, create: bool) -> None:
    """Create or update ``device`` and commit just that write.

    On ``StoreUnavailableError`` the unit of work is rolled back and the error
    re-raised for the caller to record as a failed item.
    """

    devices = uow.repositories.devices
    try:
        if create:
            devices.add(device)
        else:
            devices.update(device)
        uow.commit()
    except StoreUnavailableError:
        uow.rollback()
        raise
