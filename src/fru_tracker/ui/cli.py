from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from fru_tracker.app import (
    load_device_tree,
    reconcile_discovery_snapshot,
    reconcile_pending_snapshots,
    submit_discovery_snapshot,
)
from fru_tracker.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from types import FrameType

    from fru_tracker.domain.model import Device
    from fru_tracker.domain.reconciliation import ReconciliationOutcome

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile hardware discovery snapshots")
    subparsers = parser.add_subparsers(dest="command", required=True)

    submit = subparsers.add_parser("submit", help="Store a discovery payload as a new snapshot")
    submit.add_argument("path", type=Path, help="JSON file holding an array of descriptors")
    submit.add_argument("--name", type=str, help="Snapshot name (defaults to its uid)")
    submit.add_argument(
        "--reconcile",
        action="store_true",
        help="Reconcile the snapshot right after storing it",
    )

    reconcile = subparsers.add_parser("reconcile", help="Reconcile one snapshot")
    reconcile.add_argument("snapshot_uid", type=str, help="Identity of the snapshot")

    subparsers.add_parser(
        "reconcile-pending",
        help="Reconcile every snapshot that is not completed, oldest first",
    )
    subparsers.add_parser("tree", help="Log the device hierarchy")

    return parser.parse_args(list(argv))


def _read_payload(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read payload file {path}: {exc}") from exc


def _report(outcomes: Iterable[ReconciliationOutcome]) -> bool:
    """Log each outcome; return whether all of them succeeded."""
    ok = True
    for outcome in outcomes:
        if outcome.error is not None:
            ok = False
            log.error("Snapshot %s: %s (%s)", outcome.snapshot_uid, outcome.phase, outcome.message)
        else:
            log.info("Snapshot %s: %s (%s)", outcome.snapshot_uid, outcome.phase, outcome.message)
    return ok


def _log_tree(devices: Sequence[Device], children: dict[str, list[str]]) -> None:
    by_uid = {device.uid: device for device in devices}
    roots = [device for device in devices if device.parent_id not in by_uid]

    def _walk(device: Device, depth: int, seen: set[str]) -> None:
        log.info(
            "%s%s %s (serial=%s, uid=%s)",
            "  " * depth,
            device.device_type or "?",
            device.name,
            device.serial_number or "-",
            device.uid,
        )
        seen.add(device.uid)
        for child_uid in children.get(device.uid, []):
            if child_uid in by_uid and child_uid not in seen:
                _walk(by_uid[child_uid], depth + 1, seen)

    visited: set[str] = set()
    for root in roots:
        _walk(root, 0, visited)
    log.info("%d devices", len(devices))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        payload = _read_payload(parsed_args.path) if parsed_args.command == "submit" else None
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "submit":
            snapshot = submit_discovery_snapshot(payload or "", name=parsed_args.name)
            log.info("Stored snapshot %s", snapshot.uid)
            ok = True
            if parsed_args.reconcile:
                ok = _report([reconcile_discovery_snapshot(snapshot.uid)])
        elif parsed_args.command == "reconcile":
            ok = _report([reconcile_discovery_snapshot(parsed_args.snapshot_uid)])
        elif parsed_args.command == "reconcile-pending":
            ok = _report(reconcile_pending_snapshots())
        elif parsed_args.command == "tree":
            _log_tree(*load_device_tree())
            ok = True
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)

    if not ok:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
