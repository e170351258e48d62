"""Default execution engine: runs a queue over a claimed USB handle."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from fastbootctl.core.errors import DeviceResponseError, TransportError
from fastbootctl.core.model import (
    Command,
    Display,
    Download,
    Erase,
    Flash,
    Notice,
    QueuedOperation,
    Reboot,
)

MAX_COMMAND_BYTES = 64
RESPONSE_BYTES = 64
MAX_WRITE_BYTES = 1024 * 1024
LOGGER = logging.getLogger(__name__)


class UsbEngine:
    """Executes operations strictly in order, stopping at the first failure."""

    def __init__(self, report: Callable[[str], None] = print) -> None:
        self.report = report

    def execute(self, operations: Sequence[QueuedOperation], device: Any) -> bool:
        started = time.monotonic()
        for operation in operations:
            try:
                self._run(operation, device)
            except TransportError as exc:
                LOGGER.debug("Operation %r failed", operation)
                self.report(f"FAILED ({exc})")
                return False
        self.report(f"finished. total time: {time.monotonic() - started:.3f}s")
        return True

    def _run(self, operation: QueuedOperation, device: Any) -> None:
        if isinstance(operation, Flash):
            self._step(
                f"sending '{operation.partition}' ({operation.length // 1024} KB)",
                lambda: self._download(device, operation.payload),
            )
            self._step(
                f"writing '{operation.partition}'",
                lambda: self._transact(device, f"flash:{operation.partition}"),
            )
        elif isinstance(operation, Download):
            self._step(
                f"sending '{operation.tag}' ({operation.length // 1024} KB)",
                lambda: self._download(device, operation.payload),
            )
        elif isinstance(operation, Erase):
            self._step(
                f"erasing '{operation.partition}'",
                lambda: self._transact(device, f"erase:{operation.partition}"),
            )
        elif isinstance(operation, Display):
            _, value = self._transact(device, f"getvar:{operation.variable}")
            self.report(f"{operation.label}: {value}")
        elif isinstance(operation, Notice):
            self.report(operation.message)
        elif isinstance(operation, Reboot):
            self._step("rebooting", lambda: self._transact(device, "reboot"))
        elif isinstance(operation, Command):
            self._step(
                operation.description or operation.name,
                lambda: self._transact(device, operation.name),
            )
        else:
            raise TypeError(f"Unsupported operation {operation!r}")

    def _step(self, label: str, action: Callable[[], object]) -> None:
        started = time.monotonic()
        action()
        self.report(f"{label}... OKAY [{time.monotonic() - started:7.3f}s]")

    def _transact(self, device: Any, command: str) -> tuple[str, str]:
        encoded = command.encode("ascii", errors="replace")
        if len(encoded) > MAX_COMMAND_BYTES:
            raise TransportError(f"command too long: '{command}'")
        device.write(encoded)
        return self._read_status(device)

    def _read_status(self, device: Any) -> tuple[str, str]:
        while True:
            reply = device.read(RESPONSE_BYTES)
            status = reply[:4].decode("ascii", errors="replace")
            body = reply[4:].decode("ascii", errors="replace")
            if status == "INFO":
                self.report(f"(bootloader) {body}")
                continue
            if status in ("OKAY", "DATA"):
                return status, body
            if status == "FAIL":
                raise DeviceResponseError(f"remote: {body}")
            raise DeviceResponseError(f"unknown reply from device: {reply!r}")

    def _download(self, device: Any, payload: bytes) -> None:
        status, body = self._transact(device, f"download:{len(payload):08x}")
        if status != "DATA":
            raise DeviceResponseError("device did not accept download")
        try:
            accepted = int(body, 16)
        except ValueError as exc:
            raise DeviceResponseError(f"bad DATA reply '{body}'") from exc
        if accepted != len(payload):
            raise DeviceResponseError(f"device asked for {accepted} bytes, have {len(payload)}")
        for offset in range(0, len(payload), MAX_WRITE_BYTES):
            device.write(payload[offset : offset + MAX_WRITE_BYTES])
        status, _ = self._read_status(device)
        if status != "OKAY":
            raise DeviceResponseError("device did not acknowledge download")

