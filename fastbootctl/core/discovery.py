"""Locating fastboot devices through the USB backend."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from fastbootctl.core.device_match import matches
from fastbootctl.core.model import DeviceDescriptor, MatchFilter
from fastbootctl.transports.base import UsbBackend

WAITING_NOTICE = "< waiting for device >"
NO_PERMISSIONS = "no permissions"
UNKNOWN_SERIAL = "????????????"
DEVICE_KIND = "fastboot"
LOGGER = logging.getLogger(__name__)


def acquire_device(
    backend: UsbBackend,
    match_filter: MatchFilter,
    *,
    notify: Callable[[str], None],
    poll_interval_s: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Block until a matching device shows up and return its handle.

    There is no timeout: the loop only ends when a device is found or the
    process is terminated. `notify` receives the waiting notice once.
    """
    announced = False
    attempt = 0
    while True:
        attempt += 1
        handle = backend.open(lambda descriptor: matches(descriptor, match_filter))
        if handle is not None:
            LOGGER.debug("Acquired device after %d attempt(s)", attempt)
            return handle
        if not announced:
            announced = True
            notify(WAITING_NOTICE)
        sleep(poll_interval_s)


def format_device_line(descriptor: DeviceDescriptor) -> str:
    serial = descriptor.serial
    if not descriptor.writable:
        serial = NO_PERMISSIONS
    if not serial:
        serial = UNKNOWN_SERIAL
    return f"{serial}\t{DEVICE_KIND}"


def list_devices(backend: UsbBackend, match_filter: MatchFilter) -> list[str]:
    lines: list[str] = []

    def _collect(descriptor: DeviceDescriptor) -> bool:
        if matches(descriptor, match_filter):
            lines.append(format_device_line(descriptor))
        else:
            LOGGER.debug("Skipping non-fastboot interface of vendor 0x%04x", descriptor.vendor)
        # never accept, so every candidate is visited
        return False

    backend.open(_collect)
    return lines
