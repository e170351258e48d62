"""USB enumeration and bulk transfers using pyusb."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import usb.core
import usb.util

from fastbootctl.core.errors import TransportError, TransportTimeoutError
from fastbootctl.core.model import DeviceDescriptor
from fastbootctl.transports.base import DevicePredicate

LOGGER = logging.getLogger(__name__)


@dataclass
class UsbHandle:
    device: Any
    interface_number: int
    ep_in: Any
    ep_out: Any
    timeout_ms: int = 5000

    def write(self, data: bytes) -> None:
        try:
            written = self.ep_out.write(data, timeout=self.timeout_ms)
        except usb.core.USBTimeoutError as exc:
            raise TransportTimeoutError("USB write timed out") from exc
        except usb.core.USBError as exc:
            raise TransportError(f"USB write failed: {exc}") from exc
        if written != len(data):
            raise TransportError(f"short USB write ({written} of {len(data)} bytes)")

    def read(self, size: int) -> bytes:
        try:
            return bytes(self.ep_in.read(size, timeout=self.timeout_ms))
        except usb.core.USBTimeoutError as exc:
            raise TransportTimeoutError("USB read timed out") from exc
        except usb.core.USBError as exc:
            raise TransportError(f"USB read failed: {exc}") from exc

    def close(self) -> None:
        try:
            usb.util.release_interface(self.device, self.interface_number)
        except usb.core.USBError as exc:
            LOGGER.debug("Releasing interface %d failed: %s", self.interface_number, exc)
        usb.util.dispose_resources(self.device)


def _read_serial(dev: Any) -> tuple[str, bool]:
    """Return the serial string and whether the device could be opened."""
    if not dev.iSerialNumber:
        return "", True
    try:
        return (usb.util.get_string(dev, dev.iSerialNumber) or "").strip(), True
    except (ValueError, NotImplementedError, usb.core.USBError) as exc:
        LOGGER.debug("Cannot read serial of %04x:%04x: %s", dev.idVendor, dev.idProduct, exc)
        return "", False


class PyUsbBackend:
    def open(self, predicate: DevicePredicate) -> UsbHandle | None:
        try:
            devices = usb.core.find(find_all=True)
        except usb.core.NoBackendError as exc:
            raise TransportError("No USB backend available (is libusb installed?)") from exc

        for dev in devices:
            serial: tuple[str, bool] | None = None
            for cfg in dev:
                for intf in cfg:
                    if serial is None:
                        serial = _read_serial(dev)
                    descriptor = DeviceDescriptor(
                        vendor=dev.idVendor,
                        ifc_class=intf.bInterfaceClass,
                        ifc_subclass=intf.bInterfaceSubClass,
                        ifc_protocol=intf.bInterfaceProtocol,
                        serial=serial[0],
                        writable=serial[1],
                    )
                    if predicate(descriptor):
                        return self._claim(dev, intf)
        return None

    def _claim(self, dev: Any, intf: Any) -> UsbHandle:
        number = intf.bInterfaceNumber
        try:
            try:
                dev.get_active_configuration()
            except usb.core.USBError:
                dev.set_configuration()
            try:
                if dev.is_kernel_driver_active(number):
                    dev.detach_kernel_driver(number)
            except NotImplementedError:
                pass
            usb.util.claim_interface(dev, number)
        except usb.core.USBError as exc:
            raise TransportError(f"Could not claim fastboot interface: {exc}") from exc

        ep_out = usb.util.find_descriptor(
            intf,
            custom_match=lambda e: usb.util.endpoint_direction(e.bEndpointAddress) == usb.util.ENDPOINT_OUT,
        )
        ep_in = usb.util.find_descriptor(
            intf,
            custom_match=lambda e: usb.util.endpoint_direction(e.bEndpointAddress) == usb.util.ENDPOINT_IN,
        )
        if ep_out is None or ep_in is None:
            usb.util.release_interface(dev, number)
            raise TransportError("Could not find bulk IN/OUT endpoints on fastboot interface")
        LOGGER.debug(
            "Claimed %04x:%04x interface %d (IN=0x%02x, OUT=0x%02x)",
            dev.idVendor,
            dev.idProduct,
            number,
            ep_in.bEndpointAddress,
            ep_out.bEndpointAddress,
        )
        return UsbHandle(device=dev, interface_number=number, ep_in=ep_in, ep_out=ep_out)
