"""USB device eligibility rules for fastboot-mode devices."""

from __future__ import annotations

from fastbootctl.core.model import DeviceDescriptor, MatchFilter

VENDOR_WHITELIST: dict[int, str] = {
    0x18D1: "Google",
    0x0451: "Texas Instruments",
    0x0502: "Acer",
    0x0FCE: "Sony Ericsson",
    0x05C6: "Qualcomm",
    0x22B8: "Motorola",
    0x0955: "Nvidia",
    0x413C: "Dell",
    0x8087: "Intel",
    0x0BB4: "HTC",
}

# (class, subclass, protocol) of the fastboot USB interface
FASTBOOT_INTERFACE: tuple[int, int, int] = (0xFF, 0x42, 0x03)


def vendor_accepted(vendor: int, match_filter: MatchFilter) -> bool:
    # vendor id 0 means no override
    if match_filter.vendor_id and vendor == match_filter.vendor_id:
        return True
    return vendor in VENDOR_WHITELIST


def matches(descriptor: DeviceDescriptor, match_filter: MatchFilter) -> bool:
    if not vendor_accepted(descriptor.vendor, match_filter):
        return False
    interface = (descriptor.ifc_class, descriptor.ifc_subclass, descriptor.ifc_protocol)
    if interface != FASTBOOT_INTERFACE:
        return False
    if match_filter.serial is not None and descriptor.serial != match_filter.serial:
        return False
    return True
