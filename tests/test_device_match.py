from fastbootctl.core.device_match import FASTBOOT_INTERFACE, VENDOR_WHITELIST, matches, vendor_accepted
from fastbootctl.core.model import DeviceDescriptor, MatchFilter


def _device(vendor: int = 0x18D1, serial: str = "ABC123", interface: tuple[int, int, int] = FASTBOOT_INTERFACE) -> DeviceDescriptor:
    return DeviceDescriptor(
        vendor=vendor,
        ifc_class=interface[0],
        ifc_subclass=interface[1],
        ifc_protocol=interface[2],
        serial=serial,
    )


def test_whitelisted_vendor_with_fastboot_interface_matches() -> None:
    for vendor in VENDOR_WHITELIST:
        assert matches(_device(vendor=vendor), MatchFilter())


def test_unknown_vendor_rejected_without_override() -> None:
    assert not matches(_device(vendor=0x1234), MatchFilter())


def test_vendor_override_accepts_unknown_vendor() -> None:
    assert matches(_device(vendor=0x1234), MatchFilter(vendor_id=0x1234))


def test_vendor_override_keeps_whitelist() -> None:
    assert vendor_accepted(0x8087, MatchFilter(vendor_id=0x1234))
    assert not vendor_accepted(0x4321, MatchFilter(vendor_id=0x1234))


def test_interface_triple_must_match_exactly() -> None:
    assert not matches(_device(interface=(0xFF, 0x42, 0x01)), MatchFilter())
    assert not matches(_device(interface=(0xFF, 0x43, 0x03)), MatchFilter())
    assert not matches(_device(interface=(0x08, 0x42, 0x03)), MatchFilter())
    assert not matches(_device(vendor=0x1234, interface=(0x08, 0x06, 0x50)), MatchFilter(vendor_id=0x1234))


def test_serial_filter_requires_exact_match() -> None:
    assert matches(_device(serial="ABC123"), MatchFilter(serial="ABC123"))
    assert not matches(_device(serial="ABC1234"), MatchFilter(serial="ABC123"))
    assert not matches(_device(serial="abc123"), MatchFilter(serial="ABC123"))


def test_serial_not_checked_when_unset() -> None:
    assert matches(_device(serial=""), MatchFilter())


def test_zero_vendor_override_is_ignored() -> None:
    assert not matches(_device(vendor=0x0000), MatchFilter(vendor_id=0))
    assert matches(_device(vendor=0x18D1), MatchFilter(vendor_id=0))
