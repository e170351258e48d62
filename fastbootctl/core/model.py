"""Core data models used across discovery, queue building, and the CLI."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


@dataclass(frozen=True)
class DeviceDescriptor:
    vendor: int
    ifc_class: int
    ifc_subclass: int
    ifc_protocol: int
    serial: str = ""
    writable: bool = True


@dataclass(frozen=True)
class MatchFilter:
    vendor_id: int | None = None
    serial: str | None = None


class RebootIntent(enum.Enum):
    NONE = "none"
    REBOOT = "reboot"
    REBOOT_BOOTLOADER = "reboot-bootloader"


@dataclass(frozen=True)
class Flash:
    partition: str
    payload: bytes = field(repr=False)

    @property
    def length(self) -> int:
        return len(self.payload)


@dataclass(frozen=True)
class Erase:
    partition: str


@dataclass(frozen=True)
class Display:
    variable: str
    label: str


@dataclass(frozen=True)
class Notice:
    message: str


@dataclass(frozen=True)
class Command:
    name: str
    description: str = ""


@dataclass(frozen=True)
class Reboot:
    pass


@dataclass(frozen=True)
class RebootBootloader(Command):
    """Raw `reboot-bootloader` command; executes like any other Command."""

    name: str = "reboot-bootloader"
    description: str = "rebooting into bootloader"


@dataclass(frozen=True)
class Download:
    tag: str
    payload: bytes = field(repr=False)

    @property
    def length(self) -> int:
        return len(self.payload)


QueuedOperation = Flash | Erase | Display | Notice | Command | Reboot | RebootBootloader | Download
