"""Collaborator interfaces for USB enumeration and queue execution."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from fastbootctl.core.model import DeviceDescriptor, QueuedOperation

DevicePredicate = Callable[[DeviceDescriptor], bool]


class UsbBackend(Protocol):
    def open(self, predicate: DevicePredicate) -> Any | None:
        """Offer every candidate interface to predicate.

        Returns a handle for the first candidate accepted (predicate returned
        True), or None once every candidate has been offered.
        """


class Engine(Protocol):
    def execute(self, operations: Sequence[QueuedOperation], device: Any) -> bool:
        """Run operations in order against device and report success."""
