"""Stable public API for building tooling on top of fastbootctl.

This module is the supported integration surface for third-party callers
(flashing stations, GUIs, scripts). Collaborators for USB access and queue
execution can be injected, which is also how the test-suite drives it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from fastbootctl.core.builder import BuildResult
from fastbootctl.core.config import Settings
from fastbootctl.core.errors import (
    ArgumentError,
    ConfigError,
    DecodeError,
    DeviceResponseError,
    ExecutionError,
    FastbootError,
    FileLoadError,
    MissingEntryError,
    PackageError,
    TransportError,
    TransportTimeoutError,
    UsageError,
)
from fastbootctl.core.model import (
    Command,
    DeviceDescriptor,
    Display,
    Download,
    Erase,
    Flash,
    MatchFilter,
    Notice,
    QueuedOperation,
    Reboot,
    RebootBootloader,
    RebootIntent,
)
from fastbootctl.core.package import PACKAGE_MANIFEST
from fastbootctl.core.service import FastbootService
from fastbootctl.transports.base import Engine, UsbBackend

__all__ = [
    "ArgumentError",
    "ConfigError",
    "DecodeError",
    "DeviceResponseError",
    "ExecutionError",
    "FastbootError",
    "FileLoadError",
    "MissingEntryError",
    "PackageError",
    "TransportError",
    "TransportTimeoutError",
    "UsageError",
    "Command",
    "DeviceDescriptor",
    "Display",
    "Download",
    "Erase",
    "Flash",
    "MatchFilter",
    "Notice",
    "QueuedOperation",
    "Reboot",
    "RebootBootloader",
    "RebootIntent",
    "PACKAGE_MANIFEST",
    "BuildResult",
    "Settings",
    "Client",
]


class Client:
    """Public client for fastbootctl core capabilities.

    A `Client` wraps config loading, device discovery and queue building
    behind a stable API. `run` blocks until a matching device is attached.
    """

    def __init__(
        self,
        *,
        backend: UsbBackend | None = None,
        engine: Engine | None = None,
        settings: Settings | None = None,
        environ: Mapping[str, str] | None = None,
        notify: Callable[[str], None] = print,
    ) -> None:
        self._service = FastbootService(
            backend=backend,
            engine=engine,
            settings=settings,
            environ=environ,
            notify=notify,
        )

    @property
    def settings(self) -> Settings:
        return self._service.settings

    def list_devices(self) -> list[str]:
        return self._service.list_devices()

    def build(self, tokens: Sequence[str]) -> BuildResult:
        return self._service.build(tokens)

    def run(self, tokens: Sequence[str]) -> BuildResult:
        return self._service.run(tokens)
