"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

from fastbootctl.core.builder import BuildResult, build_queue
from fastbootctl.core.config import Settings, load_settings
from fastbootctl.core.discovery import acquire_device, list_devices
from fastbootctl.core.errors import ExecutionError
from fastbootctl.core.model import MatchFilter
from fastbootctl.transports.base import Engine, UsbBackend
from fastbootctl.transports.engine import UsbEngine
from fastbootctl.transports.usb import PyUsbBackend

LOGGER = logging.getLogger(__name__)


class FastbootService:
    def __init__(
        self,
        *,
        backend: UsbBackend | None = None,
        engine: Engine | None = None,
        settings: Settings | None = None,
        environ: Mapping[str, str] | None = None,
        notify: Callable[[str], None] = print,
    ) -> None:
        self.backend = backend or PyUsbBackend()
        self.engine = engine or UsbEngine(report=notify)
        self.notify = notify
        self._settings = settings
        self._environ = environ

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = load_settings(self._environ)
        return self._settings

    def list_devices(self) -> list[str]:
        # runs before any option or config is applied
        return list_devices(self.backend, MatchFilter())

    def build(self, tokens: Sequence[str]) -> BuildResult:
        return build_queue(tokens, self.settings.base_filter())

    def run(self, tokens: Sequence[str]) -> BuildResult:
        """Build the queue, wait for a device, and execute the queue on it."""
        result = self.build(tokens)
        LOGGER.debug(
            "Built %d operation(s), reboot=%s, filter=%s, config=%s",
            len(result.queue),
            result.reboot.value,
            result.match_filter,
            self.settings.source or "<defaults>",
        )
        device = acquire_device(
            self.backend,
            result.match_filter,
            notify=self.notify,
            poll_interval_s=self.settings.poll_interval_s,
        )
        try:
            ok = self.engine.execute(result.queue.operations, device)
        finally:
            close = getattr(device, "close", None)
            if close is not None:
                close()
        if not ok:
            raise ExecutionError("command queue failed")
        return result
