"""Append-only queue of device operations."""

from __future__ import annotations

from collections.abc import Iterator

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


class CommandQueue:
    """Operations in the order they will be executed.

    Nothing is reordered, merged or removed once appended. Payload bytes
    handed to `queue_flash`/`queue_download` belong to the queue from then on.
    """

    def __init__(self) -> None:
        self._operations: list[QueuedOperation] = []

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator[QueuedOperation]:
        return iter(self._operations)

    @property
    def operations(self) -> tuple[QueuedOperation, ...]:
        return tuple(self._operations)

    def append(self, operation: QueuedOperation) -> None:
        self._operations.append(operation)

    def queue_flash(self, partition: str, payload: bytes) -> None:
        self.append(Flash(partition=partition, payload=payload))

    def queue_erase(self, partition: str) -> None:
        self.append(Erase(partition=partition))

    def queue_display(self, variable: str, label: str) -> None:
        self.append(Display(variable=variable, label=label))

    def queue_notice(self, message: str) -> None:
        self.append(Notice(message=message))

    def queue_command(self, name: str, description: str = "") -> None:
        self.append(Command(name=name, description=description))

    def queue_download(self, tag: str, payload: bytes) -> None:
        self.append(Download(tag=tag, payload=payload))

    def queue_reboot(self) -> None:
        self.append(Reboot())
