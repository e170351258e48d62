"""Full-package flashing: fixed manifest of images inside a zip archive."""

from __future__ import annotations

import logging
from pathlib import Path

from fastbootctl.core.errors import MissingEntryError, PackageError
from fastbootctl.core.loader import extract_entry, load_file, open_archive
from fastbootctl.core.queue import CommandQueue

# (archive entry, target partition), flashed in this order
PACKAGE_MANIFEST: tuple[tuple[str, str], ...] = (
    ("dnx.bin", "dnx"),
    ("ifwi.bin", "ifwi"),
    ("stitch.normalos.bin", "boot"),
    ("stitch.preos.bin", "preos"),
    ("platform.img.gz", "platform"),
)

# (variable, label) queried before anything is flashed
INFO_QUERIES: tuple[tuple[str, str], ...] = (
    ("preos", "Current Pre-OS Version "),
    ("ifwi", "Current IFWI Version   "),
)

INFO_SEPARATOR = "-" * 44
LOGGER = logging.getLogger(__name__)


def queue_info_dump(queue: CommandQueue) -> None:
    queue.queue_notice(INFO_SEPARATOR)
    for variable, label in INFO_QUERIES:
        queue.queue_display(variable, label)
    queue.queue_notice(INFO_SEPARATOR)


def plan_package(path: str | Path, queue: CommandQueue) -> None:
    """Append the info dump and one Flash per manifest entry to queue.

    On a missing entry PackageError is raised, but the operations already
    appended for earlier entries stay in the queue. Callers are expected to
    drop the queue on any error.
    """
    data = load_file(path)
    archive = open_archive(data, source=str(path))
    with archive:
        queue_info_dump(queue)
        for entry_name, partition in PACKAGE_MANIFEST:
            try:
                payload = extract_entry(archive, entry_name)
            except MissingEntryError as exc:
                raise PackageError(f"package missing {entry_name}") from exc
            LOGGER.debug("Queued %s -> %s (%d bytes)", entry_name, partition, len(payload))
            queue.queue_flash(partition, payload)
