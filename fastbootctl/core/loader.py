"""Loading image files and archive entries into memory."""

from __future__ import annotations

import errno
import io
import logging
import os
import zipfile
import zlib
from pathlib import Path

from fastbootctl.core.errors import DecodeError, FileLoadError, MissingEntryError, PackageError

LOGGER = logging.getLogger(__name__)


def load_file(path: str | Path) -> bytes:
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise FileLoadError(f"cannot load '{path}': {reason}") from exc
    except MemoryError as exc:
        raise FileLoadError(f"cannot load '{path}': {os.strerror(errno.ENOMEM)}") from exc
    LOGGER.debug("Loaded %d bytes from %s", len(data), path)
    return data


def open_archive(data: bytes, *, source: str = "<memory>") -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise PackageError(f"failed to access zipdata in '{source}': not a valid archive") from exc


def extract_entry(archive: zipfile.ZipFile, name: str) -> bytes:
    try:
        info = archive.getinfo(name)
    except KeyError as exc:
        raise MissingEntryError(f"archive does not contain '{name}'") from exc

    LOGGER.debug(
        "Extracting %s (%d bytes compressed, %d bytes uncompressed)",
        name,
        info.compress_size,
        info.file_size,
    )
    try:
        return archive.read(info)
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError) as exc:
        raise DecodeError(f"failed to unzip '{name}' from archive") from exc
