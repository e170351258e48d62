from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from fastbootctl.core.errors import FileLoadError, PackageError
from fastbootctl.core.model import Display, Flash, Notice
from fastbootctl.core.package import INFO_SEPARATOR, PACKAGE_MANIFEST, plan_package
from fastbootctl.core.queue import CommandQueue


def _write_package(path: Path, skip: tuple[str, ...] = ()) -> dict[str, bytes]:
    contents: dict[str, bytes] = {}
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for index, (entry, _) in enumerate(PACKAGE_MANIFEST):
            if entry in skip:
                continue
            contents[entry] = bytes([index]) * (100 + index)
            zf.writestr(entry, contents[entry])
    return contents


def test_manifest_order_is_fixed() -> None:
    assert [partition for _, partition in PACKAGE_MANIFEST] == ["dnx", "ifwi", "boot", "preos", "platform"]
    assert PACKAGE_MANIFEST[2] == ("stitch.normalos.bin", "boot")


def test_plan_package_queues_info_then_flashes_in_manifest_order(tmp_path: Path) -> None:
    path = tmp_path / "pkg.zip"
    contents = _write_package(path)
    queue = CommandQueue()

    plan_package(path, queue)

    ops = queue.operations
    assert ops[0] == Notice(INFO_SEPARATOR)
    assert ops[1] == Display("preos", "Current Pre-OS Version ")
    assert ops[2] == Display("ifwi", "Current IFWI Version   ")
    assert ops[3] == Notice(INFO_SEPARATOR)

    flashes = ops[4:]
    assert all(isinstance(op, Flash) for op in flashes)
    assert [op.partition for op in flashes] == ["dnx", "ifwi", "boot", "preos", "platform"]
    for op, (entry, _) in zip(flashes, PACKAGE_MANIFEST):
        assert op.payload == contents[entry]
        assert op.length == len(contents[entry])


def test_plan_package_missing_entry_names_it(tmp_path: Path) -> None:
    path = tmp_path / "pkg.zip"
    _write_package(path, skip=("ifwi.bin",))
    queue = CommandQueue()

    with pytest.raises(PackageError) as exc:
        plan_package(path, queue)

    assert "ifwi.bin" in str(exc.value)
    # entries before the missing one were already appended
    assert [op.partition for op in queue if isinstance(op, Flash)] == ["dnx"]


def test_plan_package_not_a_zip(tmp_path: Path) -> None:
    path = tmp_path / "pkg.zip"
    path.write_bytes(b"garbage")
    queue = CommandQueue()

    with pytest.raises(PackageError):
        plan_package(path, queue)
    assert len(queue) == 0


def test_plan_package_unreadable(tmp_path: Path) -> None:
    with pytest.raises(FileLoadError):
        plan_package(tmp_path / "missing.zip", CommandQueue())
