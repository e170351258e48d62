"""Translation of command-line tokens into queued device operations."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, replace

from fastbootctl.core.errors import ArgumentError, UsageError
from fastbootctl.core.loader import load_file
from fastbootctl.core.model import MatchFilter, RebootBootloader, RebootIntent
from fastbootctl.core.package import plan_package
from fastbootctl.core.queue import CommandQueue

SIGNATURE_SIZE = 256
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_OCT_RE = re.compile(r"0[0-7]*")
_DEC_RE = re.compile(r"[1-9][0-9]*")


@dataclass(frozen=True)
class BuildResult:
    queue: CommandQueue
    match_filter: MatchFilter
    reboot: RebootIntent


def parse_vendor_id(token: str) -> int:
    """Parse a USB vendor id given as decimal, 0x-hex or 0-prefixed octal."""
    if _HEX_RE.fullmatch(token):
        value = int(token, 16)
    elif _OCT_RE.fullmatch(token):
        value = int(token, 8)
    elif _DEC_RE.fullmatch(token):
        value = int(token, 10)
    else:
        raise ArgumentError(f"invalid vendor id '{token}'")
    if value & ~0xFFFF:
        raise ArgumentError(f"invalid vendor id '{token}'")
    return value


def _require(tokens: Sequence[str], index: int, arity: int) -> None:
    if len(tokens) - index < arity:
        raise UsageError(f"'{tokens[index]}' needs {arity - 1} argument(s)")


def parse_tokens(tokens: Sequence[str], match_filter: MatchFilter | None = None) -> BuildResult:
    """Consume tokens left to right; reboot intents are returned unresolved."""
    queue = CommandQueue()
    current_filter = match_filter or MatchFilter()
    wants_reboot = False
    wants_reboot_bootloader = False

    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token == "-s":
            _require(tokens, index, 2)
            current_filter = replace(current_filter, serial=tokens[index + 1])
            index += 2
        elif token == "-i":
            _require(tokens, index, 2)
            current_filter = replace(current_filter, vendor_id=parse_vendor_id(tokens[index + 1]))
            index += 2
        elif token == "getvar":
            _require(tokens, index, 2)
            queue.queue_display(tokens[index + 1], tokens[index + 1])
            index += 2
        elif token == "erase":
            _require(tokens, index, 2)
            queue.queue_erase(tokens[index + 1])
            index += 2
        elif token == "signature":
            _require(tokens, index, 2)
            data = load_file(tokens[index + 1])
            if len(data) != SIGNATURE_SIZE:
                raise ArgumentError(f"signature must be {SIGNATURE_SIZE} bytes")
            queue.queue_download("signature", data)
            queue.queue_command("signature", "installing signature")
            index += 2
        elif token == "reboot":
            wants_reboot = True
            index += 1
        elif token == "reboot-bootloader":
            wants_reboot_bootloader = True
            index += 1
        elif token == "continue":
            queue.queue_command("continue", "resuming boot")
            index += 1
        elif token == "flash":
            _require(tokens, index, 3)
            partition, filename = tokens[index + 1], tokens[index + 2]
            queue.queue_flash(partition, load_file(filename))
            index += 3
        elif token == "flashall":
            _require(tokens, index, 2)
            plan_package(tokens[index + 1], queue)
            wants_reboot = True
            index += 2
        elif token == "oem":
            _require(tokens, index, 2)
            queue.queue_command(" ".join(tokens[index:]), "")
            index = len(tokens)
        else:
            raise UsageError(f"unknown command '{token}'")

    if wants_reboot:
        reboot = RebootIntent.REBOOT
    elif wants_reboot_bootloader:
        reboot = RebootIntent.REBOOT_BOOTLOADER
    else:
        reboot = RebootIntent.NONE
    return BuildResult(queue=queue, match_filter=current_filter, reboot=reboot)


def resolve_reboot(queue: CommandQueue, intent: RebootIntent) -> None:
    if intent is RebootIntent.REBOOT:
        queue.queue_reboot()
    elif intent is RebootIntent.REBOOT_BOOTLOADER:
        queue.append(RebootBootloader())


def build_queue(tokens: Sequence[str], match_filter: MatchFilter | None = None) -> BuildResult:
    result = parse_tokens(tokens, match_filter)
    resolve_reboot(result.queue, result.reboot)
    return result
