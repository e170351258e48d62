"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from fastbootctl.core.errors import FastbootError, UsageError
from fastbootctl.core.service import FastbootService

USAGE = """\
usage: fastboot [ <option> ] <command>

commands:
  flashall <filename>                      reflash device from a zip package
  flash <partition> <filename>             write a file to a flash partition
  erase <partition>                        erase a flash partition
  getvar <variable>                        display a bootloader variable
  signature <filename>                     send a 256 byte image signature
  oem <parameter>...                       send a vendor specific command
  devices                                  list all connected devices
  continue                                 continue with autoboot
  reboot                                   reboot device normally
  reboot-bootloader                        reboot device into bootloader
  help                                     show this help message

options:
  -s <serial number>                       specify device serial number
  -i <vendor id>                           specify a custom USB vendor id"""

app = typer.Typer(help="Flash firmware images onto fastboot-mode USB devices", add_completion=False)


def _notify(message: str) -> None:
    typer.echo(message, err=True)


@app.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
def main(
    tokens: list[str] | None = typer.Argument(None, metavar="COMMAND..."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Queue fastboot commands and run them on the first matching device."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    args = list(tokens or [])
    if not args:
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=1)

    try:
        service = FastbootService(notify=_notify)
        if args[0] == "devices":
            for line in service.list_devices():
                typer.echo(line)
            return
        if args[0] == "help":
            typer.echo(USAGE)
            return
        service.run(args)
    except UsageError as exc:
        typer.echo(f"error: {exc}", err=True)
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=1) from None
    except FastbootError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from None
