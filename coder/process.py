"""Running external commands such as git, ssh and scp."""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Iterable

DEBUG_VARIABLE = "CODER_DEBUG"


class ProcessError(Exception):
    """An external command could not be run."""


class CommandNotFoundError(ProcessError):
    """The command is not available on this system."""

    def __init__(self, command: str) -> None:
        super().__init__(f"Couldn't find the command: {command}")
        self.command = command


class CommandFailedError(ProcessError):
    """The command ran but exited unsuccessfully."""

    def __init__(self, command: str, returncode: int) -> None:
        super().__init__("Run command fails")
        self.command = command
        self.returncode = returncode


def command_exists(command: str) -> bool:
    """Return True if ``command`` can be started."""
    return shutil.which(command) is not None


def _require(command: str) -> None:
    if not command_exists(command):
        raise CommandNotFoundError(command)


def run(command: str, args: Iterable[str]) -> None:
    """Run a command, discarding its output.

    When ``CODER_DEBUG`` is set the command's output goes to the terminal and a
    non-zero exit status raises :class:`CommandFailedError`; otherwise the exit
    status is ignored.
    """
    _require(command)
    argv = [command, *args]
    try:
        if DEBUG_VARIABLE in os.environ:
            completed = subprocess.run(argv, check=False)
            if completed.returncode != 0:
                raise CommandFailedError(command, completed.returncode)
        else:
            subprocess.run(argv, stdin=subprocess.DEVNULL, capture_output=True, check=False)
    except OSError as err:
        raise ProcessError(str(err)) from err


def run_output(command: str, args: Iterable[str]) -> str:
    """Run a command and return what it wrote to standard output."""
    _require(command)
    try:
        completed = subprocess.run(
            [command, *args], stdin=subprocess.DEVNULL, capture_output=True, check=False
        )
    except OSError as err:
        raise ProcessError(str(err)) from err
    try:
        return completed.stdout.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ProcessError(str(err)) from err