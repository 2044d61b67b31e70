# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Launch cargo and stream its JSON messages."""

from __future__ import annotations

import logging
import shutil

# Bandit: subprocess usage is intentional; the command is an argument list
# built from a fixed subcommand set and never runs through a shell.
import subprocess  # nosec B404
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import TracebackType
from typing import Final

from .errors import CargoInvocationError

LOGGER = logging.getLogger(__name__)

MESSAGE_FORMAT_FLAG: Final[str] = "--message-format=json"
PASSTHROUGH_SEPARATOR: Final[str] = "--"


class CargoSubcommand(str, Enum):
    """Cargo subcommands whose diagnostics can be annotated."""

    CHECK = "check"
    CLIPPY = "clippy"
    BUILD = "build"


@dataclass(frozen=True, slots=True)
class CargoInvocation:
    """Describe the cargo command line to execute."""

    cargo: str
    subcommand: CargoSubcommand
    args: tuple[str, ...] = ()
    passthrough: tuple[str, ...] = ()

    def argv(self) -> list[str]:
        """Return the full argument vector, forcing JSON message output.

        Returns:
            list[str]: Command line starting with the cargo executable.
        """

        command = [self.cargo, self.subcommand.value, *self.args, MESSAGE_FORMAT_FLAG]
        if self.passthrough:
            command.extend((PASSTHROUGH_SEPARATOR, *self.passthrough))
        return command


def _resolve_executable(command: Sequence[str]) -> list[str]:
    head, *rest = command
    head_path = Path(head)
    if head_path.is_absolute() or len(head_path.parts) > 1:
        return [str(head_path), *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise CargoInvocationError(command, f"executable '{head}' was not found on PATH")
    return [resolved, *rest]


class CargoProcess:
    """Run cargo with stdout piped so messages can be consumed as they arrive.

    Stdin is closed and stderr is inherited so cargo's progress output still
    reaches the job log.
    """

    def __init__(self, invocation: CargoInvocation, *, cwd: Path | None = None) -> None:
        """Store the invocation; the process starts when the context is entered.

        Args:
            invocation: Cargo command to execute.
            cwd: Optional working directory for cargo.
        """

        self.invocation = invocation
        self.cwd = cwd
        self._process: subprocess.Popen[str] | None = None
        self.returncode: int | None = None

    def __enter__(self) -> CargoProcess:
        command = _resolve_executable(self.invocation.argv())
        LOGGER.debug("running %s", " ".join(command))
        try:
            self._process = subprocess.Popen(  # nosec B603 - argument list, no shell
                command,
                cwd=str(self.cwd) if self.cwd is not None else None,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=None,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as exc:
            raise CargoInvocationError(command, str(exc)) from exc
        return self

    def lines(self) -> Iterator[str]:
        """Yield cargo stdout lines without their trailing newline.

        Yields:
            str: One line of cargo output.

        Raises:
            RuntimeError: If called outside the context manager.
        """

        if self._process is None or self._process.stdout is None:
            raise RuntimeError("CargoProcess.lines() requires an active context")
        for line in self._process.stdout:
            yield line.rstrip("\r\n")

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        process = self._process
        if process is None:
            return
        if process.stdout is not None:
            process.stdout.close()
        if exc_type is not None and process.poll() is None:
            process.kill()
        self.returncode = process.wait()
        LOGGER.debug("cargo exited with status %s", self.returncode)


__all__ = [
    "MESSAGE_FORMAT_FLAG",
    "PASSTHROUGH_SEPARATOR",
    "CargoInvocation",
    "CargoProcess",
    "CargoSubcommand",
]
