# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across the annotation pipeline."""

from __future__ import annotations

from collections.abc import Sequence


class GhAnnotateError(RuntimeError):
    """Base class for errors raised by ghannotate."""


class MissingPrimarySpanError(GhAnnotateError, ValueError):
    """Raised when a diagnostic carries no span flagged as primary."""

    def __init__(self, message: str) -> None:
        """Initialise the error with the offending diagnostic message.

        Args:
            message: Primary message of the diagnostic lacking a primary span.
        """

        super().__init__(f"Missing primary span for diagnostic: {message!r}")
        self.diagnostic_message = message


class CargoInvocationError(GhAnnotateError):
    """Raised when the cargo executable cannot be located or started."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        """Initialise the error with the command that failed to start.

        Args:
            command: Command sequence that was being launched.
            reason: Human-readable explanation of the failure.
        """

        head = command[0] if command else "<empty>"
        super().__init__(f"Cargo invocation failed for '{head}': {reason}")
        self.command = tuple(command)
        self.reason = reason


__all__ = [
    "CargoInvocationError",
    "GhAnnotateError",
    "MissingPrimarySpanError",
]
