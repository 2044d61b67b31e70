# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decode cargo ``--message-format=json`` output one line at a time."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Final

from pydantic import TypeAdapter, ValidationError

from .models import CargoMessage, CompilerMessage, Diagnostic

LOGGER = logging.getLogger(__name__)

_CARGO_MESSAGE_ADAPTER: Final[TypeAdapter[CargoMessage]] = TypeAdapter(CargoMessage)


def parse_message(line: str) -> CargoMessage | None:
    """Decode ``line`` as a recognised cargo message envelope.

    Cargo interleaves many message kinds (artifact notices, build script
    output, ...) with compiler diagnostics. Lines that are not JSON, do not
    carry a known ``reason`` or do not match the expected schema are dropped.

    Args:
        line: Raw line read from cargo's stdout.

    Returns:
        CargoMessage | None: Parsed envelope, or ``None`` when the line is
        irrelevant or malformed.
    """

    trimmed = line.strip()
    if not trimmed:
        return None
    try:
        return _CARGO_MESSAGE_ADAPTER.validate_json(trimmed)
    except ValidationError as exc:
        LOGGER.debug("skipping cargo output line (%s): %.120s", _first_error_type(exc), trimmed)
        return None


def parse_diagnostic(line: str) -> Diagnostic | None:
    """Return the compiler diagnostic carried by ``line``, if any."""

    message = parse_message(line)
    match message:
        case CompilerMessage(message=diagnostic):
            return diagnostic
        case _:
            return None


def iter_diagnostics(lines: Iterable[str]) -> Iterator[Diagnostic]:
    """Yield compiler diagnostics from ``lines`` in arrival order.

    Args:
        lines: Raw cargo output lines.

    Yields:
        Diagnostic: Parsed diagnostics, skipping every other line.
    """

    for line in lines:
        diagnostic = parse_diagnostic(line)
        if diagnostic is not None:
            yield diagnostic


def _first_error_type(exc: ValidationError) -> str:
    errors = exc.errors()
    return errors[0]["type"] if errors else "invalid"


__all__ = [
    "iter_diagnostics",
    "parse_diagnostic",
    "parse_message",
]
