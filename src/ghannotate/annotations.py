# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build and render GitHub Actions annotation commands from diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Final, TypeAlias

from .errors import MissingPrimarySpanError
from .models import Diagnostic, DiagnosticSpan
from .severity import AnnotationKind, classify

# Order matters: ``%`` must be encoded before the sequences that introduce it.
_MESSAGE_ESCAPES: Final[tuple[tuple[str, str], ...]] = (
    ("%", "%25"),
    ("\n", "%0A"),
    ("\r", "%0D"),
)

AnnotationSortKey: TypeAlias = tuple[tuple[str, ...], int, tuple[int, int], int]


def escape_data(message: str) -> str:
    """Trim ``message`` and percent-encode the characters GitHub reserves.

    Args:
        message: Raw annotation message.

    Returns:
        str: Message safe to place after the ``::`` separator.
    """

    escaped = message.strip()
    for raw, encoded in _MESSAGE_ESCAPES:
        escaped = escaped.replace(raw, encoded)
    return escaped


@dataclass(frozen=True, slots=True)
class Annotation:
    """Immutable GitHub annotation command.

    Equality and hashing cover every field. Ordering follows
    :meth:`sort_key`: file path, line, column (missing first) and finally
    kind with the most severe first.
    """

    kind: AnnotationKind
    file: str
    line: int
    end_line: int | None = None
    col: int | None = None
    end_column: int | None = None
    title: str | None = None
    message: str = ""

    def sort_key(self) -> AnnotationSortKey:
        """Return the tuple used to order annotations deterministically."""

        col_key = (0, 0) if self.col is None else (1, self.col)
        return (PurePosixPath(self.file).parts, self.line, col_key, -int(self.kind))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Annotation):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Annotation):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Annotation):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Annotation):
            return NotImplemented
        return self.sort_key() >= other.sort_key()

    def render(self) -> str:
        """Render the annotation as a single workflow command line.

        Returns:
            str: Text of the form ``::warning file=...,line=...::message``.
        """

        parts = [f"::{self.kind.command} file={self.file},line={self.line}"]
        if self.end_line is not None:
            parts.append(f",endLine={self.end_line}")
        if self.col is not None:
            parts.append(f",col={self.col}")
            if self.end_column is not None:
                parts.append(f",endColumn={self.end_column}")
        if self.title is not None:
            parts.append(f",title={self.title}")
        parts.append(f"::{escape_data(self.message)}")
        return "".join(parts)

    def __str__(self) -> str:
        return self.render()


def primary_span(diagnostic: Diagnostic) -> DiagnosticSpan:
    """Return the first primary span of ``diagnostic``.

    Args:
        diagnostic: Parsed compiler diagnostic.

    Returns:
        DiagnosticSpan: First span whose ``is_primary`` flag is set.

    Raises:
        MissingPrimarySpanError: If no span is flagged as primary.
    """

    span = diagnostic.first_primary_span()
    if span is None:
        raise MissingPrimarySpanError(diagnostic.message)
    return span


def build_annotation(diagnostic: Diagnostic) -> Annotation:
    """Convert ``diagnostic`` into an :class:`Annotation`.

    When rustc supplied a pre-rendered message it becomes the annotation body
    and the short message is promoted to the title.

    Args:
        diagnostic: Parsed compiler diagnostic.

    Returns:
        Annotation: Annotation anchored at the diagnostic's primary span.

    Raises:
        MissingPrimarySpanError: If the diagnostic has no primary span.
    """

    span = primary_span(diagnostic)
    if diagnostic.rendered is not None:
        title: str | None = diagnostic.message
        message = diagnostic.rendered
    else:
        title = None
        message = diagnostic.message
    return Annotation(
        kind=classify(diagnostic.level),
        file=span.file_name,
        line=span.line_start,
        end_line=span.line_end,
        col=span.column_start,
        end_column=span.column_end,
        title=title,
        message=message,
    )


__all__ = [
    "Annotation",
    "AnnotationSortKey",
    "build_annotation",
    "escape_data",
    "primary_span",
]
