# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Final


class DiagnosticLevel(str, Enum):
    """Severity vocabulary used by rustc diagnostics."""

    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"
    HELP = "help"
    FAILURE_NOTE = "failure-note"
    INTERNAL_COMPILER_ERROR = "error: internal compiler error"


class AnnotationKind(IntEnum):
    """GitHub annotation severities, ordered from least to most severe."""

    NOTICE = 1
    WARNING = 2
    ERROR = 3

    @property
    def command(self) -> str:
        """Return the workflow command name for the kind (e.g. ``warning``).

        Returns:
            str: Lowercase command keyword understood by GitHub Actions.
        """

        return self.name.lower()

    @property
    def label(self) -> str:
        """Return the capitalised display label (e.g. ``Warning``).

        Returns:
            str: Label suitable for human-readable reports.
        """

        return self.name.capitalize()

    @property
    def emoji(self) -> str:
        """Return the GitHub emoji shortcode associated with the kind.

        Returns:
            str: Emoji shortcode rendered by GitHub markdown.
        """

        return _KIND_EMOJI[self]

    def pluralize(self, count: int) -> str:
        """Return the label in singular or plural form for ``count``."""

        return self.label if count == 1 else f"{self.label}s"


_KIND_EMOJI: Final[dict[AnnotationKind, str]] = {
    AnnotationKind.NOTICE: ":information_source:",
    AnnotationKind.WARNING: ":warning:",
    AnnotationKind.ERROR: ":x:",
}

_LEVEL_TO_KIND: Final[dict[DiagnosticLevel, AnnotationKind]] = {
    DiagnosticLevel.ERROR: AnnotationKind.ERROR,
    DiagnosticLevel.INTERNAL_COMPILER_ERROR: AnnotationKind.ERROR,
    DiagnosticLevel.WARNING: AnnotationKind.WARNING,
}


def classify(level: DiagnosticLevel) -> AnnotationKind:
    """Map a rustc diagnostic level onto an :class:`AnnotationKind`.

    Args:
        level: Severity reported by the compiler.

    Returns:
        AnnotationKind: ``ERROR`` for errors and ICEs, ``WARNING`` for
        warnings and ``NOTICE`` for every other level.
    """

    return _LEVEL_TO_KIND.get(level, AnnotationKind.NOTICE)


def threshold_for(allow_warnings: bool) -> AnnotationKind:
    """Return the minimum kind that fails a run.

    Args:
        allow_warnings: ``True`` when warnings must not fail the run.

    Returns:
        AnnotationKind: ``ERROR`` when warnings are tolerated, otherwise ``WARNING``.
    """

    return AnnotationKind.ERROR if allow_warnings else AnnotationKind.WARNING


__all__ = [
    "AnnotationKind",
    "DiagnosticLevel",
    "classify",
    "threshold_for",
]
