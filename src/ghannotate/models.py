# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models describing cargo JSON messages and diagnostic summaries."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, Strict, StrictBool

from .severity import AnnotationKind, DiagnosticLevel, classify

# Span positions are 1-based usize values on the wire; no coercion from
# strings, floats or booleans.
SpanPosition = Annotated[NonNegativeInt, Strict()]


class DiagnosticSpan(BaseModel):
    """Describe the location of a diagnostic within the source code.

    ``file_name`` may not exist on disk or may point to the source of an
    external crate; it is never validated.
    """

    model_config = ConfigDict(frozen=True)

    file_name: str
    line_start: SpanPosition
    line_end: SpanPosition
    column_start: SpanPosition
    column_end: SpanPosition
    is_primary: StrictBool


class Diagnostic(BaseModel):
    """Capture a rustc diagnostic as emitted inside a compiler message."""

    model_config = ConfigDict(frozen=True)

    message: str
    level: DiagnosticLevel
    spans: tuple[DiagnosticSpan, ...]
    rendered: str | None = None

    def first_primary_span(self) -> DiagnosticSpan | None:
        """Return the first span flagged as primary, if any.

        Returns:
            DiagnosticSpan | None: Primary span or ``None`` when no span is primary.
        """

        return next((span for span in self.spans if span.is_primary), None)


class CompilerMessage(BaseModel):
    """Cargo envelope wrapping a compiler diagnostic."""

    model_config = ConfigDict(frozen=True)

    reason: Literal["compiler-message"]
    message: Diagnostic


class BuildFinished(BaseModel):
    """Cargo envelope emitted once the build completes."""

    model_config = ConfigDict(frozen=True)

    reason: Literal["build-finished"]
    success: StrictBool


CargoMessage = Annotated[CompilerMessage | BuildFinished, Field(discriminator="reason")]


class Summary(BaseModel):
    """Condensed, owned view of a diagnostic used by the markdown report."""

    model_config = ConfigDict(frozen=True)

    level: DiagnosticLevel
    message: str
    location: tuple[str, int] | None = None

    @classmethod
    def from_diagnostic(cls, diagnostic: Diagnostic) -> Summary:
        """Build a summary from ``diagnostic`` and its first primary span.

        Args:
            diagnostic: Parsed compiler diagnostic.

        Returns:
            Summary: Summary carrying the level, message and primary location.
        """

        span = diagnostic.first_primary_span()
        location = (span.file_name, span.line_start) if span is not None else None
        return cls(level=diagnostic.level, message=diagnostic.message, location=location)

    @property
    def kind(self) -> AnnotationKind:
        """Return the annotation kind derived from :attr:`level`."""

        return classify(self.level)


__all__ = [
    "BuildFinished",
    "CargoMessage",
    "CompilerMessage",
    "Diagnostic",
    "DiagnosticSpan",
    "Summary",
]
