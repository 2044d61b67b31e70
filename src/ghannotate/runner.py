# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Drive cargo output lines through parsing, deduplication and reporting."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Final

from .annotations import Annotation, build_annotation
from .dedup import AnnotationSet
from .errors import MissingPrimarySpanError
from .models import BuildFinished, CompilerMessage, Summary
from .parsers import parse_message
from .severity import AnnotationKind
from .summary import SummaryAggregator

LOGGER = logging.getLogger(__name__)

EXIT_SUCCESS: Final[int] = 0
EXIT_FAILURE: Final[int] = 1

AnnotationEmitter = Callable[[str], object]


@dataclass(slots=True)
class RunState:
    """Mutable state owned by a single annotation run."""

    annotations: AnnotationSet = field(default_factory=AnnotationSet)
    summaries: SummaryAggregator = field(default_factory=SummaryAggregator)
    max_kind: AnnotationKind = AnnotationKind.NOTICE
    lines: int = 0
    diagnostics: int = 0
    duplicates: int = 0
    unlocated: int = 0
    skipped: int = 0
    build_success: bool | None = None

    def failed(self, threshold: AnnotationKind) -> bool:
        """Return whether the most severe annotation reaches ``threshold``."""

        return self.max_kind >= threshold

    def exit_code(self, threshold: AnnotationKind) -> int:
        """Return the process exit status for ``threshold``.

        Args:
            threshold: Minimum annotation kind that fails the run.

        Returns:
            int: :data:`EXIT_FAILURE` when the run failed, otherwise :data:`EXIT_SUCCESS`.
        """

        return EXIT_FAILURE if self.failed(threshold) else EXIT_SUCCESS


def process_line(state: RunState, line: str) -> Annotation | None:
    """Process one line of cargo output against ``state``.

    The summary is computed for every parsed diagnostic but only recorded
    once its annotation is accepted by the dedup set, so both outputs always
    describe the same diagnostics.

    Args:
        state: Run state updated in place.
        line: Raw cargo output line.

    Returns:
        Annotation | None: Newly accepted annotation, or ``None`` when the line
        produced nothing new.
    """

    state.lines += 1
    message = parse_message(line)
    match message:
        case CompilerMessage(message=diagnostic):
            pass
        case BuildFinished(success=success):
            state.build_success = success
            return None
        case _:
            state.skipped += 1
            return None

    state.diagnostics += 1
    summary = Summary.from_diagnostic(diagnostic)
    try:
        annotation = build_annotation(diagnostic)
    except MissingPrimarySpanError as exc:
        state.unlocated += 1
        LOGGER.debug("%s", exc)
        return None

    if not state.annotations.insert(annotation):
        state.duplicates += 1
        return None
    state.max_kind = max(state.max_kind, annotation.kind)
    state.summaries.add(summary)
    return annotation


def annotate(
    lines: Iterable[str],
    *,
    emit: AnnotationEmitter,
    state: RunState | None = None,
) -> RunState:
    """Annotate every line of ``lines`` and return the resulting state.

    Args:
        lines: Cargo JSON output, one message per line.
        emit: Callback receiving each rendered annotation as soon as it is new.
        state: Existing state to continue from; a fresh one is created when omitted.

    Returns:
        RunState: Final state holding annotations, summaries and totals.
    """

    active = state if state is not None else RunState()
    for line in lines:
        annotation = process_line(active, line)
        if annotation is not None:
            emit(annotation.render())
    return active


__all__ = [
    "EXIT_FAILURE",
    "EXIT_SUCCESS",
    "AnnotationEmitter",
    "RunState",
    "annotate",
    "process_line",
]
