# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Aggregate diagnostic summaries and render the markdown job summary."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from pathlib import Path
from typing import Final

from .models import Summary
from .severity import AnnotationKind

SUMMARY_HEADING: Final[str] = "# Diagnostics"
TABLE_HEADER: Final[str] = "|Level|Message|Location|"
TABLE_ALIGNMENT: Final[str] = "|:--|:--|--:|"
_TOTAL_ORDER: Final[tuple[AnnotationKind, ...]] = (
    AnnotationKind.ERROR,
    AnnotationKind.WARNING,
    AnnotationKind.NOTICE,
)


class SummaryAggregator:
    """Accumulate :class:`Summary` entries in arrival order."""

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[Summary] = []

    def add(self, summary: Summary) -> None:
        """Record ``summary`` for the final report."""

        self._entries.append(summary)

    def counts(self) -> Counter[AnnotationKind]:
        """Tally accumulated summaries per annotation kind.

        Returns:
            Counter[AnnotationKind]: Number of entries observed for each kind.
        """

        return Counter(entry.kind for entry in self._entries)

    def totals_line(self) -> str:
        """Return the blockquote line listing per-kind totals."""

        counts = self.counts()
        totals = ", ".join(f"{counts[kind]} {kind.pluralize(counts[kind])}" for kind in _TOTAL_ORDER)
        return f"> **TOTAL:** {totals}"

    def render(self) -> str:
        """Render the markdown report.

        Returns:
            str: Markdown document, or an empty string when nothing was recorded.
        """

        if not self._entries:
            return ""
        lines = [SUMMARY_HEADING, self.totals_line(), "", TABLE_HEADER, TABLE_ALIGNMENT]
        lines.extend(_render_row(entry) for entry in self._entries)
        return "\n".join(lines) + "\n"

    def __iter__(self) -> Iterator[Summary]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


def write_summary(aggregator: SummaryAggregator, path: Path | None) -> bool:
    """Write the markdown report of ``aggregator`` to ``path``.

    The destination is created or truncated whenever a path is configured,
    even if no diagnostics were recorded.

    Args:
        aggregator: Aggregator holding the run's summaries.
        path: Destination file, or ``None`` when no summary is requested.

    Returns:
        bool: ``True`` when a destination was written, ``False`` when skipped.

    Raises:
        OSError: If the destination cannot be opened or written.
    """

    if path is None:
        return False
    path.write_text(aggregator.render(), encoding="utf-8")
    return True


def _render_row(entry: Summary) -> str:
    kind = entry.kind
    location = f"`{entry.location[0]}:{entry.location[1]}`" if entry.location is not None else ""
    return f"|{kind.emoji} {kind.label}|{_escape_cell(entry.message)}|{location}|"


def _escape_cell(text: str) -> str:
    return text.strip().replace("|", "\\|").replace("\r\n", "<br>").replace("\n", "<br>")


__all__ = [
    "SummaryAggregator",
    "write_summary",
]
