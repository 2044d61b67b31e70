# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ordered set used to emit each distinct annotation exactly once."""

from __future__ import annotations

from bisect import insort
from collections.abc import Iterable, Iterator

from .annotations import Annotation


class AnnotationSet:
    """Keep structurally distinct annotations in a deterministic order.

    Membership is decided by full equality of the annotation, while
    iteration walks entries by :meth:`Annotation.sort_key`. Incremental and
    workspace builds commonly report the same diagnostic several times; only
    the first occurrence is accepted.
    """

    __slots__ = ("_members", "_ordered")

    def __init__(self, annotations: Iterable[Annotation] = ()) -> None:
        """Initialise the set, inserting ``annotations`` in order.

        Args:
            annotations: Optional annotations to seed the set with.
        """

        self._members: set[Annotation] = set()
        self._ordered: list[Annotation] = []
        for annotation in annotations:
            self.insert(annotation)

    def insert(self, annotation: Annotation) -> bool:
        """Insert ``annotation`` unless an equal one is already present.

        Args:
            annotation: Candidate annotation.

        Returns:
            bool: ``True`` when the annotation was new, ``False`` for duplicates.
        """

        if annotation in self._members:
            return False
        self._members.add(annotation)
        insort(self._ordered, annotation, key=Annotation.sort_key)
        return True

    def __contains__(self, annotation: object) -> bool:
        return annotation in self._members

    def __iter__(self) -> Iterator[Annotation]:
        return iter(tuple(self._ordered))

    def __len__(self) -> int:
        return len(self._members)

    def __bool__(self) -> bool:
        return bool(self._members)


__all__ = ["AnnotationSet"]
