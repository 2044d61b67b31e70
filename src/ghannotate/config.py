# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model for a ghannotate invocation."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator

from .severity import AnnotationKind, threshold_for

CARGO_ENV: Final[str] = "CARGO"
SUMMARY_PATH_ENV: Final[str] = "GITHUB_STEP_SUMMARY"
DEFAULT_CARGO: Final[str] = "cargo"


class AnnotateConfig(BaseModel):
    """Options resolved from the command line and the environment."""

    model_config = ConfigDict(frozen=True)

    cargo: str = DEFAULT_CARGO
    allow_warnings: bool = False
    summary_path: Path | None = None
    verbose: bool = False
    use_emoji: bool = True

    @field_validator("cargo", mode="before")
    @classmethod
    def _default_cargo(cls, value: str | None) -> str:
        """Fall back to ``cargo`` on ``PATH`` when no executable is given.

        Args:
            value: Executable supplied via ``--cargo`` or ``$CARGO``.

        Returns:
            str: Executable name or path to invoke.
        """

        if value is None or not str(value).strip():
            return DEFAULT_CARGO
        return str(value)

    @field_validator("summary_path", mode="before")
    @classmethod
    def _blank_summary_path(cls, value: str | Path | None) -> str | Path | None:
        """Treat an empty summary destination as unset.

        Args:
            value: Destination supplied via ``--summary-file`` or ``$GITHUB_STEP_SUMMARY``.

        Returns:
            str | Path | None: ``None`` for blank values, otherwise ``value``.
        """

        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def threshold(self) -> AnnotationKind:
        """Return the minimum annotation kind that fails the run."""

        return threshold_for(self.allow_warnings)


__all__ = [
    "CARGO_ENV",
    "DEFAULT_CARGO",
    "SUMMARY_PATH_ENV",
    "AnnotateConfig",
]
