# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
import logging
import stat
import sys
from collections.abc import Callable, Iterator, Mapping, Sequence
from pathlib import Path

import pytest

SpanFactory = Callable[..., dict[str, object]]
LineFactory = Callable[..., str]
FakeCargoFactory = Callable[..., Path]


def _span(
    file_name: str = "src/lib.rs",
    line_start: int = 10,
    line_end: int = 10,
    column_start: int = 5,
    column_end: int = 8,
    is_primary: bool = True,
) -> dict[str, object]:
    return {
        "file_name": file_name,
        "line_start": line_start,
        "line_end": line_end,
        "column_start": column_start,
        "column_end": column_end,
        "is_primary": is_primary,
    }


def _compiler_message(
    message: str = "unused variable",
    level: str = "warning",
    spans: Sequence[Mapping[str, object]] | None = None,
    rendered: str | None = None,
) -> str:
    payload = {
        "reason": "compiler-message",
        "package_id": "demo 0.1.0 (path+file:///work/demo)",
        "message": {
            "message": message,
            "code": None,
            "level": level,
            "spans": list(spans) if spans is not None else [_span()],
            "children": [],
            "rendered": rendered,
        },
    }
    return json.dumps(payload)


@pytest.fixture
def span() -> SpanFactory:
    """Return a factory producing rustc span mappings."""
    return _span


@pytest.fixture
def compiler_line() -> LineFactory:
    """Return a factory producing ``compiler-message`` JSON lines."""
    return _compiler_message


@pytest.fixture
def fake_cargo(tmp_path: Path) -> FakeCargoFactory:
    """Return a factory writing an executable that mimics cargo.

    The script records its arguments next to itself in ``cargo.args`` and
    prints the supplied lines on stdout.
    """

    def _factory(lines: Sequence[str] = (), *, returncode: int = 0) -> Path:
        script = tmp_path / "cargo"
        body = "\n".join(
            [
                f"#!{sys.executable}",
                "import json, sys",
                "from pathlib import Path",
                "Path(__file__).with_suffix('.args').write_text(json.dumps(sys.argv[1:]))",
                f"for line in {list(lines)!r}:",
                "    print(line, flush=True)",
                f"sys.exit({returncode})",
            ],
        )
        script.write_text(body + "\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _factory


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CI-provided variables from leaking into CLI defaults."""
    monkeypatch.delenv("GITHUB_STEP_SUMMARY", raising=False)
    monkeypatch.delenv("CARGO", raising=False)


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    """Yield the ``ghannotate`` logger and restore its configuration afterwards."""
    logger = logging.getLogger("ghannotate")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    configured = getattr(logger, "_ghannotate_verbose_configured", False)
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
    setattr(logger, "_ghannotate_verbose_configured", configured)
