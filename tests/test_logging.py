# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for console and logging helpers."""

from __future__ import annotations

import logging

import pytest

from ghannotate.logging import configure_verbose_logging, emoji, fail, info, ok, warn


def test_console_helpers_write_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    info("starting", use_emoji=False)
    ok("all good", use_emoji=False)
    warn("careful", use_emoji=False)
    fail("broken", use_emoji=False)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.splitlines() == ["starting", "all good", "careful", "broken"]


def test_emoji_toggle() -> None:
    assert emoji("✅ ", True) == "✅ "
    assert emoji("✅ ", False) == ""


def test_configure_verbose_logging_is_idempotent(package_logger: logging.Logger) -> None:
    setattr(package_logger, "_ghannotate_verbose_configured", False)
    before = len(package_logger.handlers)
    configure_verbose_logging()
    configure_verbose_logging()
    assert len(package_logger.handlers) == before + 1
    assert package_logger.level == logging.DEBUG
    assert package_logger.propagate is False
