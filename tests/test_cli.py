# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the cargo-ghannotate command line interface."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ghannotate.cli import CliState, app, main, split_passthrough

EXPECTED_WARNING = "::warning file=src/lib.rs,line=10,endLine=10,col=5,endColumn=8::unused variable"


def _annotation_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if line.startswith("::")]


def test_read_command_annotates_file(tmp_path: Path, compiler_line) -> None:
    source = tmp_path / "cargo.jsonl"
    source.write_text("\n".join([compiler_line(), compiler_line(), "noise"]) + "\n", encoding="utf-8")
    summary = tmp_path / "summary.md"

    result = CliRunner().invoke(app, ["--summary-file", str(summary), "read", str(source)])

    assert result.exit_code == 1
    assert _annotation_lines(result.stdout) == [EXPECTED_WARNING]
    content = summary.read_text(encoding="utf-8")
    assert "> **TOTAL:** 0 Errors, 1 Warning, 0 Notices" in content
    assert content.count("|:warning: Warning|unused variable|`src/lib.rs:10`|") == 1


def test_read_command_skips_undecodable_lines(tmp_path: Path, compiler_line) -> None:
    source = tmp_path / "cargo.jsonl"
    source.write_bytes(b"\xff\xfe garbage\n" + compiler_line().encode("utf-8") + b"\n")
    summary = tmp_path / "summary.md"

    result = CliRunner().invoke(app, ["--summary-file", str(summary), "read", str(source)])

    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert result.exit_code == 1
    assert _annotation_lines(result.stdout) == [EXPECTED_WARNING]
    assert "1 Warning" in summary.read_text(encoding="utf-8")


def test_read_command_allow_warnings_succeeds(compiler_line) -> None:
    result = CliRunner().invoke(app, ["--allow-warnings", "read", "-"], input=compiler_line() + "\n")
    assert result.exit_code == 0
    assert _annotation_lines(result.stdout) == [EXPECTED_WARNING]


def test_read_command_errors_fail_even_when_warnings_allowed(compiler_line) -> None:
    result = CliRunner().invoke(app, ["--allow-warnings", "read"], input=compiler_line(level="error") + "\n")
    assert result.exit_code == 1
    assert _annotation_lines(result.stdout)[0].startswith("::error ")


def test_summary_file_from_environment(tmp_path: Path, compiler_line) -> None:
    summary = tmp_path / "step-summary.md"
    result = CliRunner().invoke(
        app,
        ["read"],
        input=compiler_line(level="note") + "\n",
        env={"GITHUB_STEP_SUMMARY": str(summary)},
    )
    assert result.exit_code == 0
    assert "1 Notice" in summary.read_text(encoding="utf-8")


def test_unwritable_summary_is_reported(tmp_path: Path, compiler_line) -> None:
    summary = tmp_path / "missing" / "summary.md"
    result = CliRunner().invoke(app, ["--summary-file", str(summary), "read"], input=compiler_line() + "\n")
    assert result.exit_code == 2


def test_clippy_command_runs_cargo(tmp_path: Path, fake_cargo, compiler_line) -> None:
    script = fake_cargo([compiler_line(), '{"reason":"build-finished","success":true}'])
    summary = tmp_path / "summary.md"

    result = CliRunner().invoke(
        app,
        ["--cargo", str(script), "--summary-file", str(summary), "clippy", "--workspace", "--all-targets"],
        obj=CliState(passthrough=("-D", "warnings")),
    )

    assert result.exit_code == 1
    assert _annotation_lines(result.stdout) == [EXPECTED_WARNING]
    recorded = json.loads((tmp_path / "cargo.args").read_text(encoding="utf-8"))
    assert recorded == ["clippy", "--workspace", "--all-targets", "--message-format=json", "--", "-D", "warnings"]


def test_cargo_from_environment(tmp_path: Path, fake_cargo) -> None:
    script = fake_cargo(['{"reason":"build-finished","success":true}'])
    result = CliRunner().invoke(app, ["check"], env={"CARGO": str(script)})
    assert result.exit_code == 0
    assert json.loads((tmp_path / "cargo.args").read_text(encoding="utf-8")) == ["check", "--message-format=json"]


def test_missing_cargo_exits_with_invocation_error(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["--cargo", str(tmp_path / "nope"), "build"])
    assert result.exit_code == 2
    assert _annotation_lines(result.stdout) == []


def test_split_passthrough() -> None:
    assert split_passthrough(["check"]) == (["check"], ())
    assert split_passthrough(["clippy", "--", "-D", "warnings", "--", "x"]) == (
        ["clippy"],
        ("-D", "warnings", "--", "x"),
    )


def test_main_drops_cargo_subcommand_name(
    tmp_path: Path,
    fake_cargo,
    compiler_line,
    capsys: pytest.CaptureFixture[str],
) -> None:
    script = fake_cargo([compiler_line(level="note")])

    with pytest.raises(SystemExit) as excinfo:
        main(["ghannotate", "--cargo", str(script), "build", "--release", "--", "--nocapture"])

    assert excinfo.value.code == 0
    captured = capsys.readouterr()
    assert _annotation_lines(captured.out) == [
        "::notice file=src/lib.rs,line=10,endLine=10,col=5,endColumn=8::unused variable",
    ]
    recorded = json.loads((tmp_path / "cargo.args").read_text(encoding="utf-8"))
    assert recorded == ["build", "--release", "--message-format=json", "--", "--nocapture"]


@pytest.mark.usefixtures("package_logger")
def test_verbose_announces_cargo_command(fake_cargo) -> None:
    script = fake_cargo(['{"reason":"build-finished","success":true}'])
    result = CliRunner().invoke(app, ["--verbose", "--no-emoji", "--cargo", str(script), "check"])
    assert result.exit_code == 0
    assert f"Running {script} check --message-format=json" in result.output


def test_finish_logs_build_outcome(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="ghannotate")
    result = CliRunner().invoke(app, ["read"], input='{"reason":"build-finished","success":false}\n')
    assert result.exit_code == 0
    assert "build success False" in caplog.text
