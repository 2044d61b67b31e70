# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line interface for annotating GitHub Actions from cargo output."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

import typer

from .config import CARGO_ENV, SUMMARY_PATH_ENV, AnnotateConfig
from .errors import CargoInvocationError
from .logging import configure_verbose_logging, fail, info, ok, warn
from .process import PASSTHROUGH_SEPARATOR, CargoInvocation, CargoProcess, CargoSubcommand
from .runner import RunState, annotate
from .severity import AnnotationKind
from .summary import write_summary

PROG_NAME: Final[str] = "cargo-ghannotate"
CARGO_SUBCOMMAND_NAME: Final[str] = "ghannotate"
EXIT_INVOCATION_ERROR: Final[int] = 2
LOGGER = logging.getLogger(__name__)

_PASSTHROUGH_CONTEXT: Final[dict[str, bool]] = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
}

app = typer.Typer(
    name=PROG_NAME,
    help="Annotate GitHub Actions from the JSON output of cargo commands.",
    no_args_is_help=True,
    add_completion=False,
)


@dataclass(slots=True)
class CliState:
    """Per-invocation state shared between the callback and subcommands."""

    passthrough: tuple[str, ...] = ()
    config: AnnotateConfig = field(default_factory=AnnotateConfig)


@app.callback()
def configure(
    ctx: typer.Context,
    cargo: str | None = typer.Option(
        None,
        "--cargo",
        envvar=CARGO_ENV,
        metavar="PATH",
        help="Path to the cargo executable.",
    ),
    allow_warnings: bool = typer.Option(
        False,
        "--allow-warnings",
        help="Do not fail the job when only warnings are raised.",
    ),
    summary_file: Path | None = typer.Option(
        None,
        "--summary-file",
        envvar=SUMMARY_PATH_ENV,
        metavar="PATH",
        help="Markdown file receiving the job summary.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log skipped lines and cargo activity."),
    no_emoji: bool = typer.Option(False, "--no-emoji", help="Disable emoji in console messages."),
) -> None:
    """Resolve shared options before running a subcommand."""
    state = ctx.ensure_object(CliState)
    state.config = AnnotateConfig(
        cargo=cargo,
        allow_warnings=allow_warnings,
        summary_path=summary_file,
        verbose=verbose,
        use_emoji=not no_emoji,
    )
    if verbose:
        configure_verbose_logging()


@app.command("check", context_settings=_PASSTHROUGH_CONTEXT)
def check_command(
    ctx: typer.Context,
    args: list[str] | None = typer.Argument(None, help="Arguments forwarded to cargo check."),
) -> None:
    """Run ``cargo check`` and annotate its diagnostics."""
    _run_cargo(ctx, CargoSubcommand.CHECK, args)


@app.command("clippy", context_settings=_PASSTHROUGH_CONTEXT)
def clippy_command(
    ctx: typer.Context,
    args: list[str] | None = typer.Argument(None, help="Arguments forwarded to cargo clippy."),
) -> None:
    """Run ``cargo clippy`` and annotate its diagnostics."""
    _run_cargo(ctx, CargoSubcommand.CLIPPY, args)


@app.command("build", context_settings=_PASSTHROUGH_CONTEXT)
def build_command(
    ctx: typer.Context,
    args: list[str] | None = typer.Argument(None, help="Arguments forwarded to cargo build."),
) -> None:
    """Run ``cargo build`` and annotate its diagnostics."""
    _run_cargo(ctx, CargoSubcommand.BUILD, args)


@app.command("read")
def read_command(
    ctx: typer.Context,
    source: typer.FileText = typer.Argument(
        "-",
        metavar="[FILE]",
        errors="replace",
        help="File holding cargo JSON messages; '-' reads standard input.",
    ),
) -> None:
    """Annotate previously captured cargo JSON output."""
    config = ctx.ensure_object(CliState).config
    run_state = annotate(source, emit=typer.echo)
    _finish(run_state, config)


def _run_cargo(ctx: typer.Context, subcommand: CargoSubcommand, args: Sequence[str] | None) -> None:
    """Invoke cargo, stream its messages through the annotator and exit.

    Args:
        ctx: Typer context holding the :class:`CliState`.
        subcommand: Cargo subcommand to run.
        args: Arguments forwarded to cargo before ``--message-format``.

    Raises:
        typer.Exit: Always raised to terminate with the run's exit status.
    """

    state = ctx.ensure_object(CliState)
    config = state.config
    forwarded = (*(args or ()), *ctx.args)
    invocation = CargoInvocation(
        cargo=config.cargo,
        subcommand=subcommand,
        args=tuple(forwarded),
        passthrough=state.passthrough,
    )
    if config.verbose:
        info(f"Running {' '.join(invocation.argv())}", use_emoji=config.use_emoji)
    try:
        with CargoProcess(invocation) as process:
            run_state = annotate(process.lines(), emit=typer.echo)
    except CargoInvocationError as exc:
        fail(str(exc), use_emoji=config.use_emoji)
        raise typer.Exit(code=EXIT_INVOCATION_ERROR) from exc

    if process.returncode is not None and process.returncode < 0:
        fail(
            f"cargo {subcommand.value} was terminated by signal {-process.returncode}",
            use_emoji=config.use_emoji,
        )
        raise typer.Exit(code=EXIT_INVOCATION_ERROR)
    if process.returncode and run_state.max_kind < AnnotationKind.ERROR:
        warn(
            f"cargo {subcommand.value} exited with status {process.returncode} without reporting errors",
            use_emoji=config.use_emoji,
        )
    _finish(run_state, config)


def _finish(run_state: RunState, config: AnnotateConfig) -> None:
    """Write the job summary, report totals and exit.

    Args:
        run_state: Final state of the annotation run.
        config: Resolved invocation configuration.

    Raises:
        typer.Exit: Always raised to terminate with the run's exit status.
    """

    LOGGER.debug(
        "processed %d lines: %d diagnostics, %d duplicates, %d without primary span, %d skipped; "
        "build success %s",
        run_state.lines,
        run_state.diagnostics,
        run_state.duplicates,
        run_state.unlocated,
        run_state.skipped,
        run_state.build_success,
    )
    try:
        write_summary(run_state.summaries, config.summary_path)
    except OSError as exc:
        fail(f"Unable to write job summary to {config.summary_path}: {exc}", use_emoji=config.use_emoji)
        raise typer.Exit(code=EXIT_INVOCATION_ERROR) from exc

    report = _format_report(run_state)
    if run_state.failed(config.threshold):
        fail(report, use_emoji=config.use_emoji)
    else:
        ok(report, use_emoji=config.use_emoji)
    raise typer.Exit(code=run_state.exit_code(config.threshold))


def _format_report(run_state: RunState) -> str:
    count = len(run_state.annotations)
    noun = "annotation" if count == 1 else "annotations"
    report = f"Emitted {count} {noun}: {run_state.summaries.totals_line().removeprefix('> **TOTAL:** ')}"
    if run_state.duplicates:
        report += f" ({run_state.duplicates} duplicate(s) skipped)"
    return report


def split_passthrough(argv: Iterable[str]) -> tuple[list[str], tuple[str, ...]]:
    """Split ``argv`` at the first ``--`` separator.

    Args:
        argv: Raw command line arguments.

    Returns:
        tuple[list[str], tuple[str, ...]]: Arguments for this CLI and the
        arguments to forward after cargo's own ``--``.
    """

    arguments = list(argv)
    if PASSTHROUGH_SEPARATOR not in arguments:
        return arguments, ()
    index = arguments.index(PASSTHROUGH_SEPARATOR)
    return arguments[:index], tuple(arguments[index + 1 :])


def main(argv: Sequence[str] | None = None) -> None:
    """Console script entry point.

    Cargo runs ``cargo-ghannotate ghannotate ...`` for ``cargo ghannotate``,
    so a leading ``ghannotate`` argument is dropped.

    Args:
        argv: Optional argument vector; defaults to :data:`sys.argv`.
    """

    arguments = list(sys.argv[1:] if argv is None else argv)
    if arguments[:1] == [CARGO_SUBCOMMAND_NAME]:
        arguments = arguments[1:]
    own, passthrough = split_passthrough(arguments)
    app(args=own, obj=CliState(passthrough=passthrough), prog_name=PROG_NAME)


__all__ = [
    "CliState",
    "app",
    "main",
    "split_passthrough",
]
