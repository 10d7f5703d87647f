# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Classify finished build processes into lint outcomes."""

from __future__ import annotations

from typing import Final

from .context import EditingContext
from .models import Issues, NoIssues, Outcome, ProcessExit, Superseded, ToolError
from .parsers import Grammar, parse_diagnostics

EXIT_CLEAN: Final[int] = 0
EXIT_DIAGNOSTICS: Final[int] = 1
OUTPUT_TAIL_LINES: Final[int] = 5


def _output_tail(captured: str, limit: int = OUTPUT_TAIL_LINES) -> str:
    lines = [line for line in captured.splitlines() if line.strip()]
    return "\n".join(lines[-limit:])


def describe_failure(process_exit: ProcessExit, captured: str = "") -> str:
    """Return a human-readable description of an abnormal build termination."""

    if process_exit.signalled:
        description = f"Build tool ({process_exit.describe()}) was terminated by signal {process_exit.signal_name()}"
    else:
        description = f"Build tool ({process_exit.describe()}) exited abnormally with status {process_exit.returncode}"
    tail = _output_tail(captured)
    if tail:
        description = f"{description}:\n{tail}"
    return description


def classify(
    process_exit: ProcessExit,
    captured: str,
    *,
    context: EditingContext,
    grammar: Grammar | None = None,
    is_current: bool = True,
) -> Outcome:
    """Turn a process result into an :data:`Outcome`.

    Args:
        process_exit: Exit metadata of the finished process.
        captured: Merged stdout/stderr text captured during the run.
        context: Document the run was started for.
        grammar: Output grammar; detected from the context's file when omitted.
        is_current: ``False`` when a newer run has replaced this one.

    Returns:
        Outcome: ``Superseded`` for stale runs, ``NoIssues`` on exit 0,
        ``Issues`` on exit 1 and ``ToolError`` for anything else.
    """

    if not is_current:
        return Superseded(pid=process_exit.pid)
    if process_exit.returncode == EXIT_CLEAN:
        return NoIssues()
    if process_exit.returncode == EXIT_DIAGNOSTICS:
        return Issues(records=tuple(parse_diagnostics(captured, context, grammar)))
    return ToolError(description=describe_failure(process_exit, captured))


__all__ = ["EXIT_CLEAN", "EXIT_DIAGNOSTICS", "classify", "describe_failure"]
