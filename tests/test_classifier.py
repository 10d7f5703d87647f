# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for exit status classification."""

import signal
from pathlib import Path

import pytest

from buildlint.classifier import classify, describe_failure
from buildlint.context import DocumentContext
from buildlint.models import Issues, NoIssues, ProcessExit, Superseded, ToolError

OUTPUT = "e: /src/Main.kt: (2, 4): Unresolved reference: foo\nBUILD FAILED\n"


@pytest.fixture
def document() -> DocumentContext:
    return DocumentContext(file_path=Path("/src/Main.kt"), content="line one\nline two\n")


def _exit(returncode: int) -> ProcessExit:
    return ProcessExit(pid=4242, args=["/opt/gradle/bin/gradle", "compileKotlin"], returncode=returncode)


def test_exit_zero_ignores_captured_output(document: DocumentContext) -> None:
    assert classify(_exit(0), OUTPUT, context=document) == NoIssues()


def test_exit_one_parses_diagnostics(document: DocumentContext) -> None:
    outcome = classify(_exit(1), OUTPUT, context=document)
    assert isinstance(outcome, Issues)
    assert [(record.line, record.column) for record in outcome.records] == [(2, 4)]


def test_exit_one_without_relevant_lines_is_empty_issues(document: DocumentContext) -> None:
    outcome = classify(_exit(1), "BUILD FAILED", context=document)
    assert outcome == Issues(records=())


def test_other_exit_codes_are_tool_errors(document: DocumentContext) -> None:
    outcome = classify(_exit(3), "Could not resolve dependencies\n", context=document)
    assert isinstance(outcome, ToolError)
    assert "pid 4242" in outcome.description
    assert "`gradle`" in outcome.description
    assert "status 3" in outcome.description
    assert outcome.description.endswith("Could not resolve dependencies")


def test_signal_termination_is_tool_error(document: DocumentContext) -> None:
    outcome = classify(_exit(-signal.SIGKILL), "", context=document)
    assert isinstance(outcome, ToolError)
    assert "signal SIGKILL" in outcome.description


def test_stale_results_are_superseded(document: DocumentContext) -> None:
    assert classify(_exit(1), OUTPUT, context=document, is_current=False) == Superseded(pid=4242)


def test_failure_description_keeps_output_tail() -> None:
    captured = "\n".join(f"line {index}" for index in range(10))
    description = describe_failure(_exit(2), captured)
    assert "line 4" not in description
    assert description.splitlines()[-5:] == [f"line {index}" for index in range(5, 10)]
