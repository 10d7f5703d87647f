# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the buildlint package."""

from __future__ import annotations

import signal
from collections.abc import Sequence
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .severity import Severity


class DiagnosticRecord(BaseModel):
    """Diagnostic extracted from build tool output, before position resolution."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    line: int = Field(ge=1)
    column: int = Field(ge=1)
    message: str


class OffsetSpan(BaseModel):
    """Half-open ``[start, end)`` range of 0-based character offsets."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    def slice(self, text: str) -> str:
        """Return the characters of ``text`` covered by the span."""
        return text[self.start : self.end]


class ReportedDiagnostic(BaseModel):
    """Diagnostic anchored to document offsets, ready for the editor layer."""

    model_config = ConfigDict(frozen=True)

    span: OffsetSpan
    severity: Severity
    message: str
    line: int
    column: int


class ProcessExit(BaseModel):
    """Exit metadata for one finished build tool process."""

    model_config = ConfigDict(frozen=True)

    pid: int | None
    args: tuple[str, ...]
    returncode: int

    @field_validator("args", mode="before")
    @classmethod
    def _coerce_args(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            return (value,)
        if isinstance(value, Sequence):
            return tuple(str(item) for item in value)
        return ()

    @property
    def program(self) -> str:
        """Return the executable name used in human-readable descriptions."""
        if not self.args:
            return "<unknown>"
        return self.args[0].replace("\\", "/").rsplit("/", 1)[-1]

    @property
    def signalled(self) -> bool:
        """Return ``True`` when the process was terminated by a signal."""
        return self.returncode < 0

    def signal_name(self) -> str:
        """Return the symbolic name of the terminating signal."""
        number = -self.returncode
        try:
            return signal.Signals(number).name
        except ValueError:
            return f"signal {number}"

    def describe(self) -> str:
        """Return the ``pid N, `program``` identity used in error descriptions."""
        pid = "?" if self.pid is None else str(self.pid)
        return f"pid {pid}, `{self.program}`"


class NoIssues(BaseModel):
    """The build finished cleanly for the linted document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["no-issues"] = "no-issues"


class Issues(BaseModel):
    """The build reported compile problems."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["issues"] = "issues"
    records: tuple[DiagnosticRecord, ...] = ()
    diagnostics: tuple[ReportedDiagnostic, ...] = ()


class ToolError(BaseModel):
    """The build tool itself failed; fatal for this request only."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["tool-error"] = "tool-error"
    description: str


class Superseded(BaseModel):
    """A newer request for the same context replaced this run."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["superseded"] = "superseded"
    pid: int | None = None


Outcome = Annotated[Union[NoIssues, Issues, ToolError, Superseded], Field(discriminator="kind")]


__all__ = [
    "DiagnosticRecord",
    "Issues",
    "NoIssues",
    "OffsetSpan",
    "Outcome",
    "ProcessExit",
    "ReportedDiagnostic",
    "Superseded",
    "ToolError",
]
