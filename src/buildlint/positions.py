# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map 1-based ``(line, column)`` locations onto document offsets."""

from __future__ import annotations

from collections.abc import Iterable

from .context import EditingContext
from .models import DiagnosticRecord, OffsetSpan, ReportedDiagnostic


def _line_bounds(text: str, line: int) -> tuple[int, int] | None:
    """Return ``(start, end)`` offsets of ``line`` or ``None`` past the end."""

    start = 0
    for _ in range(max(line, 1) - 1):
        newline = text.find("\n", start)
        if newline < 0:
            return None
        start = newline + 1
    end = text.find("\n", start)
    if end < 0:
        end = len(text)
    if end > start and text[end - 1] == "\r":
        end -= 1
    return start, end


def resolve_offset(text: str, line: int, column: int) -> int:
    """Return the offset reached by moving to ``line`` then ``column`` characters in.

    Lines beyond the document clamp to end-of-document; columns beyond the
    line clamp to end-of-line.
    """

    bounds = _line_bounds(text, line)
    if bounds is None:
        return len(text)
    start, end = bounds
    return min(start + max(column, 0), end)


def resolve_span(text: str, line: int, column: int) -> OffsetSpan:
    """Return the single-character span just left of the resolved position.

    Diagnostics mark ``[offset - 1, offset)``; consumers rely on this exact
    convention, so a column of 1 highlights the first character of the line.
    """

    offset = resolve_offset(text, line, column)
    return OffsetSpan(start=max(offset - 1, 0), end=offset)


def resolve_context_span(context: EditingContext, line: int, column: int) -> OffsetSpan:
    """Resolve a location against the live content of ``context``."""

    return resolve_span(context.text(), line, column)


def resolve_records(context: EditingContext, records: Iterable[DiagnosticRecord]) -> list[ReportedDiagnostic]:
    """Anchor each record to the current document content, preserving order."""

    text = context.text()
    return [
        ReportedDiagnostic(
            span=resolve_span(text, record.line, record.column),
            severity=record.severity,
            message=record.message,
            line=record.line,
            column=record.column,
        )
        for record in records
    ]


__all__ = ["resolve_context_span", "resolve_offset", "resolve_records", "resolve_span"]
