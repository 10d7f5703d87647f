# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers that convert build tool output into :class:`DiagnosticRecord` instances."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from .context import EditingContext
from .models import DiagnosticRecord
from .severity import Severity, severity_from_marker

LineTransform = Callable[[str], DiagnosticRecord]

FIELD_SEPARATOR: Final[str] = ":"
LOCATION_SEPARATOR: Final[str] = ", "


class Grammar(str, Enum):
    """Output grammars understood by the parser registry."""

    KOTLIN = "kotlin"
    JAVA = "java"


GRAMMAR_SUFFIXES: Final[dict[str, Grammar]] = {
    ".kt": Grammar.KOTLIN,
    ".kts": Grammar.KOTLIN,
    ".java": Grammar.JAVA,
}


class UnsupportedFileError(ValueError):
    """Raised when no grammar is registered for a document's file type."""


def detect_grammar(path: Path) -> Grammar | None:
    """Return the grammar for ``path`` based on its suffix."""

    return GRAMMAR_SUFFIXES.get(Path(path).suffix.lower())


def require_grammar(path: Path) -> Grammar:
    """Return the grammar for ``path`` or raise :class:`UnsupportedFileError`."""

    grammar = detect_grammar(path)
    if grammar is None:
        raise UnsupportedFileError(f"No build output grammar registered for '{Path(path).name}'")
    return grammar


def parse_kotlinc_line(line: str) -> DiagnosticRecord:
    """Parse a ``e: /path/File.kt: (row, column): message`` line.

    Raises:
        IndexError: When the line has too few fields.
        ValueError: When the location pair is not numeric.
    """

    fields = line.split(FIELD_SEPARATOR)
    location = fields[2].strip(" ()")
    row, column = location.split(LOCATION_SEPARATOR)
    message = FIELD_SEPARATOR.join(fields[3:]).strip()
    return DiagnosticRecord(
        severity=severity_from_marker(fields[0]),
        line=int(row),
        column=int(column),
        message=message,
    )


def parse_javac_line(line: str) -> DiagnosticRecord:
    """Parse a ``/path/File.java:line: error: message`` line.

    javac gives no column, so it defaults to 1 and every entry is an error.
    The message is the raw field following the line number.
    """

    fields = line.split(FIELD_SEPARATOR)
    return DiagnosticRecord(
        severity=Severity.ERROR,
        line=int(fields[1]),
        column=1,
        message=fields[2],
    )


@dataclass(slots=True)
class TextParser:
    """Apply a per-line transform to output lines naming the current file."""

    grammar: Grammar
    transform: LineTransform

    def parse(self, text: str, *, context: EditingContext) -> list[DiagnosticRecord]:
        """Return records for every parseable line mentioning ``context``'s file.

        Unparseable lines are skipped; this never raises for malformed input.
        """

        name = context.file_path.name
        results: list[DiagnosticRecord] = []
        for raw_line in text.split("\n"):
            line = raw_line.removesuffix("\r")
            if name not in line:
                continue
            try:
                results.append(self.transform(line))
            except (IndexError, ValueError):
                continue
        return results


PARSERS: Final[Mapping[Grammar, TextParser]] = {
    Grammar.KOTLIN: TextParser(Grammar.KOTLIN, parse_kotlinc_line),
    Grammar.JAVA: TextParser(Grammar.JAVA, parse_javac_line),
}


def parse_diagnostics(
    text: str,
    context: EditingContext,
    grammar: Grammar | None = None,
) -> list[DiagnosticRecord]:
    """Parse ``text`` with ``grammar`` (detected from the file when omitted).

    Returns an empty list when no grammar applies to the context's file.
    """

    selected = grammar or detect_grammar(context.file_path)
    if selected is None:
        return []
    return PARSERS[selected].parse(text, context=context)


__all__ = [
    "GRAMMAR_SUFFIXES",
    "Grammar",
    "PARSERS",
    "TextParser",
    "UnsupportedFileError",
    "detect_grammar",
    "parse_diagnostics",
    "parse_javac_line",
    "parse_kotlinc_line",
    "require_grammar",
]
