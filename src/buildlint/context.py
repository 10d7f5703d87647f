# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Editing contexts describing the documents buildlint reports against."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class EditingContext(Protocol):
    """Read-only view of an editable document owned by the caller."""

    @property
    def identity(self) -> str:
        """Return a stable identifier for the document instance."""

    @property
    def file_path(self) -> Path:
        """Return the path of the file backing the document."""

    def text(self) -> str:
        """Return the current document content."""


@dataclass(slots=True)
class DocumentContext:
    """In-memory document satisfying :class:`EditingContext`.

    ``version`` increases on every :meth:`update`; diagnostics are resolved
    against whatever content is current when a run completes.
    """

    file_path: Path
    content: str = ""
    identity: str = ""
    version: int = field(default=0)

    def __post_init__(self) -> None:
        self.file_path = Path(self.file_path)
        if not self.identity:
            self.identity = str(self.file_path)

    def text(self) -> str:
        return self.content

    def update(self, content: str) -> int:
        """Replace the document content and return the new version."""
        self.content = content
        self.version += 1
        return self.version

    @classmethod
    def from_file(cls, path: Path, *, identity: str | None = None) -> DocumentContext:
        """Build a context from the on-disk content of ``path``."""
        resolved = Path(path)
        content = resolved.read_text(encoding="utf-8", errors="replace")
        return cls(file_path=resolved, content=content, identity=identity or str(resolved))


__all__ = ["DocumentContext", "EditingContext"]
