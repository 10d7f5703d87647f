# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels reported for build diagnostics."""

    ERROR = "error"
    WARNING = "warning"


ERROR_MARKER: Final[str] = "e"


def severity_from_marker(marker: str) -> Severity:
    """Map a one-character compiler marker (``e``, ``w``, ...) to a severity.

    Only ``e`` denotes an error; every other marker is treated as a warning.
    """

    return Severity.ERROR if marker.strip() == ERROR_MARKER else Severity.WARNING


__all__ = ["ERROR_MARKER", "Severity", "severity_from_marker"]
