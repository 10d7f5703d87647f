# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from buildlint.context import DocumentContext

KOTLIN_SOURCE = """package demo

class MainActivity {
    fun onCreate() {
        println("hello"
    }
}
"""


@pytest.fixture
def kotlin_document(tmp_path: Path) -> DocumentContext:
    """Return a Kotlin document living inside ``tmp_path``."""
    path = tmp_path / "src" / "main" / "kotlin" / "MainActivity.kt"
    path.parent.mkdir(parents=True)
    path.write_text(KOTLIN_SOURCE, encoding="utf-8")
    return DocumentContext.from_file(path)


@pytest.fixture
def python_command() -> Callable[[str], list[str]]:
    """Return a factory building a command that runs a Python snippet."""

    def _build(script: str) -> list[str]:
        return [sys.executable, "-c", script]

    return _build
