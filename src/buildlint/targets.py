# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Choose build tasks for a source file and assemble the build command line."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from .config import LintConfig
from .parsers import Grammar, require_grammar

CLEAN_TASK: Final[str] = "clean"
TEST_SOURCE_SETS: Final[frozenset[str]] = frozenset({"test", "androidTest", "testFixtures"})

_COMPILE_TASKS: Final[dict[Grammar, tuple[str, str]]] = {
    Grammar.KOTLIN: ("compileKotlin", "compileTestKotlin"),
    Grammar.JAVA: ("compileJava", "compileTestJava"),
}


def is_test_source(path: Path) -> bool:
    """Return ``True`` when ``path`` lives under ``src/<test source set>/``."""

    parts = Path(path).parts
    return any(
        parts[index] == "src" and parts[index + 1] in TEST_SOURCE_SETS for index in range(len(parts) - 1)
    )


def compile_task(path: Path, config: LintConfig | None = None) -> str:
    """Return the compile task for ``path``, honouring configured overrides."""

    cfg = config or LintConfig()
    grammar = require_grammar(path)
    override = cfg.kotlin_task if grammar is Grammar.KOTLIN else cfg.java_task
    if override:
        return override
    main_task, test_task = _COMPILE_TASKS[grammar]
    return test_task if is_test_source(path) else main_task


def select_tasks(path: Path, *, has_errors: bool, config: LintConfig | None = None) -> list[str]:
    """Return the tasks to run for ``path``.

    Gradle skips up-to-date compile tasks without re-reporting warnings, so a
    document with no current errors is rebuilt from ``clean``.
    """

    cfg = config or LintConfig()
    task = compile_task(path, cfg)
    if not has_errors and cfg.clean_when_clean:
        return [CLEAN_TASK, task]
    return [task]


def build_command(executable: Path | str, tasks: list[str], config: LintConfig | None = None) -> list[str]:
    """Return ``[executable, <console flags>, *tasks, *extra_flags]``."""

    cfg = config or LintConfig()
    command = [str(executable)]
    if cfg.quiet:
        command.append("--quiet")
    if cfg.plain_console:
        command.extend(["--console", "plain"])
    command.extend(tasks)
    command.extend(cfg.extra_flags)
    return command


__all__ = ["CLEAN_TASK", "build_command", "compile_task", "is_test_source", "select_tasks"]
