# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line front end running a single build lint for one file."""

from __future__ import annotations

import logging as std_logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Final

import typer

from .config import ConfigError, LintConfig, load_config
from .context import DocumentContext
from .controller import LintController
from .logging import diagnostic, fail, info, ok, warn
from .models import Issues, NoIssues, Outcome, ToolError
from .parsers import UnsupportedFileError, require_grammar
from .project import ProjectRootError, ToolNotFoundError, discover_project_root, resolve_gradle_executable
from .targets import build_command, select_tasks

EXIT_OK: Final[int] = 0
EXIT_ISSUES: Final[int] = 1
EXIT_ERROR: Final[int] = 2

app = typer.Typer(
    name="buildlint",
    help="Run the project build for a source file and report its diagnostics.",
    no_args_is_help=True,
    add_completion=False,
)


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = EXIT_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI presentation flags."""

    use_emoji: bool
    use_color: bool
    debug_enabled: bool = False

    def ok(self, message: str) -> None:
        ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def fail(self, message: str) -> None:
        fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def debug(self, message: str) -> None:
        if self.debug_enabled:
            info(f"[debug] {message}", use_emoji=False, use_color=self.use_color)


def _load(root: Path, flags: list[str]) -> LintConfig:
    try:
        config = load_config(root)
    except ConfigError as exc:
        raise CLIError(str(exc)) from exc
    if flags:
        config.extra_flags = [*config.extra_flags, *flags]
    return config


def _report(outcome: Outcome, document: DocumentContext, logger: CLILogger) -> int:
    if isinstance(outcome, NoIssues):
        logger.ok(f"No build diagnostics for {document.file_path.name}")
        return EXIT_OK
    if isinstance(outcome, Issues):
        for entry in outcome.diagnostics:
            diagnostic(
                f"{document.file_path}:{entry.line}:{entry.column}",
                entry.severity,
                entry.message,
                use_color=logger.use_color,
            )
        logger.warn(f"{len(outcome.diagnostics)} diagnostic(s) reported for {document.file_path.name}")
        return EXIT_ISSUES
    if isinstance(outcome, ToolError):
        logger.fail(outcome.description)
        return EXIT_ERROR
    raise CLIError("Build run was superseded before completing")


def run_lint(
    file: Path,
    *,
    root: Path | None,
    has_errors: bool,
    flags: list[str],
    logger: CLILogger,
) -> int:
    """Lint ``file`` once and return the process exit status."""

    document_path = file.expanduser().resolve()
    try:
        grammar = require_grammar(document_path)
        project_root = root.resolve() if root is not None else discover_project_root(document_path)[0]
        config = _load(project_root, flags)
        logger.use_emoji = config.output.emoji and logger.use_emoji
        logger.use_color = config.output.color and logger.use_color
        logger.debug_enabled = logger.debug_enabled or config.output.verbose
        executable = resolve_gradle_executable(project_root, config)
        command = build_command(executable, select_tasks(document_path, has_errors=has_errors, config=config), config)
        document = DocumentContext.from_file(document_path)
    except (UnsupportedFileError, ProjectRootError, ToolNotFoundError, ConfigError, OSError) as exc:
        raise CLIError(str(exc)) from exc

    logger.debug(f"root={project_root} command={' '.join(command)}")
    controller = LintController()
    request = controller.start_lint(document, command, cwd=project_root, grammar=grammar)
    return _report(request.result(), document, logger)


@app.command("lint")
def lint_command(
    file: Annotated[Path, typer.Argument(help="Source file whose diagnostics should be reported.")],
    root: Annotated[
        Path | None,
        typer.Option("--root", help="Project root; detected from the file when omitted."),
    ] = None,
    has_errors: Annotated[
        bool,
        typer.Option("--has-errors", help="The document currently shows errors; skip the clean task."),
    ] = False,
    flags: Annotated[
        list[str] | None,
        typer.Option("--flag", help="Extra argument appended to the build command (repeatable)."),
    ] = None,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Print debug details.")] = False,
) -> None:
    """Run the build for FILE and print its diagnostics."""

    if debug:
        std_logging.basicConfig(level=std_logging.DEBUG)
    logger = CLILogger(use_emoji=not no_emoji, use_color=not no_color, debug_enabled=debug)
    try:
        code = run_lint(
            file,
            root=root,
            has_errors=has_errors,
            flags=list(flags or []),
            logger=logger,
        )
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=code)


@app.callback()
def main() -> None:
    """buildlint command group."""


__all__ = ["CLIError", "app", "run_lint"]
