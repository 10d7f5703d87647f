# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the buildlint command line front end."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from buildlint.cli import app

runner = CliRunner()


def _project(tmp_path: Path, *, exit_code: int, output: str = "") -> tuple[Path, Path]:
    source = tmp_path / "app" / "src" / "main" / "kotlin" / "Main.kt"
    source.parent.mkdir(parents=True)
    source.write_text("package demo\n\nfun main() = foo()\n", encoding="utf-8")
    fake = tmp_path / "fake_gradle.py"
    fake.write_text(
        "import json, pathlib, sys\n"
        f"pathlib.Path({str(tmp_path / 'argv.json')!r}).write_text(json.dumps(sys.argv[1:]))\n"
        f"sys.stderr.write({output!r})\n"
        f"sys.exit({exit_code})\n",
        encoding="utf-8",
    )
    wrapper = tmp_path / "gradlew"
    wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{fake}" "$@"\n', encoding="utf-8")
    wrapper.chmod(0o755)
    return source, tmp_path / "argv.json"


def test_lint_reports_diagnostics(tmp_path: Path) -> None:
    source, argv_file = _project(
        tmp_path,
        exit_code=1,
        output="e: /x/app/src/main/kotlin/Main.kt: (3, 14): Unresolved reference: foo\n",
    )
    result = runner.invoke(app, ["lint", str(source), "--no-color", "--no-emoji", "--flag=--offline"])

    assert result.exit_code == 1, result.output
    assert f"{source.resolve()}:3:14: error: Unresolved reference: foo" in result.output
    assert json.loads(argv_file.read_text()) == [
        "--quiet",
        "--console",
        "plain",
        "clean",
        "compileKotlin",
        "--offline",
    ]


def test_lint_clean_build(tmp_path: Path) -> None:
    source, argv_file = _project(tmp_path, exit_code=0, output="w: Main.kt: (1, 1): ignored\n")
    result = runner.invoke(app, ["lint", str(source), "--no-color", "--no-emoji", "--has-errors"])

    assert result.exit_code == 0, result.output
    assert "No build diagnostics for Main.kt" in result.output
    assert "clean" not in json.loads(argv_file.read_text())


def test_lint_tool_error(tmp_path: Path) -> None:
    source, _ = _project(tmp_path, exit_code=7, output="FAILURE: daemon disappeared\n")
    result = runner.invoke(app, ["lint", str(source), "--no-color", "--no-emoji"])

    assert result.exit_code == 2
    assert "status 7" in result.output
    assert "daemon disappeared" in result.output


@pytest.mark.parametrize("name", ["notes.txt", "Main.kt"])
def test_lint_setup_errors_exit_with_two(tmp_path: Path, name: str) -> None:
    source = tmp_path / name
    source.write_text("", encoding="utf-8")
    (tmp_path / ".buildlint.toml").write_text(
        'root_markers = ["no-such-marker"]\nfallback_markers = []\nuse_wrapper = false\n'
        'gradle_executable = "definitely-not-a-gradle-binary"\n',
        encoding="utf-8",
    )
    result = runner.invoke(app, ["lint", str(source), "--root", str(tmp_path), "--no-color", "--no-emoji"])

    assert result.exit_code == 2


def _workspace(tmp_path: Path, *, extra: str = "") -> tuple[Path, Path, Path]:
    project = tmp_path / "proj"
    (project / "app").mkdir(parents=True)
    (project / "WORKSPACE").write_text("", encoding="utf-8")
    (project / "app" / "build.gradle").write_text("", encoding="utf-8")
    source = project / "app" / "src" / "Main.kt"
    source.parent.mkdir(parents=True)
    source.write_text("fun main() {}\n", encoding="utf-8")
    cwd_file = tmp_path / "cwd.txt"
    tool = tmp_path / "tools" / "gradle"
    tool.parent.mkdir()
    tool.write_text(f'#!/bin/sh\npwd -P > "{cwd_file}"\nexit 0\n', encoding="utf-8")
    tool.chmod(0o755)
    (project / ".buildlint.toml").write_text(
        'root_markers = ["WORKSPACE"]\nfallback_markers = []\nuse_wrapper = false\n'
        f'gradle_executable = "{tool}"\n{extra}',
        encoding="utf-8",
    )
    return project, source, cwd_file


def test_lint_discovers_root_with_configured_markers(tmp_path: Path) -> None:
    project, source, cwd_file = _workspace(tmp_path)
    result = runner.invoke(app, ["lint", str(source), "--no-color", "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert cwd_file.read_text(encoding="utf-8").strip() == str(project.resolve())
    assert "[debug]" not in result.output


def test_verbose_output_setting_enables_debug_lines(tmp_path: Path) -> None:
    project, source, _ = _workspace(tmp_path, extra="\n[output]\nverbose = true\n")
    result = runner.invoke(app, ["lint", str(source), "--no-color", "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert f"[debug] root={project.resolve()}" in result.output
