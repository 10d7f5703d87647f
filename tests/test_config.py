# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for layered configuration loading."""

from pathlib import Path

import pytest

from buildlint.config import ConfigError, LintConfig, load_config


def test_defaults_without_files(tmp_path: Path) -> None:
    config = load_config(tmp_path)
    assert config == LintConfig()
    assert config.gradle_executable == "gradle"
    assert config.output.emoji is True


def test_pyproject_then_dotfile_then_overrides(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.buildlint]\nextra-flags = ["--offline"]\nuse-wrapper = false\n\n'
        "[tool.buildlint.output]\nemoji = false\n",
        encoding="utf-8",
    )
    (tmp_path / ".buildlint.toml").write_text('kotlin_task = "compileDebugKotlin"\nuse_wrapper = true\n')
    config = load_config(tmp_path, overrides={"quiet": False})
    assert config.extra_flags == ["--offline"]
    assert config.use_wrapper is True
    assert config.kotlin_task == "compileDebugKotlin"
    assert config.output.emoji is False
    assert config.output.color is True
    assert config.quiet is False


def test_invalid_values_raise_config_error(tmp_path: Path) -> None:
    (tmp_path / ".buildlint.toml").write_text('extra_flags = "not-a-list"\n', encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_malformed_toml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".buildlint.toml").write_text("this is = = not toml", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_assignment_is_validated() -> None:
    config = LintConfig()
    with pytest.raises(ValueError):
        config.quiet = "sometimes"  # type: ignore[assignment]
