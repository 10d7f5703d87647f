# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and layered TOML loading for buildlint."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "buildlint"
CONFIG_FILENAME: Final[str] = ".buildlint.toml"


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or validated."""


class OutputConfig(BaseModel):
    """Configuration for controlling console output."""

    model_config = ConfigDict(validate_assignment=True)

    emoji: bool = True
    color: bool = True
    verbose: bool = False


class LintConfig(BaseModel):
    """Settings controlling how builds are located and invoked."""

    model_config = ConfigDict(validate_assignment=True)

    gradle_executable: str = "gradle"
    use_wrapper: bool = True
    quiet: bool = True
    plain_console: bool = True
    extra_flags: list[str] = Field(default_factory=list)
    kotlin_task: str | None = None
    java_task: str | None = None
    clean_when_clean: bool = True
    root_markers: list[str] = Field(
        default_factory=lambda: ["gradlew", "settings.gradle", "settings.gradle.kts"],
    )
    fallback_markers: list[str] = Field(
        default_factory=lambda: ["build.gradle", "build.gradle.kts"],
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result


def _normalise_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Accept ``kebab-case`` keys as used in TOML files."""

    normalised: dict[str, Any] = {}
    for key, value in payload.items():
        name = str(key).replace("-", "_")
        normalised[name] = _normalise_keys(value) if isinstance(value, Mapping) else value
    return normalised


def _read_toml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to read configuration at {path}: {exc}") from exc


def _pyproject_section(path: Path) -> dict[str, Any]:
    data = _read_toml(path)
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if not isinstance(section, Mapping):
        return {}
    return dict(section)


def has_config(directory: Path) -> bool:
    """Return ``True`` when ``directory`` carries buildlint settings of its own."""

    if (directory / CONFIG_FILENAME).is_file():
        return True
    return bool(_pyproject_section(directory / PYPROJECT_FILENAME))


def load_config(root: Path, *, overrides: Mapping[str, Any] | None = None) -> LintConfig:
    """Load configuration for ``root`` with layered precedence.

    Later layers win: built-in defaults, ``[tool.buildlint]`` in
    ``pyproject.toml``, ``.buildlint.toml`` and finally ``overrides``.

    Raises:
        ConfigError: When a file cannot be parsed or the merged data is invalid.
    """

    merged: dict[str, Any] = {}
    for fragment in (
        _pyproject_section(root / PYPROJECT_FILENAME),
        _read_toml(root / CONFIG_FILENAME),
        dict(overrides or {}),
    ):
        merged = _deep_merge(merged, _normalise_keys(fragment))
    try:
        return LintConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid buildlint configuration under {root}: {exc}") from exc


__all__ = ["CONFIG_FILENAME", "ConfigError", "LintConfig", "OutputConfig", "has_config", "load_config"]
