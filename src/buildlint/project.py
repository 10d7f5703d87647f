# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the Gradle project owning a source file and its build executable."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable, Sequence
from itertools import chain
from pathlib import Path
from typing import Final

from .config import LintConfig, has_config, load_config

WRAPPER_NAME: Final[str] = "gradlew"


class ProjectRootError(LookupError):
    """Raised when no project root can be found for a source file."""


class ToolNotFoundError(FileNotFoundError):
    """Raised when no usable build executable exists for a project."""


def _iter_candidates(start: Path) -> Iterable[Path]:
    """Yield unique directories from ``start`` up to the filesystem root."""

    seen: set[Path] = set()
    for candidate in chain([start], start.parents):
        resolved = candidate.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        yield resolved


def _nearest_with(start: Path, markers: Sequence[str]) -> Path | None:
    for candidate in _iter_candidates(start):
        if any((candidate / marker).exists() for marker in markers):
            return candidate
    return None


def find_project_root(path: Path, config: LintConfig | None = None) -> Path | None:
    """Return the build root for ``path``, or ``None`` when nothing matches.

    The nearest directory holding a root marker (wrapper or settings file)
    wins; otherwise the nearest directory with a build script is used.
    """

    cfg = config or LintConfig()
    start = Path(path).expanduser()
    if not start.is_dir():
        start = start.parent
    return _nearest_with(start, cfg.root_markers) or _nearest_with(start, cfg.fallback_markers)


def require_project_root(path: Path, config: LintConfig | None = None) -> Path:
    """Return :func:`find_project_root` or raise :class:`ProjectRootError`."""

    root = find_project_root(path, config)
    if root is None:
        raise ProjectRootError(f"No Gradle project found above {path}")
    return root


def discover_project_root(path: Path) -> tuple[Path, LintConfig]:
    """Return the build root for ``path`` together with the settings that located it.

    The nearest ancestor carrying buildlint settings supplies the root and
    fallback markers used for the search; without one the defaults apply.

    Raises:
        ConfigError: When the nearest settings file is invalid.
        ProjectRootError: When no directory matches the markers.
    """

    start = Path(path).expanduser()
    if not start.is_dir():
        start = start.parent
    config = LintConfig()
    for candidate in _iter_candidates(start):
        if has_config(candidate):
            config = load_config(candidate)
            break
    return require_project_root(path, config), config


def resolve_gradle_executable(root: Path, config: LintConfig | None = None) -> Path:
    """Return the absolute build executable for ``root``.

    The project wrapper is preferred when enabled and executable; otherwise
    the configured executable is looked up on ``PATH``.

    Raises:
        ToolNotFoundError: When neither option is available.
    """

    cfg = config or LintConfig()
    wrapper = root / WRAPPER_NAME
    if cfg.use_wrapper and wrapper.is_file() and os.access(wrapper, os.X_OK):
        return wrapper.resolve()
    configured = Path(cfg.gradle_executable).expanduser()
    if configured.is_absolute():
        if configured.is_file():
            return configured
        raise ToolNotFoundError(f"Configured build executable '{configured}' does not exist")
    found = shutil.which(cfg.gradle_executable)
    if found is None:
        raise ToolNotFoundError(f"Build executable '{cfg.gradle_executable}' was not found on PATH")
    return Path(found).resolve()


__all__ = [
    "ProjectRootError",
    "ToolNotFoundError",
    "WRAPPER_NAME",
    "discover_project_root",
    "find_project_root",
    "require_project_root",
    "resolve_gradle_executable",
]
