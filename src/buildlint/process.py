# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` spawning for build tool runs."""

from __future__ import annotations

import os
import shutil
import signal

# Bandit: subprocess usage is intentional; commands are argument lists and
# never pass through a shell.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from contextlib import suppress
from pathlib import Path


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Return ``args`` with the executable resolved to an absolute path.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def spawn_merged(
    args: Sequence[str],
    *,
    cwd: Path,
    env: Mapping[str, str] | None = None,
) -> subprocess.Popen[str]:
    """Start ``args`` without waiting, merging stderr into stdout.

    Stdin is closed so a build tool never blocks waiting for input.

    Raises:
        OSError: When the process cannot be started.
        ValueError: If no arguments are provided.
    """

    normalized = _normalize_args(args)
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = os.environ.copy()
        merged_env.update(env)
    # Bandit: arguments are passed as a list without shell expansion.
    return subprocess.Popen(  # nosec B603
        normalized,
        cwd=str(cwd),
        env=merged_env,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
        start_new_session=os.name == "posix",
    )


def kill_process(process: subprocess.Popen[str]) -> None:
    """Forcibly stop ``process`` and any children sharing its process group.

    Raises:
        OSError: When the signal cannot be delivered.
    """

    if process.poll() is not None:
        return
    if os.name == "posix":
        # The group is already gone once every member has exited.
        with suppress(ProcessLookupError):
            os.killpg(process.pid, signal.SIGKILL)
        return
    process.kill()


__all__ = ["kill_process", "spawn_merged"]
