# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import sys
from typing import Literal

from rich.console import Console
from rich.text import Text

from .severity import Severity

_CONSOLES: dict[tuple[bool, bool, bool], Console] = {}

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
}


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a cached Rich console configured for ``color`` and ``emoji``."""

    tty = detect_tty()
    key = (color, emoji, tty)
    if key not in _CONSOLES:
        color_system: Literal["auto", "standard", "256", "truecolor", "windows"] | None = (
            "auto" if color and tty else None
        )
        _CONSOLES[key] = Console(
            color_system=color_system,
            no_color=not (color and tty),
            emoji=emoji,
            highlight=False,
            soft_wrap=True,
        )
    return _CONSOLES[key]


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(msg: str, *, style: str | None, use_emoji: bool, use_color: bool | None = None) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def diagnostic(location: str, severity: Severity, message: str, *, use_color: bool | None = None) -> None:
    """Print one ``location: severity: message`` diagnostic line."""

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=False)
    text = Text(f"{location}: ")
    text.append(severity.value, style=SEVERITY_STYLES[severity] if color_enabled else None)
    text.append(f": {message}")
    console.print(text)


__all__ = ["detect_tty", "diagnostic", "emoji", "fail", "get_console", "info", "ok", "warn"]
