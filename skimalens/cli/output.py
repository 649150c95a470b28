"""Terminal output helpers for the skimalens CLI.

Styling is plain ANSI. It is switched off per stream: stdout and stderr are
checked separately, and ``NO_COLOR`` disables it everywhere.
"""

from __future__ import annotations

import os
import shutil
import sys
from typing import TextIO

_STYLES = {
    "bold": "1",
    "dim": "2",
    "red": "31",
    "green": "32",
    "yellow": "33",
    "cyan": "36",
}

_RULE_WIDTH = 60


def _color_enabled(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def style(text: str, name: str, stream: TextIO | None = None) -> str:
    """Wrap *text* in the ANSI code called *name* if *stream* is a colour TTY."""
    if not _color_enabled(stream or sys.stdout):
        return text
    return f"\033[{_STYLES[name]}m{text}\033[0m"


def bold(text: str) -> str:
    return style(text, "bold")


def dim(text: str) -> str:
    return style(text, "dim")


def green(text: str) -> str:
    return style(text, "green")


def cyan(text: str) -> str:
    return style(text, "cyan")


# ── Status lines ────────────────────────────────────────────────────


def header(title: str) -> None:
    print()
    print(bold(title))


def success(msg: str) -> None:
    print(f"  {green('✓')} {msg}")


def warn(msg: str) -> None:
    print(f"  {style('!', 'yellow')} {msg}")


def error(msg: str) -> None:
    mark = style("✗", "red", sys.stderr)
    print(f"  {mark} {msg}", file=sys.stderr)


def info(msg: str) -> None:
    print(f"  {msg}")


def kv(key: str, value: object, indent: int = 2) -> None:
    """Aligned ``key:  value`` line."""
    print(" " * indent + f"{dim(f'{key}:')}  {value}")


def rule() -> None:
    width = min(shutil.get_terminal_size((_RULE_WIDTH, 20)).columns, _RULE_WIDTH)
    print(dim("─" * width))


def next_step(command: str, description: str = "") -> None:
    line = f"    {cyan(command)}"
    if description:
        line += f"  {dim(description)}"
    print(line)


# ── Conversation rendering ──────────────────────────────────────────


def message(speaker: str, when: str, text: str, human: bool) -> None:
    """One timeline entry: coloured speaker and time, then the text indented."""
    label = green(speaker) if human else cyan(speaker)
    print(f"  {bold(label)} {dim(when)}")
    for line in text.splitlines() or [""]:
        print(f"    {line}" if line else "")


def banner() -> None:
    print(bold("skimalens") + dim(" · Claude and ChatGPT conversation viewer and exporter"))
