"""Running the `bevy_lint` tool."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from pathlib import Path

from bevy_cli.command import CommandExt


class LintError(RuntimeError):
    """`bevy_lint` could not be found."""


def _current_executable() -> Path:
    program = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
    return Path(program).absolute()


def lint(args: Iterable[str]) -> None:
    """Run `bevy_lint` with the given arguments.

    Raises CommandError if it exits with a non-zero code.
    """
    CommandExt(find_bevy_lint()).args(list(args)).ensure_status()


def find_bevy_lint() -> Path:
    """Find `bevy_lint` next to the current executable; the PATH is not searched."""
    name = "bevy_lint.exe" if os.name == "nt" else "bevy_lint"
    path = _current_executable().parent / name
    if not path.exists():
        raise LintError(
            f"`bevy_lint` could not be found at {path}. "
            "Please install `bevy_lint` or run `cargo build -p bevy_lint` first!"
        )
    return path.resolve(strict=True)