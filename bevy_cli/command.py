"""Running external command-line programs."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Iterable

logger = logging.getLogger("bevy_cli")

#: A log level below DEBUG, for very chatty commands.
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class CommandError(RuntimeError):
    """An external command could not be run or did not succeed."""

    def __init__(self, message: str, program: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.program = program
        self.returncode = returncode


class CommandExt:
    """A command to run as a child process, logging what it runs."""

    def __init__(self, program: str | os.PathLike[str]) -> None:
        self._program = os.fspath(program)
        self._args: list[str] = []
        self._log_level = logging.DEBUG

    def arg(self, arg: str | os.PathLike[str]) -> CommandExt:
        """Add one argument."""
        self._args.append(os.fspath(arg))
        return self

    def args(self, args: Iterable[str | os.PathLike[str]]) -> CommandExt:
        """Add several arguments."""
        self._args.extend(os.fspath(arg) for arg in args)
        return self

    def log_level(self, level: int) -> CommandExt:
        """Set the level at which the command line is logged."""
        self._log_level = level
        return self

    def _command_line(self) -> str:
        return f"{self._program} {' '.join(self._args)}"

    def _argv(self) -> list[str]:
        return [self._program, *self._args]

    def ensure_status(self) -> int:
        """Run the command, waiting for it; raise CommandError unless it succeeds."""
        logger.log(self._log_level, "Running: `%s`", self._command_line())
        try:
            completed = subprocess.run(self._argv(), check=False)
        except OSError as error:
            raise CommandError(
                f"failed to run {self._program}: {error}", self._program
            ) from error
        if completed.returncode != 0:
            raise CommandError(
                f"Command {self._program} exited with status code {completed.returncode}",
                self._program,
                completed.returncode,
            )
        return completed.returncode

    def output(self) -> subprocess.CompletedProcess[bytes]:
        """Run the command, waiting for it and collecting all of its output."""
        logger.log(self._log_level, "Running: `%s`", self._command_line())
        try:
            return subprocess.run(self._argv(), capture_output=True, check=False)
        except OSError as error:
            raise CommandError(
                f"failed to run {self._program}: {error}", self._program
            ) from error