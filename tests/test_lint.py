import stat
import sys

import pytest

from bevy_cli.command import CommandError
from bevy_cli.lint import LintError, find_bevy_lint, lint


def _install_fake_lint(tmp_path, exit_code):
    args_file = tmp_path / "args.txt"
    script = tmp_path / "bevy_lint"
    script.write_text(
        f"#!/bin/sh\nprintf '%s\\n' \"$@\" > \"{args_file}\"\nexit {exit_code}\n"
    )
    script.chmod(script.stat().st_mode | stat.S_IEXEC)
    return script, args_file


def test_find_bevy_lint_missing_raises(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", [str(tmp_path / "bevy")])
    with pytest.raises(LintError, match="could not be found"):
        find_bevy_lint()


def test_find_bevy_lint_next_to_executable(tmp_path, monkeypatch):
    script, _ = _install_fake_lint(tmp_path, 0)
    monkeypatch.setattr(sys, "argv", [str(tmp_path / "bevy")])
    assert find_bevy_lint() == script.resolve()


def test_lint_passes_arguments(tmp_path, monkeypatch):
    _, args_file = _install_fake_lint(tmp_path, 0)
    monkeypatch.setattr(sys, "argv", [str(tmp_path / "bevy")])
    result = lint(["--workspace", "--fix"])
    assert result is None
    assert args_file.read_text().split() == ["--workspace", "--fix"]


def test_lint_failure_raises(tmp_path, monkeypatch):
    _install_fake_lint(tmp_path, 1)
    monkeypatch.setattr(sys, "argv", [str(tmp_path / "bevy")])
    with pytest.raises(CommandError) as info:
        lint([])
    assert info.value.returncode == 1