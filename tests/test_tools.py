import subprocess
import sys
from pathlib import Path
from unittest import mock

import pytest
import semver

from bevy_cli.bin_target import BinTarget
from bevy_cli.metadata import Package
from bevy_cli.tools import (
    InstallAborted,
    confirm,
    install_if_needed,
    install_target_if_needed,
    is_installed,
    is_target_installed,
    optimize_wasm,
    rustup_program,
    wasm_bindgen_bundle,
    wasm_bindgen_cli_version,
)


class FakeRun:
    """Stands in for subprocess.run, recording each argv."""

    def __init__(self, outputs=None, missing=()):
        self.calls = []
        self.outputs = outputs or {}
        self.missing = set(missing)

    def __call__(self, argv, **kwargs):
        self.calls.append(list(argv))
        if argv[0] in self.missing:
            raise FileNotFoundError(argv[0])
        stdout = self.outputs.get(tuple(argv), b"")
        return subprocess.CompletedProcess(argv, 0, stdout=stdout, stderr=b"")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("BEVY_CLI_CARGO", raising=False)
    monkeypatch.delenv("BEVY_CLI_RUSTUP", raising=False)


def _bin_target(directory):
    package = Package(name="game", version=semver.Version.parse("0.1.0"), id="game")
    return BinTarget(package=package, artifact_directory=Path(directory), bin_name="game")


def test_rustup_program_env_override(monkeypatch):
    assert rustup_program() == "rustup"
    monkeypatch.setenv("BEVY_CLI_RUSTUP", "my-rustup")
    assert rustup_program() == "my-rustup"


def test_wasm_bindgen_cli_version():
    assert wasm_bindgen_cli_version(b"wasm-bindgen 0.2.99\n") == semver.Version.parse("0.2.99")


def test_wasm_bindgen_cli_version_errors():
    with pytest.raises(ValueError):
        wasm_bindgen_cli_version(b"wasm-bindgen")
    with pytest.raises(ValueError):
        wasm_bindgen_cli_version(b"wasm-bindgen notaversion")


def test_is_installed_missing_program():
    assert is_installed("definitely-not-a-real-program-xyz") is None


def test_is_installed_returns_version_output():
    assert is_installed(sys.executable).startswith(b"Python")


def test_is_target_installed():
    fake = FakeRun(
        outputs={
            ("rustup", "target", "list"): b"wasm32-unknown-unknown (installed)\n"
            b"x86_64-unknown-linux-gnu\n"
        }
    )
    with mock.patch("subprocess.run", fake):
        assert is_target_installed("wasm32-unknown-unknown") is True
        assert is_target_installed("x86_64-unknown-linux-gnu") is False


def test_install_target_silently():
    fake = FakeRun()
    with mock.patch("subprocess.run", fake):
        result = install_target_if_needed("wasm32-unknown-unknown", True)
    assert result is None
    assert fake.calls[-1] == ["rustup", "target", "add", "wasm32-unknown-unknown"]


def test_install_target_declined():
    fake = FakeRun()
    with mock.patch("subprocess.run", fake), mock.patch("builtins.input", return_value="n"):
        with pytest.raises(InstallAborted):
            install_target_if_needed("wasm32-unknown-unknown", False)
    assert ["rustup", "target", "add", "wasm32-unknown-unknown"] not in fake.calls


def test_install_target_skipped_without_rustup():
    fake = FakeRun(missing={"rustup"})
    with mock.patch("subprocess.run", fake):
        result = install_target_if_needed("wasm32-unknown-unknown", True)
    assert result is None
    assert fake.calls == [["rustup", "--version"]]


def test_install_if_needed_missing_program():
    fake = FakeRun(missing={"wasm-opt"})
    with mock.patch("subprocess.run", fake):
        assert install_if_needed("wasm-opt", "wasm-opt", None, True) is True
    assert fake.calls[-1] == ["cargo", "install", "wasm-opt"]


def test_install_if_needed_present_without_version():
    fake = FakeRun()
    with mock.patch("subprocess.run", fake):
        assert install_if_needed("wasm-opt", "wasm-opt", None, True) is False
    assert all(call[0] != "cargo" for call in fake.calls)


def test_install_if_needed_wasm_bindgen_versions():
    outputs = {("wasm-bindgen", "--version"): b"wasm-bindgen 0.2.99"}
    fake = FakeRun(outputs=outputs)
    with mock.patch("subprocess.run", fake):
        assert install_if_needed("wasm-bindgen", "wasm-bindgen-cli", "0.2.99", True) is False
        assert install_if_needed("wasm-bindgen", "wasm-bindgen-cli", "0.2.100", True) is True
    assert fake.calls[-1] == ["cargo", "install", "wasm-bindgen-cli", "--version", "0.2.100"]


def test_install_if_needed_declined():
    fake = FakeRun(missing={"wasm-opt"})
    with mock.patch("subprocess.run", fake), mock.patch("builtins.input", return_value="no"):
        with pytest.raises(InstallAborted):
            install_if_needed("wasm-opt", "wasm-opt", None, False)


def test_confirm_repeats_until_answer():
    with mock.patch("builtins.input", side_effect=["maybe", "y"]):
        assert confirm("Install?") is True


def test_confirm_without_terminal():
    with mock.patch("builtins.input", side_effect=EOFError):
        with pytest.raises(InstallAborted, match="--yes"):
            confirm("Install?")


def test_wasm_bindgen_bundle_arguments(tmp_path):
    fake = FakeRun()
    with mock.patch("subprocess.run", fake):
        wasm_bindgen_bundle(_bin_target(tmp_path))
    assert fake.calls == [
        [
            "wasm-bindgen",
            "--no-typescript",
            "--out-name",
            "game",
            "--out-dir",
            str(tmp_path),
            "--target",
            "web",
            str(tmp_path / "game.wasm"),
        ]
    ]


def test_optimize_wasm(tmp_path):
    wasm = tmp_path / "game_bg.wasm"
    wasm.write_bytes(b"\0" * 100)

    def shrink(argv, **kwargs):
        Path(argv[-1]).write_bytes(b"\0" * 40)
        return subprocess.CompletedProcess(argv, 0)

    with mock.patch("subprocess.run", side_effect=shrink) as run:
        optimize_wasm(_bin_target(tmp_path))
    assert run.call_args[0][0] == ["wasm-opt", "--strip-debug", "-Os", "-o", str(wasm), str(wasm)]
    assert wasm.stat().st_size < 100


def test_optimize_wasm_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        optimize_wasm(_bin_target(tmp_path))