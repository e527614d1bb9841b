import builtins
import json
import os
import subprocess

import pytest

from bevy_cli.bin_target import BinTarget
from bevy_cli.cargo_args import CargoBuildArgs, CargoCommonArgs
from bevy_cli.metadata import Metadata, Package
from bevy_cli.tools import InstallAborted
from bevy_cli.web_build import build_web, ensure_web_setup
from bevy_cli.web_bundle import LinkedBundle, PackedBundle


def _package(name, version, targets, default_run=None):
    return {
        "name": name,
        "version": version,
        "id": f"{name} {version}",
        "targets": [{"kind": [kind], "name": target} for target, kind in targets],
        "manifest_path": f"/ws/{name}/Cargo.toml",
        "default_run": default_run,
        "metadata": None,
    }


def _metadata_json(tmp_path, include_wasm_bindgen=True):
    packages = [_package("game", "0.1.0", [("game", "bin")])]
    if include_wasm_bindgen:
        packages.append(_package("wasm-bindgen", "0.2.99", [("wasm_bindgen", "lib")]))
    return {
        "packages": packages,
        "workspace_members": ["game 0.1.0"],
        "workspace_default_members": ["game 0.1.0"],
        "target_directory": str(tmp_path / "target"),
        "workspace_root": str(tmp_path),
        "metadata": None,
    }


class _FakeProcesses:
    def __init__(self, metadata_json, versions=None):
        self.metadata_json = metadata_json
        self.versions = versions or {}
        self.calls = []

    def __call__(self, argv, **kwargs):
        argv = list(argv)
        self.calls.append(argv)
        program = os.path.basename(argv[0])
        rest = argv[1:]
        stdout = b""
        if rest[:1] == ["metadata"]:
            stdout = json.dumps(self.metadata_json).encode()
        elif rest == ["--version"]:
            stdout = self.versions.get(program, f"{program} 0.2.99\n").encode()
        elif rest == ["target", "list"]:
            stdout = b"wasm32-unknown-unknown (installed)\n"
        return subprocess.CompletedProcess(argv, 0, stdout, b"")

    def calls_with(self, first_arg):
        return [call for call in self.calls if call[1:2] == [first_arg]]


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.delenv("BEVY_CLI_CARGO", raising=False)
    monkeypatch.delenv("BEVY_CLI_RUSTUP", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "Cargo.toml").write_text('[package]\nname = "game"\n', encoding="utf-8")
    return tmp_path


def _bin_target(tmp_path, data):
    return BinTarget(
        package=Package.from_json(data["packages"][0]),
        artifact_directory=tmp_path / "target" / "wasm32-unknown-unknown" / "web",
        bin_name="game",
    )


def test_ensure_web_setup_installs_nothing_when_ready(workspace, monkeypatch):
    fake = _FakeProcesses(_metadata_json(workspace))
    monkeypatch.setattr(subprocess, "run", fake)

    result = ensure_web_setup(True)

    assert result is None
    assert fake.calls_with("install") == []
    assert ["rustup", "target", "list"] in fake.calls


def test_ensure_web_setup_requires_wasm_bindgen(workspace, monkeypatch):
    fake = _FakeProcesses(_metadata_json(workspace, include_wasm_bindgen=False))
    monkeypatch.setattr(subprocess, "run", fake)

    with pytest.raises(LookupError, match="Failed to find wasm-bindgen"):
        ensure_web_setup(True)


def test_ensure_web_setup_replaces_mismatched_cli(workspace, monkeypatch):
    fake = _FakeProcesses(
        _metadata_json(workspace), versions={"wasm-bindgen": "wasm-bindgen 0.2.50\n"}
    )
    monkeypatch.setattr(subprocess, "run", fake)

    result = ensure_web_setup(True)

    assert result is None
    assert fake.calls_with("install") == [
        ["cargo", "install", "wasm-bindgen-cli", "--version", "0.2.99"]
    ]


def test_ensure_web_setup_aborts_when_declined(workspace, monkeypatch):
    fake = _FakeProcesses(
        _metadata_json(workspace), versions={"wasm-bindgen": "wasm-bindgen 0.2.50\n"}
    )
    monkeypatch.setattr(subprocess, "run", fake)
    monkeypatch.setattr(builtins, "input", lambda prompt: "n")

    with pytest.raises(InstallAborted):
        ensure_web_setup(False)
    assert fake.calls_with("install") == []


def test_build_web_compiles_and_links(workspace, monkeypatch):
    data = _metadata_json(workspace)
    fake = _FakeProcesses(data)
    monkeypatch.setattr(subprocess, "run", fake)
    cargo_args = CargoBuildArgs(common_args=CargoCommonArgs(config=["user=1"]))
    bin_target = _bin_target(workspace, data)

    bundle = build_web(cargo_args, True, False, Metadata.from_json(data), bin_target)

    assert isinstance(bundle, LinkedBundle)
    assert bundle.wasm_file_name == "game_bg.wasm"
    assert bundle.js_file_name == "game.js"

    (build_call,) = fake.calls_with("build")
    default_config = 'profile.web.inherits="dev"'
    assert default_config in build_call
    assert build_call.index(default_config) < build_call.index("user=1")
    assert build_call[build_call.index("--profile") + 1] == "web"
    assert build_call[build_call.index("--target") + 1] == "wasm32-unknown-unknown"

    bindgen_calls = [c for c in fake.calls if c[0] == "wasm-bindgen" and len(c) > 2]
    assert len(bindgen_calls) == 1
    assert bindgen_calls[0][bindgen_calls[0].index("--out-name") + 1] == "game"


def test_build_web_keeps_profiles_defined_in_manifest(workspace, monkeypatch):
    (workspace / "Cargo.toml").write_text(
        '[profile.web]\ninherits = "dev"\n[profile.web-release]\ninherits = "release"\n',
        encoding="utf-8",
    )
    data = _metadata_json(workspace)
    fake = _FakeProcesses(data)
    monkeypatch.setattr(subprocess, "run", fake)
    cargo_args = CargoBuildArgs()

    build_web(cargo_args, True, False, Metadata.from_json(data), _bin_target(workspace, data))

    assert cargo_args.common_args.config == []
    (build_call,) = fake.calls_with("build")
    assert "--config" not in build_call


def test_build_web_packs_bundle(workspace, monkeypatch):
    data = _metadata_json(workspace)
    fake = _FakeProcesses(data)
    monkeypatch.setattr(subprocess, "run", fake)
    bin_target = _bin_target(workspace, data)
    bin_target.artifact_directory.mkdir(parents=True)
    (bin_target.artifact_directory / "game_bg.wasm").write_bytes(b"\0asm")
    (bin_target.artifact_directory / "game.js").write_text("export {}", encoding="utf-8")

    bundle = build_web(CargoBuildArgs(), True, True, Metadata.from_json(data), bin_target)

    assert isinstance(bundle, PackedBundle)
    assert bundle.path == workspace / "target" / "bevy_web" / "web" / "game"
    assert (bundle.path / "build" / "game_bg.wasm").read_bytes() == b"\0asm"
    assert "./build/game.js" in (bundle.path / "index.html").read_text(encoding="utf-8")


def test_build_web_reports_missing_artifacts(workspace, monkeypatch):
    data = _metadata_json(workspace)
    monkeypatch.setattr(subprocess, "run", _FakeProcesses(data))

    with pytest.raises(OSError, match="Failed to create web bundle"):
        build_web(
            CargoBuildArgs(), True, True, Metadata.from_json(data), _bin_target(workspace, data)
        )