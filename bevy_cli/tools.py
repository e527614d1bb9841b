"""Installing and running the helper tools: rustup, wasm-bindgen and wasm-opt."""

from __future__ import annotations

import logging
import os
import time

import semver

from bevy_cli.arg_builder import ArgBuilder
from bevy_cli.bin_target import BinTarget
from bevy_cli.cargo_args import cargo_program
from bevy_cli.command import CommandError, CommandExt

logger = logging.getLogger("bevy_cli")

WASM_BINDGEN_PACKAGE = "wasm-bindgen-cli"
WASM_BINDGEN_PROGRAM = "wasm-bindgen"
WASM_OPT_PACKAGE = "wasm-opt"
WASM_OPT_PROGRAM = "wasm-opt"


class InstallAborted(RuntimeError):
    """A required installation was declined or could not be confirmed."""


def confirm(prompt: str) -> bool:
    """Ask a yes/no question on the terminal."""
    while True:
        try:
            answer = input(f"{prompt} [y/n] ").strip().lower()
        except EOFError as error:
            raise InstallAborted(
                "failed to show interactive prompt, "
                "try using `--yes` to confirm automatically"
            ) from error
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False


def rustup_program() -> str:
    """The rustup program, overridable with the `BEVY_CLI_RUSTUP` variable."""
    return os.environ.get("BEVY_CLI_RUSTUP", "rustup")


def is_target_installed(target: str) -> bool:
    """Whether the compilation target is installed according to rustup."""
    try:
        output = CommandExt(rustup_program()).arg("target").arg("list").output()
    except CommandError:
        return False
    listing = output.stdout.decode("utf-8", errors="replace")
    return any(target in line and "(installed)" in line for line in listing.splitlines())


def install_target_if_needed(target: str, silent: bool) -> None:
    """Install a compilation target with rustup unless it is present."""
    if is_installed(rustup_program()) is None:
        # Without rustup nothing can be checked; hope for the best.
        return
    if is_target_installed(target):
        return
    if not silent and not confirm(
        f"Compilation target `{target}` is missing, should I install it for you?"
    ):
        raise InstallAborted(f"User does not want to install target `{target}`.")

    logger.info("Installing missing target: `%s`", target)
    try:
        CommandExt(rustup_program()).arg("target").arg("add").arg(target).ensure_status()
    except CommandError as error:
        raise CommandError(
            f"failed to install target `{target}`: {error}",
            error.program,
            error.returncode,
        ) from error


def is_installed(program: str | os.PathLike[str]) -> bytes | None:
    """The output of `program --version`, or None if it cannot be run."""
    try:
        return CommandExt(program).arg("--version").output().stdout
    except CommandError:
        return None


def install_if_needed(
    program: str, package: str, package_version: str | None, skip_prompts: bool
) -> bool:
    """Install `package` with cargo unless `program` is present.

    Returns True if an installation took place.
    """
    prompt: str | None = None

    stdout = is_installed(program)
    if stdout is not None:
        if package_version is None:
            return False
        # wasm-bindgen-cli must match the wasm-bindgen library version exactly.
        if package == WASM_BINDGEN_PACKAGE:
            version = wasm_bindgen_cli_version(stdout)
            desired_version = semver.Version.parse(package_version)
            if version == desired_version:
                return False
            prompt = (
                f"`{program}:{version}` is installed, but version "
                f"`{desired_version}` is required. Install and replace?"
            )

    if not skip_prompts and not confirm(
        prompt or f"`{program}` is missing, should I install it for you?"
    ):
        raise InstallAborted(f"User does not want to install `{package}`.")

    command = CommandExt(cargo_program()).arg("install").arg(package)
    if package_version is not None:
        command.arg("--version").arg(package_version)
    command.ensure_status()
    return True


def wasm_bindgen_bundle(bin_target: BinTarget) -> None:
    """Create the JavaScript bindings for the Wasm build."""
    original_wasm = bin_target.artifact_directory / f"{bin_target.bin_name}.wasm"
    args = (
        ArgBuilder()
        .arg("--no-typescript")
        .add_with_value("--out-name", bin_target.bin_name)
        .add_with_value("--out-dir", str(bin_target.artifact_directory))
        .add_with_value("--target", "web")
        .arg(str(original_wasm))
    )
    CommandExt(WASM_BINDGEN_PROGRAM).args(args).ensure_status()


def wasm_bindgen_cli_version(stdout: bytes) -> semver.Version:
    """Parse the output of `wasm-bindgen --version`."""
    text = stdout.decode("utf-8", errors="replace")
    parts = text.split()
    if len(parts) < 2:
        raise ValueError(
            f"unexpected output format: {text}, "
            "expected format to be: `wasm-bindgen <version>`"
        )
    return semver.Version.parse(parts[1])


def optimize_wasm(bin_target: BinTarget) -> None:
    """Optimize the bundled Wasm binary with wasm-opt."""
    path = bin_target.artifact_directory / f"{bin_target.bin_name}_bg.wasm"
    logger.info("Optimizing with wasm-opt...")

    start = time.monotonic()
    size_before = path.stat().st_size

    (
        CommandExt(WASM_OPT_PROGRAM)
        .args(["--strip-debug", "-Os", "-o", path, path])
        .ensure_status()
    )

    size_after = path.stat().st_size
    reduction = 1.0 - size_after / size_before if size_before else 0.0
    logger.info(
        "Finished in %.2fs. Size reduced by %.0f%%.",
        time.monotonic() - start,
        reduction * 100,
    )