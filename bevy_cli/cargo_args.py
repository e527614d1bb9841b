"""Argument sets forwarded to `cargo build` and `cargo run`."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from bevy_cli.arg_builder import ArgBuilder
from bevy_cli.command import CommandExt


def cargo_program() -> str:
    """The cargo program, overridable with the `BEVY_CLI_CARGO` variable."""
    return os.environ.get("BEVY_CLI_CARGO", "cargo")


def build_command() -> CommandExt:
    """Create a command to run `cargo build`."""
    return CommandExt(cargo_program()).arg("build")


def run_command() -> CommandExt:
    """Create a command to run `cargo run`."""
    return CommandExt(cargo_program()).arg("run")


@dataclass
class CargoFeatureArgs:
    """Feature selection."""

    features: list[str] = field(default_factory=list)
    is_all_features: bool = False
    no_default_features: bool | None = None

    def is_no_default_features(self) -> bool:
        return bool(self.no_default_features)

    def args_builder(self) -> ArgBuilder:
        return (
            ArgBuilder()
            .add_value_list("--features", self.features)
            .add_flag_if("--all-features", self.is_all_features)
            .add_flag_if("--no-default-features", self.is_no_default_features())
        )


@dataclass
class CargoCompilationArgs:
    """Compilation options."""

    is_release: bool = False
    profile: str | None = None
    jobs: int | None = None
    is_keep_going: bool = False
    target: str | None = None
    target_dir: str | None = None

    def resolved_profile(self, is_web: bool) -> str:
        """The profile used to compile, from `--release` and `--profile`."""
        if self.profile is not None:
            return self.profile
        if is_web:
            return "web-release" if self.is_release else "web"
        return "release" if self.is_release else "dev"

    def resolved_target(self, is_web: bool) -> str | None:
        """The target platform; on the web it defaults to `wasm32-unknown-unknown`."""
        if is_web and self.target is None:
            return "wasm32-unknown-unknown"
        return self.target

    def args_builder(self, is_web: bool) -> ArgBuilder:
        return (
            ArgBuilder()
            .add_with_value("--profile", self.resolved_profile(is_web))
            .add_opt_value("--jobs", None if self.jobs is None else str(self.jobs))
            .add_flag_if("--keep-going", self.is_keep_going)
            .add_opt_value("--target", self.resolved_target(is_web))
            .add_opt_value("--target-dir", self.target_dir)
        )


@dataclass
class CargoManifestArgs:
    """Manifest options."""

    manifest_path: str | None = None
    ignore_rust_version: bool = False
    is_locked: bool = False
    is_offline: bool = False
    is_frozen: bool = False

    def args_builder(self) -> ArgBuilder:
        return (
            ArgBuilder()
            .add_opt_value("--manifest-path", self.manifest_path)
            .add_flag_if("--ignore-rust-version", self.ignore_rust_version)
            .add_flag_if("--locked", self.is_locked)
            .add_flag_if("--offline", self.is_offline)
            .add_flag_if("--frozen", self.is_frozen)
        )


@dataclass
class CargoCommonArgs:
    """Options common to cargo commands."""

    config: list[str] = field(default_factory=list)
    unstable_flags: list[str] = field(default_factory=list)

    def args_builder(self) -> ArgBuilder:
        return (
            ArgBuilder()
            .add_values_separately("--config", self.config)
            .add_values_separately("-Z", self.unstable_flags)
        )


@dataclass
class CargoPackageBuildArgs:
    """Package selection for `cargo build`."""

    package: str | None = None
    is_workspace: bool = False
    exclude: str | None = None

    def args_builder(self) -> ArgBuilder:
        return (
            ArgBuilder()
            .add_opt_value("--package", self.package)
            .add_flag_if("--workspace", self.is_workspace)
            .add_opt_value("--exclude", self.exclude)
        )


@dataclass
class CargoTargetBuildArgs:
    """Target selection for `cargo build`."""

    is_lib: bool = False
    is_bins: bool = False
    bin: str | None = None
    is_examples: bool = False
    example: str | None = None
    is_tests: bool = False
    test: str | None = None
    is_benches: bool = False
    bench: str | None = None
    is_all_targets: bool = False

    def args_builder(self) -> ArgBuilder:
        return (
            ArgBuilder()
            .add_flag_if("--lib", self.is_lib)
            .add_flag_if("--bins", self.is_bins)
            .add_opt_value("--bin", self.bin)
            .add_flag_if("--examples", self.is_examples)
            .add_opt_value("--example", self.example)
            .add_flag_if("--tests", self.is_tests)
            .add_opt_value("--test", self.test)
            .add_flag_if("--benches", self.is_benches)
            .add_opt_value("--bench", self.bench)
            .add_flag_if("--all-targets", self.is_all_targets)
        )


@dataclass
class CargoBuildArgs:
    """All arguments forwarded to `cargo build`."""

    common_args: CargoCommonArgs = field(default_factory=CargoCommonArgs)
    package_args: CargoPackageBuildArgs = field(default_factory=CargoPackageBuildArgs)
    target_args: CargoTargetBuildArgs = field(default_factory=CargoTargetBuildArgs)
    feature_args: CargoFeatureArgs = field(default_factory=CargoFeatureArgs)
    compilation_args: CargoCompilationArgs = field(default_factory=CargoCompilationArgs)
    manifest_args: CargoManifestArgs = field(default_factory=CargoManifestArgs)

    def args_builder(self, is_web: bool) -> ArgBuilder:
        return (
            ArgBuilder()
            .append(self.common_args.args_builder())
            .append(self.package_args.args_builder())
            .append(self.target_args.args_builder())
            .append(self.feature_args.args_builder())
            .append(self.compilation_args.args_builder(is_web))
            .append(self.manifest_args.args_builder())
        )


@dataclass
class CargoPackageRunArgs:
    """Package selection for `cargo run`."""

    package: str | None = None

    def args_builder(self) -> ArgBuilder:
        return ArgBuilder().add_opt_value("--package", self.package)


@dataclass
class CargoTargetRunArgs:
    """Target selection for `cargo run`."""

    bin: str | None = None
    example: str | None = None

    def args_builder(self) -> ArgBuilder:
        return (
            ArgBuilder()
            .add_opt_value("--bin", self.bin)
            .add_opt_value("--example", self.example)
        )


@dataclass
class CargoRunArgs:
    """All arguments forwarded to `cargo run`."""

    common_args: CargoCommonArgs = field(default_factory=CargoCommonArgs)
    package_args: CargoPackageRunArgs = field(default_factory=CargoPackageRunArgs)
    target_args: CargoTargetRunArgs = field(default_factory=CargoTargetRunArgs)
    feature_args: CargoFeatureArgs = field(default_factory=CargoFeatureArgs)
    compilation_args: CargoCompilationArgs = field(default_factory=CargoCompilationArgs)
    manifest_args: CargoManifestArgs = field(default_factory=CargoManifestArgs)

    def args_builder(self, is_web: bool) -> ArgBuilder:
        return (
            ArgBuilder()
            .append(self.common_args.args_builder())
            .append(self.package_args.args_builder())
            .append(self.target_args.args_builder())
            .append(self.feature_args.args_builder())
            .append(self.compilation_args.args_builder(is_web))
            .append(self.manifest_args.args_builder())
        )