"""Arguments of the `run` command."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field

from bevy_cli.arg_builder import ArgBuilder
from bevy_cli.cargo_args import (
    CargoBuildArgs,
    CargoPackageBuildArgs,
    CargoRunArgs,
    CargoTargetBuildArgs,
)
from bevy_cli.config import CliConfig

logger = logging.getLogger("bevy_cli")


@dataclass
class RunWebArgs:
    """Options for running the app in the browser."""

    port: int = 4000
    open: bool = False
    create_packed_bundle: bool = False
    headers: list[str] = field(default_factory=list)


@dataclass
class RunArgs:
    """Arguments for running the app; `web` is set to run it in the browser."""

    web: RunWebArgs | None = None
    skip_prompts: bool = False
    cargo_args: CargoRunArgs = field(default_factory=CargoRunArgs)

    def is_web(self) -> bool:
        """Whether to run the app in the browser."""
        return self.web is not None

    def is_release(self) -> bool:
        """Whether to build with optimizations."""
        return self.cargo_args.compilation_args.is_release

    def profile(self) -> str:
        """The profile used to compile the app."""
        return self.cargo_args.compilation_args.resolved_profile(self.is_web())

    def target(self) -> str | None:
        """The targeted platform."""
        return self.cargo_args.compilation_args.resolved_target(self.is_web())

    def cargo_args_builder(self) -> ArgBuilder:
        """Arguments for `cargo`."""
        return self.cargo_args.args_builder(self.is_web())

    def apply_config(self, config: CliConfig) -> None:
        """Apply the config beneath the command-line arguments, which take precedence."""
        logger.debug("Using config %r", config)
        compilation = self.cargo_args.compilation_args
        if compilation.target is None:
            compilation.target = config.target
        features = self.cargo_args.feature_args
        features.features.extend(config.features)
        if features.no_default_features is None:
            features.no_default_features = not config.use_default_features()

    def to_build_args(self) -> CargoBuildArgs:
        """The equivalent `cargo build` arguments, independent of this object."""
        run = copy.deepcopy(self.cargo_args)
        return CargoBuildArgs(
            common_args=run.common_args,
            package_args=CargoPackageBuildArgs(package=run.package_args.package),
            target_args=CargoTargetBuildArgs(
                bin=run.target_args.bin, example=run.target_args.example
            ),
            feature_args=run.feature_args,
            compilation_args=run.compilation_args,
            manifest_args=run.manifest_args,
        )