"""The `run` command."""

from __future__ import annotations

from bevy_cli.bin_target import select_run_binary
from bevy_cli.cargo_args import run_command
from bevy_cli.config import CliConfig
from bevy_cli.metadata import metadata_with_args
from bevy_cli.run_args import RunArgs
from bevy_cli.web_run import run_web


def run(args: RunArgs) -> None:
    """Run the app natively, or in the browser when web arguments are given."""
    metadata = metadata_with_args(["--no-deps"])

    bin_target = select_run_binary(
        metadata,
        args.cargo_args.package_args.package,
        args.cargo_args.target_args.bin,
        args.cargo_args.target_args.example,
        args.target(),
        args.profile(),
    )

    config = CliConfig.for_package(metadata, bin_target.package, True, args.is_release())
    args.apply_config(config)

    if args.is_web():
        run_web(args, metadata, bin_target)
        return

    # Native builds are run through `cargo run`.
    run_command().args(args.cargo_args_builder()).ensure_status()