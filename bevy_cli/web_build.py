"""Building the app for use in the browser."""

from __future__ import annotations

import logging

from bevy_cli.bin_target import BinTarget
from bevy_cli.cargo_args import CargoBuildArgs, build_command
from bevy_cli.metadata import Metadata
from bevy_cli.metadata import metadata as load_metadata
from bevy_cli.profiles import configure_default_web_profiles
from bevy_cli.tools import (
    WASM_BINDGEN_PACKAGE,
    WASM_BINDGEN_PROGRAM,
    install_if_needed,
    install_target_if_needed,
    wasm_bindgen_bundle,
)
from bevy_cli.web_bundle import PackedBundle, WebBundle, create_web_bundle

logger = logging.getLogger("bevy_cli")

WASM_TARGET = "wasm32-unknown-unknown"


def build_web(
    cargo_args: CargoBuildArgs,
    skip_prompts: bool,
    create_packed_bundle: bool,
    metadata: Metadata,
    bin_target: BinTarget,
) -> WebBundle:
    """Build the app for the browser and bundle it.

    Installs the required tooling, sets up the default web profiles,
    compiles to Wasm, creates the JavaScript bindings and bundles the result.
    """
    ensure_web_setup(skip_prompts)

    # `--config` values are resolved left to right, so defaults come first.
    profile_args = configure_default_web_profiles(metadata)
    cargo_args.common_args.config = [*profile_args, *cargo_args.common_args.config]

    logger.info("Compiling to WebAssembly...")
    build_command().args(cargo_args.args_builder(True)).ensure_status()

    logger.info("Bundling JavaScript bindings...")
    wasm_bindgen_bundle(bin_target)

    profile = cargo_args.compilation_args.resolved_profile(True)
    try:
        web_bundle = create_web_bundle(metadata, profile, bin_target, create_packed_bundle)
    except OSError as error:
        raise OSError(f"Failed to create web bundle: {error}") from error

    if isinstance(web_bundle, PackedBundle):
        logger.info("Created bundle at file://%s", web_bundle.path)

    return web_bundle


def ensure_web_setup(skip_prompts: bool) -> None:
    """Make sure the Wasm target and a matching `wasm-bindgen-cli` are installed."""
    # The resolved dependency graph gives the exact `wasm-bindgen` version.
    workspace = load_metadata()
    wasm_bindgen_version = next(
        (
            str(package.version)
            for package in workspace.packages
            if package.name == "wasm-bindgen"
        ),
        None,
    )
    if wasm_bindgen_version is None:
        raise LookupError("Failed to find wasm-bindgen")

    install_target_if_needed(WASM_TARGET, skip_prompts)
    install_if_needed(
        WASM_BINDGEN_PROGRAM, WASM_BINDGEN_PACKAGE, wasm_bindgen_version, skip_prompts
    )