"""Default compilation profiles for web builds."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from bevy_cli.metadata import Metadata


def configure_default_web_profiles(metadata: Metadata) -> list[str]:
    """`--config` arguments that define the web profiles missing from the manifest."""
    manifest_path = Path(metadata.workspace_root) / "Cargo.toml"
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except OSError as error:
        raise OSError(f"failed to read workspace manifest: {error}") from error
    try:
        manifest = tomllib.loads(text)
    except tomllib.TOMLDecodeError as error:
        raise ValueError(f"failed to parse workspace manifest: {error}") from error

    args: list[str] = []
    if not is_profile_defined_in_manifest(manifest, "web"):
        # Optimized for fast iteration.
        args.extend(configure_profile("web", "dev", {}))
    if not is_profile_defined_in_manifest(manifest, "web-release"):
        # Optimized for run time performance and loading times.
        args.extend(
            configure_profile(
                "web-release",
                "release",
                {
                    # Optimize for size, greatly reducing loading times
                    "opt-level": "s",
                    # Remove debug information, reducing file size further
                    "strip": "debuginfo",
                },
            )
        )
    return args


def is_profile_defined_in_manifest(manifest: Mapping[str, Any], profile: str) -> bool:
    """Whether the manifest has a `[profile.<profile>]` entry."""
    profiles = manifest.get("profile")
    return isinstance(profiles, Mapping) and profiles.get(profile) is not None


def configure_profile(
    profile: str, inherits: str, config: Mapping[str, str]
) -> list[str]:
    """`--config` values for cargo that define a new compilation profile."""
    args = [f'profile.{profile}.inherits="{inherits}"']
    args.extend(f'profile.{profile}.{key}="{value}"' for key, value in config.items())
    return args