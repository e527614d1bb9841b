"""The Bevy CLI configuration read from `package.metadata.bevy_cli`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bevy_cli.metadata import Metadata, Package


class ConfigError(ValueError):
    """The CLI configuration in the package metadata is malformed."""


def _get(value: Any, key: str) -> Any:
    """Look up `key` if `value` is a table, otherwise return None."""
    if isinstance(value, dict):
        return value.get(key)
    return None


@dataclass
class CliConfig:
    """Build options configured for a package."""

    target: str | None = None
    features: list[str] = field(default_factory=list)
    default_features: bool | None = None

    def use_default_features(self) -> bool:
        """Whether to enable default features; true unless configured otherwise."""
        return True if self.default_features is None else self.default_features

    @classmethod
    def for_package(
        cls, metadata: Metadata, package: Package, is_web: bool, is_release: bool
    ) -> CliConfig:
        """Determine the config defined in the given package."""
        package_metadata = next(
            (current.metadata for current in metadata.packages if current == package),
            None,
        )
        if package_metadata is None and package not in metadata.packages:
            return cls()
        return cls.merged_from_metadata(
            _get(package_metadata, "bevy_cli"), is_web, is_release
        )

    @classmethod
    def merged_from_metadata(
        cls, cli_metadata: Any, is_web: bool, is_release: bool
    ) -> CliConfig:
        """Merge the base, profile, platform and platform-profile configs."""
        profile = "release" if is_release else "dev"
        platform = "web" if is_web else "native"

        profile_metadata = _get(cli_metadata, profile)
        platform_metadata = _get(cli_metadata, platform)
        platform_profile_metadata = _get(platform_metadata, profile)

        layers = [
            (cli_metadata, "package.metadata.bevy_cli"),
            (profile_metadata, f"package.metadata.bevy_cli.{profile}"),
            (platform_metadata, f"package.metadata.bevy_cli.{platform}"),
            (
                platform_profile_metadata,
                f"package.metadata.bevy_cli.{platform}.{profile}",
            ),
        ]

        config = cls()
        for layer, location in layers:
            try:
                specific = cls.from_specific_metadata(layer)
            except ConfigError as error:
                raise ConfigError(f"failed to parse {location}: {error}") from error
            config = config.overwrite(specific)
        return config

    @classmethod
    def from_specific_metadata(cls, metadata: Any) -> CliConfig:
        """Build a config from a single table of the metadata."""
        if metadata is None:
            return cls()
        if not isinstance(metadata, dict):
            raise ConfigError("Bevy CLI config must be a table")
        return cls(
            target=extract_target(metadata),
            features=extract_features(metadata),
            default_features=extract_default_features(metadata),
        )

    def overwrite(self, other: CliConfig) -> CliConfig:
        """Merge `other` into this config; its values take precedence.

        Features are additive.
        """
        return CliConfig(
            target=other.target if other.target is not None else self.target,
            features=[*self.features, *other.features],
            default_features=(
                other.default_features
                if other.default_features is not None
                else self.default_features
            ),
        )


def extract_target(cli_metadata: dict[str, Any]) -> str | None:
    """The target platform in a CLI metadata table."""
    target = cli_metadata.get("target")
    if target is None:
        return None
    if isinstance(target, str):
        return target
    raise ConfigError("target must be a string")


def extract_features(cli_metadata: dict[str, Any]) -> list[str]:
    """The list of features in a CLI metadata table."""
    features = cli_metadata.get("features")
    if features is None:
        return []
    if not isinstance(features, list):
        raise ConfigError("features must be an array")
    if not all(isinstance(feature, str) for feature in features):
        raise ConfigError("each feature must be a string")
    return list(features)


def extract_default_features(cli_metadata: dict[str, Any]) -> bool | None:
    """Whether default features are enabled in a CLI metadata table."""
    default_features = cli_metadata.get("default_features")
    if default_features is None:
        return None
    if isinstance(default_features, bool):
        return default_features
    raise ConfigError("default_features must be a boolean")