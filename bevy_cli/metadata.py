"""Reading the output of `cargo metadata`."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import semver

from bevy_cli.cargo_args import cargo_program
from bevy_cli.command import TRACE, CommandExt


class TargetKind(str, Enum):
    """The kind of a Cargo target."""

    LIB = "lib"
    RLIB = "rlib"
    DYLIB = "dylib"
    PROC_MACRO = "proc-macro"
    BIN = "bin"
    EXAMPLE = "example"
    TEST = "test"
    BENCH = "bench"
    CUSTOM_BUILD = "custom-build"


class DependencyKind(str, Enum):
    """The kind of a dependency."""

    NORMAL = "normal"
    DEV = "dev"
    BUILD = "build"


def _parse_target_kind(value: str) -> TargetKind | str:
    try:
        return TargetKind(value)
    except ValueError:
        return value


def _parse_dependency_kind(value: str | None) -> DependencyKind | str:
    if value is None:
        return DependencyKind.NORMAL
    try:
        return DependencyKind(value)
    except ValueError:
        return value


@dataclass
class Target:
    """A Cargo target; unknown kinds are kept as plain strings."""

    kind: list[TargetKind | str]
    name: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Target:
        return cls(
            kind=[_parse_target_kind(kind) for kind in data["kind"]],
            name=data["name"],
        )


@dataclass
class Dependency:
    """A dependency declared by a package."""

    name: str
    req: str = "*"
    kind: DependencyKind | str = DependencyKind.NORMAL
    path: Path | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Dependency:
        path = data.get("path")
        return cls(
            name=data["name"],
            req=data.get("req") or "*",
            kind=_parse_dependency_kind(data.get("kind")),
            path=None if path is None else Path(path),
        )


@dataclass(eq=False)
class Package:
    """A package in the metadata; packages are equal when their ids are."""

    name: str
    version: semver.Version
    id: str
    targets: list[Target] = field(default_factory=list)
    manifest_path: Path = field(default_factory=Path)
    default_run: str | None = None
    metadata: Any = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Package:
        return cls(
            name=data["name"],
            version=semver.Version.parse(data["version"]),
            id=data["id"],
            targets=[Target.from_json(target) for target in data["targets"]],
            manifest_path=Path(data["manifest_path"]),
            default_run=data.get("default_run"),
            metadata=data["metadata"],
        )

    def has_bin(self) -> bool:
        """Whether the package has an executable binary."""
        return any(True for _ in self.bin_targets())

    def bin_targets(self) -> Iterator[Target]:
        """All binary targets of this package."""
        return (t for t in self.targets if TargetKind.BIN in t.kind)

    def example_targets(self) -> Iterator[Target]:
        """All example targets of this package."""
        return (t for t in self.targets if TargetKind.EXAMPLE in t.kind)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class Metadata:
    """Information about the current workspace."""

    packages: list[Package]
    workspace_members: list[str]
    workspace_default_members: list[str]
    target_directory: Path
    workspace_root: Path
    metadata: Any = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Metadata:
        return cls(
            packages=[Package.from_json(package) for package in data["packages"]],
            workspace_members=list(data["workspace_members"]),
            workspace_default_members=list(data["workspace_default_members"]),
            target_directory=Path(data["target_directory"]),
            workspace_root=Path(data["workspace_root"]),
            metadata=data["metadata"],
        )


def metadata_command() -> CommandExt:
    """Create a command to run `cargo metadata`."""
    return (
        CommandExt(cargo_program())
        .args(["metadata", "--format-version", "1"])
        .log_level(TRACE)
    )


def metadata() -> Metadata:
    """Obtain the Cargo metadata of the current package."""
    return metadata_with_args(())


def metadata_with_args(additional_args: Iterable[str]) -> Metadata:
    """Obtain the Cargo metadata, passing extra arguments to `cargo metadata`."""
    output = metadata_command().args(additional_args).output()
    try:
        return Metadata.from_json(json.loads(output.stdout))
    except (ValueError, KeyError, TypeError) as error:
        raise ValueError(f"Failed to parse `cargo metadata` output: {error}") from error