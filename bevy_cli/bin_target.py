"""Choosing which binary target to run."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from bevy_cli.metadata import Metadata, Package, Target


class SelectionError(LookupError):
    """No single binary target could be selected."""


@dataclass
class BinTarget:
    """A binary target and where its artifacts are placed."""

    package: Package
    artifact_directory: Path
    bin_name: str


def _matching(
    packages: list[Package], name: str, examples: bool
) -> list[tuple[Target, Package]]:
    return [
        (target, package)
        for package in packages
        for target in (package.example_targets() if examples else package.bin_targets())
        if target.name == name
    ]


def select_run_binary(
    metadata: Metadata,
    package_name: str | None,
    bin_name: str | None,
    example_name: str | None,
    compile_target: str | None,
    compile_profile: str,
) -> BinTarget:
    """Determine which binary target should be run.

    `package_name` narrows the search to one package, `bin_name` and
    `example_name` pick the target; otherwise the single binary or the
    `default_run` binary is chosen.
    """
    if package_name is not None:
        packages = [p for p in metadata.packages if p.name == package_name]
        if not packages:
            raise SelectionError(f"Failed to find package {package_name}")
        packages = packages[:1]
    else:
        packages = list(metadata.packages)

    is_example = False

    if bin_name is not None:
        bins = _matching(packages, bin_name, examples=False)
        if not bins:
            raise SelectionError(f"No binary with name {bin_name} available!")
        if len(bins) > 1:
            raise SelectionError(f"Multiple binaries with name {bin_name} available!")
        target, package = bins[0]
    elif example_name is not None:
        examples = _matching(packages, example_name, examples=True)
        if not examples:
            raise SelectionError(f"No example with name {example_name} available!")
        if len(examples) > 1:
            raise SelectionError(f"Multiple examples with name {example_name} available!")
        is_example = True
        target, package = examples[0]
    else:
        bins = [(t, p) for p in packages for t in p.bin_targets()]
        if not bins:
            raise SelectionError("No binaries available!")
        if len(bins) == 1:
            target, package = bins[0]
        else:
            default_runs = [p.default_run for p in packages if p.default_run is not None]
            if not default_runs:
                raise SelectionError(
                    "There are multiple binaries available, try specifying one with "
                    "--bin or define `default_run` in the Cargo.toml"
                )
            if len(default_runs) > 1:
                raise SelectionError(
                    "Found multiple `default_run` definitions, "
                    "I don't know which one to pick!"
                )
            default_run = default_runs[0]
            found = next(((t, p) for t, p in bins if t.name == default_run), None)
            if found is None:
                raise SelectionError(f"Didn't find `default_run` binary {default_run}")
            target, package = found

    artifact_directory = get_artifact_directory(
        metadata.target_directory, compile_target, compile_profile, is_example
    )
    return BinTarget(
        package=package, artifact_directory=artifact_directory, bin_name=target.name
    )


def get_artifact_directory(
    target_directory: str | os.PathLike[str],
    target: str | None,
    profile: str,
    is_example: bool,
) -> Path:
    """The directory that holds the compilation artifacts."""
    directory = Path(target_directory)
    if target is not None:
        directory /= target
    # The dev profile uses a `debug` folder.
    directory /= "debug" if profile == "dev" else profile
    if is_example:
        directory /= "examples"
    return directory