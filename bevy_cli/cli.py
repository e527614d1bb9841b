"""The `bevy` command-line interface."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence

from bevy_cli.cargo_args import (
    CargoCommonArgs,
    CargoCompilationArgs,
    CargoFeatureArgs,
    CargoManifestArgs,
    CargoPackageRunArgs,
    CargoRunArgs,
    CargoTargetRunArgs,
)
from bevy_cli.command import TRACE
from bevy_cli.lint import lint
from bevy_cli.run import run
from bevy_cli.run_args import RunArgs, RunWebArgs
from bevy_cli.template import generate_template

VERSION = "0.1.0-dev"
SHELLS = ("bash", "fish", "zsh")

_SUBCOMMANDS = (
    ("new", "Create a new Bevy project from a specified template."),
    ("run", "Run your Bevy app."),
    ("r", "Run your Bevy app."),
    ("lint", "Check the current project using Bevy-specific lints."),
    ("completions", "Generate autocompletion for the `bevy` CLI tool."),
)

_LOG_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 1,
}

_ERRORS = (RuntimeError, ValueError, OSError, LookupError)

_handler: logging.Handler | None = None


def _verbose_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS,
        help="Show debug output.",
    )
    return parent


def _add_run_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--yes", dest="skip_prompts", action="store_true",
        help="Confirm all prompts automatically.",
    )
    parser.add_argument(
        "--config", action="append", metavar="KEY=VALUE|PATH",
        help="Override a configuration value. May be given multiple times.",
    )
    parser.add_argument(
        "-Z", dest="unstable_flags", action="append", metavar="FLAG",
        help="Unstable (nightly-only) flags to Cargo.",
    )

    package = parser.add_argument_group("Package Selection")
    package.add_argument(
        "-p", "--package", metavar="SPEC", help="Package with the target to run"
    )

    target = parser.add_argument_group("Target Selection")
    target.add_argument("--bin", metavar="NAME", help="Build only the specified binary.")
    target.add_argument(
        "--example", metavar="NAME", help="Build only the specified example."
    )

    features = parser.add_argument_group("Feature Selection")
    features.add_argument(
        "-F", "--features", action="append", metavar="FEATURES",
        help="Space or comma separated list of features to activate",
    )
    features.add_argument(
        "--all-features", action="store_true", help="Activate all available features"
    )
    features.add_argument(
        "--no-default-features", action="store_const", const=True, default=None,
        help="Do not activate the `default` feature",
    )

    compilation = parser.add_argument_group("Compilation Options")
    compilation.add_argument(
        "-r", "--release", action="store_true",
        help="Build artifacts in release mode, with optimizations.",
    )
    compilation.add_argument(
        "--profile", metavar="PROFILE-NAME",
        help="Build artifacts with the specified profile",
    )
    compilation.add_argument(
        "-j", "--jobs", type=int, metavar="N",
        help="Number of parallel jobs, defaults to # of CPUs.",
    )
    compilation.add_argument(
        "--keep-going", action="store_true",
        help="Do not abort the build as soon as there is an error",
    )
    compilation.add_argument("--target", metavar="TRIPLE", help="Build for the target triple.")
    compilation.add_argument(
        "--target-dir", metavar="DIRECTORY", help="Directory for all generated artifacts."
    )

    manifest = parser.add_argument_group("Manifest Options")
    manifest.add_argument("--manifest-path", metavar="PATH", help="Path to Cargo.toml")
    manifest.add_argument(
        "--ignore-rust-version", action="store_true",
        help="Ignore `rust-version` specification in packages",
    )
    manifest.add_argument(
        "--locked", action="store_true",
        help="Assert that `Cargo.lock` will remain unchanged",
    )
    manifest.add_argument(
        "--offline", action="store_true", help="Run without accessing the network"
    )
    manifest.add_argument(
        "--frozen", action="store_true",
        help="Equivalent to specifying both --locked and --offline",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for `bevy`."""
    parent = _verbose_parent()
    parser = argparse.ArgumentParser(
        prog="bevy",
        description=(
            "Command-line interface for the Bevy Game Engine. "
            "It provides tools for Bevy project management, "
            "such as generating new projects from templates."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", default=False)

    subparsers = parser.add_subparsers(dest="subcommand", required=True, metavar="COMMAND")

    new = subparsers.add_parser(
        "new", parents=[parent], help="Create a new Bevy project from a specified template."
    )
    new.set_defaults(command="new")
    new.add_argument("name", help="The desired name for the new project.")
    new.add_argument(
        "-t", "--template", default="minimal",
        help="The template to use: a `bevy_new_` shortcut, an org/repo or a URL.",
    )
    new.add_argument("-b", "--branch", default="main", help="The git branch to use")

    run_parser = subparsers.add_parser(
        "run", aliases=["r"], parents=[parent], help="Run your Bevy app."
    )
    run_parser.set_defaults(command="run")
    _add_run_arguments(run_parser)
    run_sub = run_parser.add_subparsers(dest="run_subcommand", metavar="COMMAND")
    web = run_sub.add_parser("web", parents=[parent], help="Run your app in the browser.")
    web.add_argument(
        "-p", "--port", type=int, default=4000, help="The port to run the web server on."
    )
    web.add_argument("-o", "--open", action="store_true", help="Open the app in the browser.")
    web.add_argument(
        "-b", "--bundle", dest="create_packed_bundle", action="store_true",
        help="Bundle all web artifacts into a single folder.",
    )
    web.add_argument(
        "-H", "--headers", action="append", metavar="HEADERS",
        help="Headers to add to responses, as `name:value` or `name=value`.",
    )

    lint_parser = subparsers.add_parser(
        "lint", parents=[parent],
        help="Check the current project using Bevy-specific lints.",
        description=(
            "Requires `bevy_lint` to be installed. "
            "To see the full list of options, run `bevy lint -- --help`."
        ),
    )
    lint_parser.set_defaults(command="lint")
    lint_parser.add_argument(
        "args", nargs=argparse.REMAINDER, help="Arguments passed to `bevy_lint`."
    )

    completions = subparsers.add_parser(
        "completions", parents=[parent],
        help="Generate autocompletion for the `bevy` CLI tool.",
    )
    completions.set_defaults(command="completions")
    completions.add_argument("shell", choices=SHELLS)

    return parser


def _split_lint(argv: list[str]) -> tuple[list[str], list[str] | None]:
    """Separate the arguments meant for `bevy_lint` from the rest."""
    for index, token in enumerate(argv):
        if token in ("-v", "--verbose"):
            continue
        if token == "lint":
            rest = argv[index + 1:]
            if rest[:1] == ["--"]:
                rest = rest[1:]
            return argv[: index + 1], rest
        break
    return argv, None


def _configure_logging(verbose: bool) -> None:
    global _handler
    logger = logging.getLogger("bevy_cli")
    level = logging.DEBUG if verbose else logging.INFO
    env_filter = os.environ.get("BEVY_LOG")
    if env_filter is not None and env_filter.strip().lower() in _LOG_LEVELS:
        level = _LOG_LEVELS[env_filter.strip().lower()]
    logger.setLevel(level)
    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("%(levelname)5s %(message)s"))
    logger.addHandler(_handler)


def _run_args(ns: argparse.Namespace) -> RunArgs:
    web = None
    if getattr(ns, "run_subcommand", None) == "web":
        web = RunWebArgs(
            port=ns.port,
            open=ns.open,
            create_packed_bundle=ns.create_packed_bundle,
            headers=list(ns.headers or []),
        )
    cargo_args = CargoRunArgs(
        common_args=CargoCommonArgs(
            config=list(ns.config or []), unstable_flags=list(ns.unstable_flags or [])
        ),
        package_args=CargoPackageRunArgs(package=ns.package),
        target_args=CargoTargetRunArgs(bin=ns.bin, example=ns.example),
        feature_args=CargoFeatureArgs(
            features=list(ns.features or []),
            is_all_features=ns.all_features,
            no_default_features=ns.no_default_features,
        ),
        compilation_args=CargoCompilationArgs(
            is_release=ns.release,
            profile=ns.profile,
            jobs=ns.jobs,
            is_keep_going=ns.keep_going,
            target=ns.target,
            target_dir=ns.target_dir,
        ),
        manifest_args=CargoManifestArgs(
            manifest_path=ns.manifest_path,
            ignore_rust_version=ns.ignore_rust_version,
            is_locked=ns.locked,
            is_offline=ns.offline,
            is_frozen=ns.frozen,
        ),
    )
    return RunArgs(web=web, skip_prompts=ns.skip_prompts, cargo_args=cargo_args)


def _completion_script(shell: str) -> str:
    names = " ".join(name for name, _ in _SUBCOMMANDS)
    shells = " ".join(SHELLS)
    if shell == "bash":
        return (
            "_bevy() {\n"
            '    local cur="${COMP_WORDS[COMP_CWORD]}"\n'
            '    if [ "$COMP_CWORD" -eq 1 ]; then\n'
            f'        COMPREPLY=($(compgen -W "{names} -v --verbose --version --help" -- "$cur"))\n'
            '    elif [ "${COMP_WORDS[1]}" = "completions" ] && [ "$COMP_CWORD" -eq 2 ]; then\n'
            f'        COMPREPLY=($(compgen -W "{shells}" -- "$cur"))\n'
            "    fi\n"
            "}\n"
            "complete -F _bevy bevy\n"
        )
    if shell == "zsh":
        return (
            "#compdef bevy\n"
            "_bevy() {\n"
            "    if (( CURRENT == 2 )); then\n"
            f"        compadd {names}\n"
            "    elif [[ ${words[2]} == completions ]] && (( CURRENT == 3 )); then\n"
            f"        compadd {shells}\n"
            "    fi\n"
            "}\n"
            "compdef _bevy bevy\n"
        )
    lines = [
        "complete -c bevy -f -s v -l verbose",
        *(
            f'complete -c bevy -f -n __fish_use_subcommand -a "{name}" -d "{help_text}"'
            for name, help_text in _SUBCOMMANDS
        ),
        f'complete -c bevy -f -n "__fish_seen_subcommand_from completions" -a "{shells}"',
    ]
    return "\n".join(lines) + "\n"


def _dispatch(ns: argparse.Namespace, lint_args: list[str] | None) -> None:
    if ns.command == "new":
        generate_template(ns.name, ns.template, ns.branch)
    elif ns.command == "lint":
        lint(lint_args if lint_args is not None else list(ns.args))
    elif ns.command == "run":
        run(_run_args(ns))
    elif ns.command == "completions":
        sys.stdout.write(_completion_script(ns.shell))


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of `bevy`; returns the exit code."""
    arguments = list(sys.argv[1:] if argv is None else argv)
    head, lint_args = _split_lint(arguments)
    ns = build_parser().parse_args(head)
    _configure_logging(ns.verbose)
    try:
        _dispatch(ns, lint_args)
    except _ERRORS as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())