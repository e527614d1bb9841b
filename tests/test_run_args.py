from bevy_cli.cargo_args import (
    CargoCompilationArgs,
    CargoFeatureArgs,
    CargoPackageRunArgs,
    CargoRunArgs,
    CargoTargetRunArgs,
)
from bevy_cli.config import CliConfig
from bevy_cli.run_args import RunArgs, RunWebArgs


def test_web_args_defaults():
    web = RunWebArgs()
    assert web.port == 4000
    assert (web.open, web.create_packed_bundle, web.headers) == (False, False, [])


def test_is_web_follows_subcommand():
    assert RunArgs().is_web() is False
    assert RunArgs(web=RunWebArgs()).is_web() is True


def test_profile_native_and_web():
    assert RunArgs().profile() == "dev"
    assert RunArgs(web=RunWebArgs()).profile() == "web"
    release = CargoRunArgs(compilation_args=CargoCompilationArgs(is_release=True))
    assert RunArgs(cargo_args=release).profile() == "release"
    assert RunArgs(web=RunWebArgs(), cargo_args=release).profile() == "web-release"
    assert RunArgs(cargo_args=release).is_release() is True


def test_target_defaults_to_wasm_on_web():
    assert RunArgs().target() is None
    assert RunArgs(web=RunWebArgs()).target() == "wasm32-unknown-unknown"


def test_cargo_args_builder():
    assert list(RunArgs().cargo_args_builder()) == ["--profile", "dev"]
    assert list(RunArgs(web=RunWebArgs()).cargo_args_builder()) == [
        "--profile",
        "web",
        "--target",
        "wasm32-unknown-unknown",
    ]


def test_apply_config_fills_unset_values():
    args = RunArgs(cargo_args=CargoRunArgs(feature_args=CargoFeatureArgs(features=["cli"])))
    args.apply_config(
        CliConfig(target="wasm32v1-none", features=["dev"], default_features=False)
    )

    assert args.cargo_args.compilation_args.target == "wasm32v1-none"
    assert args.cargo_args.feature_args.features == ["cli", "dev"]
    assert args.cargo_args.feature_args.no_default_features is True


def test_apply_config_keeps_cli_values():
    args = RunArgs(
        cargo_args=CargoRunArgs(
            compilation_args=CargoCompilationArgs(target="wasm32-unknown-unknown"),
            feature_args=CargoFeatureArgs(no_default_features=False),
        )
    )
    args.apply_config(CliConfig(target="wasm32v1-none", default_features=False))

    assert args.cargo_args.compilation_args.target == "wasm32-unknown-unknown"
    assert args.cargo_args.feature_args.no_default_features is False


def test_apply_default_config_enables_default_features():
    args = RunArgs()
    args.apply_config(CliConfig())
    assert args.cargo_args.feature_args.no_default_features is False
    assert args.cargo_args.compilation_args.target is None


def test_to_build_args_copies_selection():
    args = RunArgs(
        cargo_args=CargoRunArgs(
            package_args=CargoPackageRunArgs(package="game"),
            target_args=CargoTargetRunArgs(bin="game"),
            feature_args=CargoFeatureArgs(features=["dev"]),
        )
    )
    build = args.to_build_args()

    assert build.package_args.package == "game"
    assert build.package_args.is_workspace is False
    assert build.target_args.bin == "game"
    assert build.target_args.example is None
    assert build.target_args.is_all_targets is False
    assert build.feature_args.features == ["dev"]


def test_to_build_args_is_independent():
    args = RunArgs(cargo_args=CargoRunArgs(feature_args=CargoFeatureArgs(features=["dev"])))
    build = args.to_build_args()
    build.feature_args.features.append("extra")
    build.common_args.config.append("a=1")

    assert args.cargo_args.feature_args.features == ["dev"]
    assert args.cargo_args.common_args.config == []


def test_build_args_produce_same_cargo_args():
    args = RunArgs(
        web=RunWebArgs(),
        cargo_args=CargoRunArgs(target_args=CargoTargetRunArgs(example="demo")),
    )
    assert list(args.to_build_args().args_builder(True)) == list(args.cargo_args_builder())