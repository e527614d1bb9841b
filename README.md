# bevy_cli

A command-line companion for Bevy projects. It wraps `cargo` and related tools so that
creating, running and linting a Bevy app takes one short command.

## Installation

```sh
pip install .
```

This installs the `bevy` command. Running needs `cargo` on your system. `bevy new` runs
`cargo generate`, so `cargo-generate` must be installed. Browser builds also use `rustup`
(when present) and `wasm-bindgen`, and offer to install what is missing.

## Commands

### `bevy new`

Create a new project from a template:

```sh
bevy new my_game
bevy new my_game --template 2d
bevy new my_game --template someone/some_template --branch main
```

The template defaults to `minimal` and the branch to `main`. A short name such as `2d`
is looked up among the `bevy_new_` repositories listed by the GitHub API, an `org/repo`
pair expands to a GitHub repository, and anything else is passed on as a Git URL.

### `bevy run` (alias `bevy r`)

Run the app natively through `cargo run`:

```sh
bevy run
bevy run --bin my_game
bevy run --release --features dev
```

The common cargo options are accepted and forwarded: `--config`, `-Z`, `-p/--package`,
`--bin`, `--example`, `-F/--features`, `--all-features`, `--no-default-features`,
`-r/--release`, `--profile`, `-j/--jobs`, `--keep-going`, `--target`, `--target-dir`,
`--manifest-path`, `--ignore-rust-version`, `--locked`, `--offline` and `--frozen`.
`--yes` confirms every installation prompt automatically.

When `--bin` and `--example` are both absent, the single binary of the workspace is run;
if there are several, the package's `default_run` decides.

Run the app in the browser with the `web` subcommand, placed after the run options:

```sh
bevy run web --open --port 4000
bevy run --release web --bundle
bevy run web --headers Cross-Origin-Opener-Policy:same-origin
```

This compiles to `wasm32-unknown-unknown` (unless `--target` says otherwise) with the
`web` or `web-release` profile, which are defined automatically when the workspace
`Cargo.toml` does not define them, creates JavaScript bindings with `wasm-bindgen` and
serves the app at `http://localhost:<port>` (default 4000). The installed
`wasm-bindgen-cli` must match the project's `wasm-bindgen` version exactly.

- `-o/--open` opens the page in the browser.
- `-b/--bundle` packs all files into one folder under
  `<target dir>/bevy_web/<profile>/<binary>`.
- `-H/--headers name:value` (or `name=value`) adds a header to every response; repeat it
  for several headers.

A custom `web/index.html` is used when present; otherwise a default page is generated.
An `assets` folder is served under `/assets`.

### `bevy lint`

Lint the project with Bevy-specific lints:

```sh
bevy lint -- --workspace
```

Everything after `lint` (and after an optional `--`) is passed to `bevy_lint`, which must
be in the same directory as the `bevy` command; the `PATH` is not searched.

### `bevy completions`

Print a completion script for `bash`, `zsh` or `fish`:

```sh
source <(bevy completions bash)
```

## Logging

Pass `-v`/`--verbose` for debug output, or set `BEVY_LOG` to one of `trace`, `debug`,
`info`, `warn`, `error` or `off`.

## Configuration

Defaults can be set in `Cargo.toml` under `[package.metadata.bevy_cli]`: `target`,
`features` and `default_features`, optionally narrowed by profile (`dev`, `release`),
platform (`web`, `native`) or both (for example `web.release`). Features add up; for other
values the more specific table wins. Values given on the command line take precedence.
`bevy run` currently merges the `web` platform tables whether or not it runs in the
browser.

The `cargo` and `rustup` programs used can be replaced through the `BEVY_CLI_CARGO` and
`BEVY_CLI_RUSTUP` environment variables.

## Library use

The pieces are importable, for example `bevy_cli.arg_builder.ArgBuilder` for building
argument lists, `bevy_cli.bin_target.select_run_binary` for picking a binary from
`bevy_cli.metadata.Metadata`, and `bevy_cli.config.CliConfig` for reading the
configuration above.

## What it does not do

- There is no `bevy build` command; browser builds happen as part of `bevy run web`.
- Release browser builds are not optimized with `wasm-opt`. The helper
  `bevy_cli.tools.optimize_wasm` exists but is not called by any command.
- The development server does not reload the page when the app is rebuilt; its websocket
  only echoes messages back.