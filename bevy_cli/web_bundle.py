"""Collecting the files needed to serve the app in the browser."""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path

from bevy_cli.bin_target import BinTarget
from bevy_cli.metadata import Metadata

logger = logging.getLogger("bevy_cli")

#: The placeholder path of the JS bindings in the default index.
JS_BINDINGS_PLACEHOLDER = "./build/bevy_app.js"

DEFAULT_INDEX_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      html,
      body {
        margin: 0;
        height: 100%;
      }
      canvas {
        display: block;
      }
    </style>
  </head>
  <body>
    <script type="module">
      import init from "./build/bevy_app.js";
      init();
    </script>
  </body>
</html>
"""


@dataclass(frozen=True)
class IndexFile:
    """A custom `index.html` file on disk."""

    path: Path

    def content(self) -> str:
        """The content of the file."""
        return Path(self.path).read_text(encoding="utf-8")


@dataclass(frozen=True)
class IndexContent:
    """The contents of `index.html` held in memory."""

    text: str

    def content(self) -> str:
        """The content of the index."""
        return self.text


Index = IndexFile | IndexContent


@dataclass(frozen=True)
class LinkedBundle:
    """A bundle whose files stay at their original places."""

    build_artifact_path: Path
    wasm_file_name: str
    js_file_name: str
    assets_path: Path | None
    index: Index


@dataclass(frozen=True)
class PackedBundle:
    """A bundle packed into a single folder, ready to deploy."""

    path: Path


WebBundle = LinkedBundle | PackedBundle


def _copy_file(source: Path, destination: Path, message: str) -> None:
    try:
        shutil.copyfile(source, destination)
    except OSError as error:
        raise OSError(f"{message}: {error}") from error


def _copy_tree(source: Path, destination: Path, message: str) -> None:
    try:
        shutil.copytree(source, destination, dirs_exist_ok=True)
    except OSError as error:
        raise OSError(f"{message}: {error}") from error


def create_web_bundle(
    metadata: Metadata, profile: str, bin_target: BinTarget, packed: bool
) -> WebBundle:
    """Create a bundle of all files needed to serve the app in the browser.

    With `packed`, everything is copied into one folder inside the target
    directory; otherwise the files are referenced where they are.
    """
    assets_path = Path("assets")
    # The `_bg` suffix selects the bindings produced by wasm-bindgen.
    wasm_file_name = f"{bin_target.bin_name}_bg.wasm"
    js_file_name = f"{bin_target.bin_name}.js"

    custom_web_folder = Path("web")
    index_path = custom_web_folder / "index.html"

    index: Index
    if index_path.exists():
        index = IndexFile(index_path)
    else:
        logger.info("No custom `web` folder found, using defaults.")
        index = IndexContent(default_index(bin_target))

    processed = pre_process_index(index.content(), bin_target)

    linked = LinkedBundle(
        build_artifact_path=bin_target.artifact_directory,
        wasm_file_name=wasm_file_name,
        js_file_name=js_file_name,
        assets_path=assets_path if assets_path.exists() else None,
        index=IndexContent(processed),
    )

    if not packed:
        return linked

    base_path = (
        Path(metadata.target_directory) / "bevy_web" / profile / bin_target.bin_name
    )

    # The previous bundle may not exist; leftovers would be overwritten anyway.
    shutil.rmtree(base_path, ignore_errors=True)

    build_dir = base_path / "build"
    build_dir.mkdir(parents=True, exist_ok=True)
    _copy_file(
        Path(linked.build_artifact_path) / wasm_file_name,
        build_dir / wasm_file_name,
        "failed to copy WASM artifact",
    )
    _copy_file(
        Path(linked.build_artifact_path) / js_file_name,
        build_dir / js_file_name,
        "failed to copy JS artifact",
    )

    if linked.assets_path is not None:
        _copy_tree(
            linked.assets_path,
            base_path / linked.assets_path.name,
            "failed to copy assets",
        )

    if custom_web_folder.exists():
        _copy_tree(custom_web_folder, base_path, "failed to copy custom web assets")

    try:
        (base_path / "index.html").write_text(processed, encoding="utf-8")
    except OSError as error:
        raise OSError(f"failed to write processed index.html: {error}") from error

    return PackedBundle(path=base_path)


def pre_process_index(content: str, bin_target: BinTarget) -> str:
    """Add a default title to the index if it has none."""
    if "</title>" not in content:
        title = default_title(bin_target.bin_name)
        content = content.replace("</head>", f"<title>{title}</title></head>")
    return content


def default_index(bin_target: BinTarget) -> str:
    """The default `index.html`, loading the bindings of the given binary."""
    return DEFAULT_INDEX_TEMPLATE.replace(
        JS_BINDINGS_PLACEHOLDER, f"./build/{bin_target.bin_name}.js"
    )


def default_title(bin_name: str) -> str:
    """A readable page title from a binary name: `bevy_new_2d` -> `Bevy New 2d`."""
    return " ".join(capitalize(word) for word in re.split(r"[_-]", bin_name))


def capitalize(s: str) -> str:
    """Make the first letter of the word uppercase."""
    return s[:1].upper() + s[1:]