"""Running the app in the browser."""

from __future__ import annotations

import logging
import string
import webbrowser
from collections.abc import Iterable

from bevy_cli.bin_target import BinTarget
from bevy_cli.metadata import Metadata
from bevy_cli.run_args import RunArgs
from bevy_cli.serve import serve
from bevy_cli.web_build import build_web

logger = logging.getLogger("bevy_cli")

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


def _valid_header_value(value: str) -> bool:
    return all(ch == "\t" or " " <= ch <= "~" or ord(ch) >= 0x80 for ch in value)


def parse_headers(headers: Iterable[str]) -> dict[str, str]:
    """Parse `name:value` or `name=value` headers.

    Names are case-insensitive and stored in lower case; a later header
    replaces an earlier one of the same name.
    """
    header_map: dict[str, str] = {}
    for header in headers:
        separator = ":" if ":" in header else "=" if "=" in header else None
        if separator is None:
            raise ValueError("headers must separate name and value with ':' or '='")
        key, value = header.split(separator, 1)
        if not key or not set(key) <= _TOKEN_CHARS:
            raise ValueError(f"invalid header name: {key!r}")
        if not _valid_header_value(value):
            raise ValueError(f"invalid header value: {value!r}")
        header_map[key.lower()] = value
    return header_map


def run_web(args: RunArgs, metadata: Metadata, bin_target: BinTarget) -> None:
    """Build the app for the browser and serve it; requires web arguments."""
    web_args = args.web
    if web_args is None:
        raise ValueError("tried to run on the web without corresponding args")

    header_map = parse_headers(web_args.headers)

    build_args = args.to_build_args()
    # Without an explicit target, only compile the selected binary.
    if build_args.target_args.bin is None and build_args.target_args.example is None:
        build_args.target_args.bin = bin_target.bin_name

    web_bundle = build_web(
        build_args,
        args.skip_prompts,
        web_args.create_packed_bundle,
        metadata,
        bin_target,
    )

    url = f"http://localhost:{web_args.port}"

    # Serving blocks, so the page is opened first.
    if web_args.open:
        try:
            opened = webbrowser.open(url)
        except webbrowser.Error as error:
            opened = False
            logger.error(
                "Failed to open the browser automatically, open the app at <%s>. (Error: %s)",
                url,
                error,
            )
        else:
            if not opened:
                logger.error(
                    "Failed to open the browser automatically, open the app at <%s>.", url
                )
        if opened:
            logger.info("Your app is running at <%s>!", url)
    else:
        logger.info("Open your app at <%s>!", url)

    serve(web_bundle, web_args.port, header_map)