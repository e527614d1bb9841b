"""Serving the app locally for the browser."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from pathlib import Path

from aiohttp import WSMsgType, web

from bevy_cli.web_bundle import IndexFile, LinkedBundle, PackedBundle, WebBundle

logger = logging.getLogger("bevy_cli")

AUTO_RELOAD_SCRIPT = """(() => {
  const url = new URL("_bevy_dev/websocket", window.location.href);
  url.protocol = url.protocol === "https:" ? "wss:" : "ws:";

  function connect(reloadOnOpen) {
    const socket = new WebSocket(url);
    socket.addEventListener("open", () => {
      if (reloadOnOpen) {
        window.location.reload();
      }
    });
    socket.addEventListener("close", () => {
      setTimeout(() => connect(true), 1000);
    });
  }

  connect(false);
})();
"""

_RELOAD_SCRIPT_TAG = '<script src="_bevy_dev/auto_reload.js"></script></body>'

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]
HeaderMap = Mapping[str, str] | Iterable[tuple[str, str]]


def _header_pairs(header_map: HeaderMap | None) -> list[tuple[str, str]]:
    if header_map is None:
        return []
    if isinstance(header_map, Mapping):
        return list(header_map.items())
    return list(header_map)


async def _dev_websocket(request: web.Request) -> web.WebSocketResponse:
    """Echo text messages back; used by the auto-reload script."""
    socket = web.WebSocketResponse()
    await socket.prepare(request)
    async for message in socket:
        if message.type == WSMsgType.TEXT:
            await socket.send_str(message.data)
        elif message.type == WSMsgType.ERROR:
            break
    return socket


async def _auto_reload_script(request: web.Request) -> web.Response:
    return web.Response(
        text=AUTO_RELOAD_SCRIPT, content_type="text/javascript", charset="utf-8"
    )


def _file_handler(path: Path, content_type: str | None = None) -> Handler:
    headers = {"Content-Type": content_type} if content_type else None

    async def handler(request: web.Request) -> web.StreamResponse:
        return web.FileResponse(path, headers=headers)

    return handler


def _content_handler(content: str) -> Handler:
    async def handler(request: web.Request) -> web.StreamResponse:
        return web.Response(text=content, content_type="text/html", charset="utf-8")

    return handler


def _packed_handler(root: Path) -> Handler:
    base = root.resolve()

    async def handler(request: web.Request) -> web.StreamResponse:
        tail = request.match_info.get("tail", "")
        candidate = (base / tail).resolve() if tail else base / "index.html"
        if not candidate.is_relative_to(base) or not candidate.is_file():
            raise web.HTTPNotFound()
        return web.FileResponse(candidate)

    return handler


def _headers_middleware(pairs: list[tuple[str, str]]):
    @web.middleware
    async def add_headers(request: web.Request, handler: Handler) -> web.StreamResponse:
        try:
            response = await handler(request)
        except web.HTTPException as error:
            for key, value in pairs:
                error.headers.add(key, value)
            raise
        if not response.prepared:
            for key, value in pairs:
                response.headers.add(key, value)
        return response

    return add_headers


def build_app(web_bundle: WebBundle, header_map: HeaderMap | None) -> web.Application:
    """Create the web application serving the bundle.

    The given headers are added to every response.
    """
    pairs = _header_pairs(header_map)
    if pairs:
        logger.debug("Adding response headers %s", pairs)

    app = web.Application(middlewares=[_headers_middleware(pairs)])

    if isinstance(web_bundle, PackedBundle):
        app.router.add_get("/{tail:.*}", _packed_handler(Path(web_bundle.path)))
        return app

    if not isinstance(web_bundle, LinkedBundle):
        raise TypeError(f"unsupported web bundle: {web_bundle!r}")

    artifacts = Path(web_bundle.build_artifact_path)
    app.router.add_get(
        f"/build/{web_bundle.js_file_name}",
        _file_handler(artifacts / web_bundle.js_file_name),
    )
    app.router.add_get(
        f"/build/{web_bundle.wasm_file_name}",
        _file_handler(artifacts / web_bundle.wasm_file_name, "application/wasm"),
    )
    app.router.add_get("/_bevy_dev/auto_reload.js", _auto_reload_script)
    # For now the websocket just echoes messages back.
    app.router.add_route("*", "/_bevy_dev/websocket", _dev_websocket)

    if web_bundle.assets_path is not None:
        app.router.add_static("/assets", Path(web_bundle.assets_path))

    index = web_bundle.index
    if isinstance(index, IndexFile):
        app.router.add_get("/", _file_handler(Path(index.path)))
    else:
        contents = index.content().replace("</body>", _RELOAD_SCRIPT_TAG)
        app.router.add_get("/", _content_handler(contents))

    return app


def serve(web_bundle: WebBundle, port: int, header_map: HeaderMap | None) -> None:
    """Run a web server for the app on localhost, blocking until it stops."""
    app = build_app(web_bundle, header_map)
    web.run_app(app, host="127.0.0.1", port=port, print=None)