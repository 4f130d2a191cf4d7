"""
Serve docs/ over HTTP for local preview of the web build.

Usage:
  uv run python -m webbuild.serve_docs
  uv run python -m webbuild.serve_docs --port 0 --verbose
"""

from __future__ import annotations

import argparse
import functools
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any

from webbuild.build_web import DEFAULT_OUT_DIR


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


class DocsHandler(SimpleHTTPRequestHandler):
    # Browsers refuse WebAssembly.instantiateStreaming without this.
    extensions_map = {**SimpleHTTPRequestHandler.extensions_map, ".wasm": "application/wasm"}


class _QuietHandler(DocsHandler):
    def log_message(self, *_args: Any) -> None:  # noqa: D401 - match base signature
        return


def make_server(
    directory: Path,
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    verbose: bool = False,
) -> ThreadingHTTPServer:
    directory = Path(directory).resolve()
    if not directory.is_dir():
        raise FileNotFoundError(f"Missing docs dir: {directory}")
    handler_cls = DocsHandler if verbose else _QuietHandler
    handler = functools.partial(handler_cls, directory=str(directory))
    return ThreadingHTTPServer((host, port), handler)


def server_url(httpd: ThreadingHTTPServer, path: str = "") -> str:
    host, port = httpd.server_address[:2]
    return f"http://{host}:{port}/{path.lstrip('/')}"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve docs/ for local preview.")
    parser.add_argument("--dir", default=str(DEFAULT_OUT_DIR))
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--verbose", action="store_true", help="Log every request.")
    args = parser.parse_args(argv)

    try:
        httpd = make_server(Path(args.dir), host=args.host, port=int(args.port), verbose=bool(args.verbose))
    except FileNotFoundError as e:
        raise SystemExit(str(e)) from e

    print(f"Serving {Path(args.dir).resolve()} at {server_url(httpd)}")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print("\nStopped")
    finally:
        httpd.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
