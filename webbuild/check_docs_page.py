"""
Smoke-check the web build in a real browser.

Serves docs/ on a free local port, opens index.html in headless Chromium and waits for the
`wasm_bindgen` global that `wasm-bindgen --no-modules` emits. Any uncaught page error fails
the check.

Usage:
  uv run python -m webbuild.build_web
  uv run python -m webbuild.check_docs_page
  uv run python -m webbuild.check_docs_page --dir docs --timeout-ms 30000
"""

from __future__ import annotations

import argparse
import asyncio
import threading
from dataclasses import dataclass, field
from pathlib import Path

from playwright.async_api import async_playwright

from webbuild.build_web import DEFAULT_OUT_DIR
from webbuild.serve_docs import make_server, server_url


@dataclass
class PageReport:
    url: str
    title: str = ""
    has_bindings: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.has_bindings and not self.errors


async def check_page(url: str, *, timeout_ms: int = 15_000, settle_ms: int = 500) -> PageReport:
    report = PageReport(url=url)
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        try:
            page = await browser.new_page()
            page.on("pageerror", lambda exc: report.errors.append(str(exc)))
            await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
            try:
                await page.wait_for_function("() => typeof wasm_bindgen === 'function'", timeout=timeout_ms)
                report.has_bindings = True
            except Exception as e:
                report.errors.append(f"wasm_bindgen global not found: {e}")
            # Give the wasm init a moment to surface errors.
            await page.wait_for_timeout(settle_ms)
            report.title = await page.title()
        finally:
            await browser.close()
    return report


def check_docs(docs_dir: Path, *, timeout_ms: int = 15_000) -> PageReport:
    docs_dir = Path(docs_dir).resolve()
    if not (docs_dir / "index.html").exists():
        raise FileNotFoundError(f"Missing {docs_dir / 'index.html'}")

    httpd = make_server(docs_dir, port=0)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        return asyncio.run(check_page(server_url(httpd, "index.html"), timeout_ms=timeout_ms))
    finally:
        httpd.shutdown()
        httpd.server_close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Load docs/index.html in headless Chromium and verify the wasm bindings.")
    parser.add_argument("--dir", default=str(DEFAULT_OUT_DIR))
    parser.add_argument("--timeout-ms", type=int, default=15_000)
    args = parser.parse_args(argv)

    try:
        report = check_docs(Path(args.dir), timeout_ms=int(args.timeout_ms))
    except FileNotFoundError as e:
        raise SystemExit(str(e)) from e

    for err in report.errors:
        print(f"  page error: {err}")
    if not report.ok:
        print(f"FAIL: {report.url}")
        return 1
    print(f"OK: {report.url} ({report.title or 'untitled'})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
