"""
Browser smoke tests for check_docs_page.

Uses a hand-written docs/ that mimics `wasm-bindgen --no-modules` output (a global
`wasm_bindgen` function), so no Rust build is needed. Skipped when Chromium is not installed
(`playwright install chromium`).
"""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("playwright")

from playwright.sync_api import sync_playwright  # noqa: E402

from webbuild import check_docs_page  # noqa: E402


pytestmark = pytest.mark.slow


@pytest.fixture(scope="module", autouse=True)
def _require_chromium():
    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True)
            browser.close()
    except Exception as e:
        pytest.skip(f"Chromium not available for Playwright: {e}")


def _write_docs(docs: Path, js: str) -> Path:
    docs.mkdir(parents=True, exist_ok=True)
    (docs / "index.html").write_text(
        "<!doctype html><html><head><title>demo</title></head>"
        '<body><canvas id="the_canvas_id"></canvas><script src="demo.js"></script></body></html>',
        encoding="utf-8",
    )
    (docs / "demo.js").write_text(js, encoding="utf-8")
    return docs


def test_page_with_bindings_passes(tmp_path: Path):
    docs = _write_docs(tmp_path / "docs", "function wasm_bindgen() {}\n")

    report = check_docs_page.check_docs(docs, timeout_ms=5000)

    assert report.ok, report.errors
    assert report.title == "demo"
    assert check_docs_page.main(["--dir", str(docs), "--timeout-ms", "5000"]) == 0


def test_page_without_bindings_fails(tmp_path: Path):
    docs = _write_docs(tmp_path / "docs", "// bindings missing\n")

    report = check_docs_page.check_docs(docs, timeout_ms=1000)

    assert not report.has_bindings
    assert not report.ok


def test_page_error_fails(tmp_path: Path):
    docs = _write_docs(
        tmp_path / "docs",
        "function wasm_bindgen() {}\nthrow new Error('init exploded');\n",
    )

    report = check_docs_page.check_docs(docs, timeout_ms=5000)

    assert report.has_bindings
    assert any("init exploded" in e for e in report.errors)
    assert check_docs_page.main(["--dir", str(docs), "--timeout-ms", "5000"]) == 1


def test_missing_index(tmp_path: Path):
    (tmp_path / "docs").mkdir()
    with pytest.raises(SystemExit):
        check_docs_page.main(["--dir", str(tmp_path / "docs")])
