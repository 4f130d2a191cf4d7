"""
One-time toolchain setup for `build-web`.

Steps (in order, stop at first failure):
- rustup target add wasm32-unknown-unknown
- cargo install -f wasm-bindgen-cli
- cargo update -p wasm-bindgen   (keep the crate's wasm-bindgen in lock-step with the CLI)

Usage:
  uv run python -m webbuild.setup_web
  uv run python -m webbuild.setup_web --skip-update
"""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

from webbuild.build_web import WASM_TARGET, BuildError, require_tool


class SetupError(BuildError):
    pass


def setup_steps(*, target: str = WASM_TARGET, skip_update: bool = False) -> list[list[str]]:
    steps = [
        ["rustup", "target", "add", target],
        ["cargo", "install", "-f", "wasm-bindgen-cli"],
    ]
    if not skip_update:
        steps.append(["cargo", "update", "-p", "wasm-bindgen"])
    return steps


def setup(*, project_root: Path, skip_update: bool = False) -> None:
    steps = setup_steps(skip_update=skip_update)
    for tool in sorted({cmd[0] for cmd in steps}):
        require_tool(tool)

    for cmd in steps:
        print(" ".join(cmd))
        try:
            subprocess.run(cmd, cwd=str(project_root), check=True)
        except subprocess.CalledProcessError as e:
            raise SetupError(f"Setup step failed: {' '.join(cmd)} (exit {e.returncode})", returncode=e.returncode) from e


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Install the wasm32 target and wasm-bindgen CLI.")
    parser.add_argument("--project-root", default=".")
    parser.add_argument("--skip-update", action="store_true", help="Do not run `cargo update -p wasm-bindgen`.")
    args = parser.parse_args(argv)

    try:
        setup(project_root=Path(args.project_root).resolve(), skip_update=bool(args.skip_update))
    except BuildError as e:
        print(f"FAIL: {e}", file=sys.stderr)
        return e.returncode
    print("OK: web toolchain ready")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
