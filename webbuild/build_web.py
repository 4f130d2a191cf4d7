"""
Build the Rust crate -> WebAssembly and generate JS bindings into docs/ for static hosting.

Run `setup-web` (webbuild/setup_web.py) once first so the wasm32 target and
wasm-bindgen CLI are installed.

Determinism:
- Uses explicit wasm32-unknown-unknown target.
- Deletes docs/<crate>_bg.wasm before building so a failed run never leaves a stale binary behind.

Usage:
  uv run python -m webbuild.build_web
  uv run python -m webbuild.build_web --crate egui_template --out-dir docs
  uv run python -m webbuild.build_web --debug
"""

from __future__ import annotations

import argparse
import os
import shutil
import subprocess
import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path


DEFAULT_OUT_DIR = Path("docs")
WASM_TARGET = "wasm32-unknown-unknown"

# web_sys only exposes the clipboard API (used by egui_web) behind this cfg.
# https://rustwasm.github.io/docs/wasm-bindgen/web-sys/unstable-apis.html
UNSTABLE_RUSTFLAGS = "--cfg=web_sys_unstable_apis"

# Exit status a shell reports for a command that cannot be found.
TOOL_NOT_FOUND_RC = 127


class BuildError(RuntimeError):
    def __init__(self, message: str, *, returncode: int = 1):
        super().__init__(message)
        self.returncode = returncode


class ToolNotFound(BuildError):
    def __init__(self, tool: str):
        super().__init__(f"Missing tool on PATH: {tool}", returncode=TOOL_NOT_FOUND_RC)
        self.tool = tool


class CompilationError(BuildError):
    pass


class BindingGenerationError(BuildError):
    pass


class FileCleanupWarning(UserWarning):
    pass


def crate_name_from_dir(path: Path) -> str:
    # Assume the crate is named like the folder it lives in.
    return Path(path).resolve().name


@dataclass(frozen=True)
class BuildConfig:
    project_root: Path
    crate_name: str = ""
    out_dir: Path = DEFAULT_OUT_DIR
    profile: str = "release"
    target: str = WASM_TARGET

    def __post_init__(self) -> None:
        root = Path(self.project_root).resolve()
        object.__setattr__(self, "project_root", root)
        if not self.crate_name:
            object.__setattr__(self, "crate_name", crate_name_from_dir(root))
        out_dir = Path(self.out_dir)
        if not out_dir.is_absolute():
            out_dir = root / out_dir
        object.__setattr__(self, "out_dir", out_dir)
        if self.profile not in ("release", "debug"):
            raise ValueError(f"Unknown build profile: {self.profile!r}")

    @property
    def release(self) -> bool:
        return self.profile == "release"


@dataclass(frozen=True)
class BuildResult:
    wasm_path: Path
    js_path: Path
    files: list[Path] = field(default_factory=list)


def build_env(base: dict[str, str] | None = None) -> dict[str, str]:
    env = dict(os.environ if base is None else base)
    env["RUSTFLAGS"] = UNSTABLE_RUSTFLAGS
    return env


def stale_wasm_path(config: BuildConfig) -> Path:
    return config.out_dir / f"{config.crate_name}_bg.wasm"


def remove_stale_wasm(config: BuildConfig) -> bool:
    """Delete the previous bindgen output; True if a file was removed."""
    path = stale_wasm_path(config)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        warnings.warn(f"Could not remove {path}: {e}", FileCleanupWarning, stacklevel=2)
        return False
    return True


def cargo_command(config: BuildConfig) -> list[str]:
    cmd = ["cargo", "build"]
    if config.release:
        cmd.append("--release")
    cmd += ["-p", config.crate_name, "--lib", "--target", config.target]
    return cmd


def compiled_wasm_path(config: BuildConfig) -> Path:
    return config.project_root / "target" / config.target / config.profile / f"{config.crate_name}.wasm"


def wasm_bindgen_command(config: BuildConfig, wasm_path: Path) -> list[str]:
    return [
        "wasm-bindgen",
        str(wasm_path),
        "--out-dir",
        str(config.out_dir),
        "--no-modules",
        "--no-typescript",
    ]


def require_tool(name: str) -> str:
    path = shutil.which(name)
    if not path:
        raise ToolNotFound(name)
    return path


def _run(cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None) -> None:
    subprocess.run(cmd, cwd=str(cwd), env=env, check=True)


def _generated_files(config: BuildConfig) -> list[Path]:
    prefix = config.crate_name
    return sorted(
        p for p in config.out_dir.glob(f"{prefix}*") if p.is_file() and p.stem in (prefix, f"{prefix}_bg")
    )


def build(config: BuildConfig) -> BuildResult:
    require_tool("cargo")
    require_tool("wasm-bindgen")

    env = build_env()

    # Clear output from old stuff:
    remove_stale_wasm(config)

    print("Building rust…")
    try:
        _run(cargo_command(config), cwd=config.project_root, env=env)
    except FileNotFoundError as e:
        raise ToolNotFound("cargo") from e
    except subprocess.CalledProcessError as e:
        raise CompilationError(
            f"cargo build failed for crate {config.crate_name!r} (exit {e.returncode})",
            returncode=e.returncode,
        ) from e

    wasm_src = compiled_wasm_path(config)
    if not wasm_src.exists():
        raise CompilationError(f"Build did not produce wasm: {wasm_src}")

    print("Generating JS bindings for wasm…")
    try:
        _run(wasm_bindgen_command(config, wasm_src), cwd=config.project_root)
    except FileNotFoundError as e:
        raise ToolNotFound("wasm-bindgen") from e
    except subprocess.CalledProcessError as e:
        raise BindingGenerationError(
            f"wasm-bindgen failed for {wasm_src} (exit {e.returncode})",
            returncode=e.returncode,
        ) from e

    result = BuildResult(
        wasm_path=stale_wasm_path(config),
        js_path=config.out_dir / f"{config.crate_name}.js",
        files=_generated_files(config),
    )
    if not result.wasm_path.exists():
        raise BindingGenerationError(f"wasm-bindgen did not produce: {result.wasm_path}")

    print(f"Finished: {result.wasm_path}")
    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build the Rust crate to wasm and generate JS bindings into docs/.")
    parser.add_argument("--project-root", default=".", help="Cargo workspace root (default: cwd).")
    parser.add_argument("--crate", default="", help="Crate to build (default: name of the project root folder).")
    parser.add_argument("--out-dir", default=str(DEFAULT_OUT_DIR), help="Output dir, relative to the project root.")
    parser.add_argument("--debug", action="store_true", help="Build debug (default is release).")
    args = parser.parse_args(argv)

    config = BuildConfig(
        project_root=Path(args.project_root),
        crate_name=args.crate,
        out_dir=Path(args.out_dir),
        profile="debug" if args.debug else "release",
    )
    try:
        build(config)
    except BuildError as e:
        print(f"FAIL: {e}", file=sys.stderr)
        return e.returncode
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
