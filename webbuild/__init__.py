"""Web build tooling: Rust crate -> wasm + JS bindings in docs/."""
