"""
Cargo.toml generator — package manifest tuned for a small WASM bundle.
"""

from __future__ import annotations

from dxship.core.models.config import ShipConfig
from dxship.core.models.template import GeneratedFile


def generate_cargo_toml(config: ShipConfig) -> GeneratedFile:
    """Manifest with the Dioxus web feature and a size-optimized release profile.

    wasm-bindgen is pinned exactly: the CLI refuses to bundle when the
    crate and its own bindgen disagree.
    """
    content = f"""\
[package]
name = "{config.project_name}"
version = "0.1.0"
edition = "2021"

[dependencies]
dioxus = {{ version = "{config.dioxus_version}", features = ["web"] }}
wasm-bindgen = "={config.wasm_bindgen_version}"

[profile.release]
opt-level = "z"     # Optimize for size
lto = true          # Enable link-time optimization
codegen-units = 1   # Better optimization
panic = "abort"     # Smaller binary size
strip = true        # Remove debug symbols
"""
    return GeneratedFile(
        path="Cargo.toml",
        content=content,
        reason=f"Package manifest (Dioxus {config.dioxus_version})",
    )
