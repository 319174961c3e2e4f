"""
Prerequisite checker — make sure the Rust/Dioxus toolchain is usable.

Tiers:
    cargo        mandatory     absent → MissingToolError with install steps
    wasm target  installable   absent → ``rustup target add``, re-verify
    dx           installable   absent → ``cargo install dioxus-cli``, re-verify
    zip          optional      absent → warning; packaging degrades later

Automatic installs hit the network and can take minutes (dx is compiled
from source). Nothing here touches the project directory, so a failed
check leaves the filesystem exactly as it was.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable

from dxship.adapters.registry import AdapterRegistry
from dxship.core.errors import MissingToolError
from dxship.core.models.capability import (
    CapabilityResult,
    CapabilityStatus,
    PrerequisiteReport,
    ToolTier,
)
from dxship.core.models.config import ShipConfig
from dxship.core.observability.progress import Progress
from dxship.core.services.tool_probe import Which, ToolProbe, probe_rust_target, probe_tool

logger = logging.getLogger(__name__)

CARGO_HINTS = [
    "Install Rust from: https://rustup.rs/",
    "Run: curl --proto '=https' --tlsv1.2 -sSf https://sh.rustup.rs | sh",
]

ZIP_HINTS = [
    "Ubuntu/Debian: sudo apt-get install zip",
    "macOS: (already installed)",
]

CARGO_PROBE = ToolProbe(
    tool="cargo",
    executable="cargo",
    tier=ToolTier.MANDATORY,
    version_command=("cargo", "--version"),
    version_pattern=r"cargo\s+(\d+\.\d+\.\d+)",
)

ZIP_PROBE = ToolProbe(tool="zip", executable="zip", tier=ToolTier.OPTIONAL)


def dx_probe(config: ShipConfig) -> ToolProbe:
    return ToolProbe(
        tool="dx",
        executable="dx",
        tier=ToolTier.INSTALLABLE,
        version_command=("dx", "--version"),
        version_pattern=r"(\d+\.\d+\.\d+)",
        expected_version=config.dioxus_version,
    )


def check_prerequisites(
    config: ShipConfig,
    registry: AdapterRegistry,
    *,
    workdir: Path | None = None,
    which: Which = shutil.which,
    progress: Progress | None = None,
) -> PrerequisiteReport:
    """Probe every tool, installing the installable ones when absent.

    Raises:
        MissingToolError: cargo is absent, or an automatic install failed.
    """
    progress = progress or Progress()
    # The workdir may not exist yet; the materializer creates it
    cwd = str(workdir if workdir is not None and workdir.is_dir() else Path.cwd())
    report = PrerequisiteReport()

    progress.header("Checking Prerequisites")

    # ── cargo (mandatory) ───────────────────────────────────────
    cargo = probe_tool(CARGO_PROBE, registry, cwd=cwd, which=which)
    report.results.append(cargo)
    if not cargo.usable:
        progress.error("Cargo not found!")
        for hint in CARGO_HINTS:
            progress.detail(hint)
        raise MissingToolError("cargo", "Cargo not found", hints=CARGO_HINTS)
    progress.success(f"Cargo found: {cargo.detail or cargo.version}")

    # ── wasm target (installable) ───────────────────────────────
    target = probe_rust_target(config.wasm_target, registry, cwd=cwd, which=which)
    if not target.usable:
        progress.warning("WASM target not installed. Installing now...")
        target = _install(
            tool=config.wasm_target,
            command=["rustup", "target", "add", config.wasm_target],
            reprobe=lambda: probe_rust_target(
                config.wasm_target, registry, cwd=cwd, which=which,
                action_id="verify-wasm-target",
            ),
            registry=registry,
            cwd=cwd,
            which=which,
        )
    report.results.append(target)
    progress.success("WASM target installed")

    # ── dx (installable) ────────────────────────────────────────
    probe = dx_probe(config)
    dx = probe_tool(probe, registry, cwd=cwd, which=which)
    if not dx.usable:
        progress.warning("Dioxus CLI not found. Installing now (this may take a few minutes)...")
        dx = _install(
            tool="dx",
            command=["cargo", "install", "dioxus-cli"],
            reprobe=lambda: probe_tool(probe, registry, cwd=cwd, which=which, action_id="verify-dx"),
            registry=registry,
            cwd=cwd,
            which=which,
        )
    report.results.append(dx)
    if dx.status is CapabilityStatus.WRONG_VERSION:
        message = (
            f"Dioxus CLI {dx.version} does not match dioxus {config.dioxus_version} "
            "in Cargo.toml; the build may fail"
        )
        report.warnings.append(message)
        progress.warning(message)
    progress.success(f"Dioxus CLI found: {dx.detail or dx.version}")

    # ── zip (optional) ──────────────────────────────────────────
    zip_result = probe_tool(ZIP_PROBE, registry, cwd=cwd, which=which)
    report.results.append(zip_result)
    if zip_result.usable:
        progress.success("zip found")
    else:
        message = "zip not found. Install it for easier deployment."
        report.warnings.append(message)
        progress.warning(message)
        for hint in ZIP_HINTS:
            progress.detail(hint)

    logger.info("Prerequisites: %s", {r.tool: r.status.value for r in report.results})
    return report


def _install(
    *,
    tool: str,
    command: list[str],
    reprobe: Callable[[], CapabilityResult],
    registry: AdapterRegistry,
    cwd: str,
    which: Which,
) -> CapabilityResult:
    """Run an install command, then re-verify. No retries."""
    if which(command[0]) is None:
        raise MissingToolError(
            tool,
            f"{tool} is missing and {command[0]} is not available to install it",
            hints=CARGO_HINTS,
        )

    logger.info("Installing %s: %s", tool, " ".join(command))
    receipt = registry.run(f"install-{tool}", command, cwd=cwd, stage="check", stream=True)
    if not receipt.ok:
        raise MissingToolError(
            tool,
            f"Automatic installation of {tool} failed: {receipt.error}",
            hints=[f"Run manually: {' '.join(command)}"],
        )

    result = reprobe()
    if not result.usable:
        raise MissingToolError(
            tool,
            f"{tool} still not available after installation ({result.detail})",
            hints=[f"Run manually: {' '.join(command)}"],
        )
    return result.model_copy(update={"installed_now": True})
