"""
Build invoker — compile the project to a static WASM bundle.

    cargo check                          fast static check, aborts early
    dx build --release --platform web    full release build
    test -d target/dx/<name>/release/web/public

The last step is a cross-check: a build that exits 0 but leaves no
output directory is still a failed build. No retries; the tool's own
diagnostics are passed through untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from dxship.adapters.registry import AdapterRegistry
from dxship.core.errors import BuildOutputMissingError, ExternalToolError
from dxship.core.models.action import Action, Receipt
from dxship.core.models.config import ShipConfig
from dxship.core.observability.progress import Progress

logger = logging.getLogger(__name__)

CHECK_COMMAND = ["cargo", "check"]
BUILD_COMMAND = ["dx", "build", "--release", "--platform", "web"]


@dataclass
class BuildResult:
    build_dir: Path
    listing: str = ""
    assets_listing: str = ""
    check_ms: int = 0
    build_ms: int = 0
    files: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "build_dir": str(self.build_dir),
            "check_ms": self.check_ms,
            "build_ms": self.build_ms,
            "files": self.files,
        }


def build_output_dir(config: ShipConfig, project_dir: Path) -> Path:
    return project_dir / Path(*config.build_output_rel.parts)


def build_project(
    config: ShipConfig,
    project_dir: Path,
    registry: AdapterRegistry,
    *,
    progress: Progress | None = None,
) -> BuildResult:
    """Check, build, and verify the output directory.

    Raises:
        ExternalToolError: cargo check or dx build exited non-zero.
        BuildOutputMissingError: dx build succeeded but produced no output dir.
    """
    progress = progress or Progress()
    progress.header("Building Project")

    progress.info("Running initial cargo check...")
    check = registry.run("build-check", CHECK_COMMAND, cwd=str(project_dir), stage="build", stream=True)
    _raise_on_failure(check, CHECK_COMMAND, progress)

    progress.info("Building for release (this will take a few minutes on first build)...")
    build = registry.run("build-release", BUILD_COMMAND, cwd=str(project_dir), stage="build", stream=True)
    _raise_on_failure(build, BUILD_COMMAND, progress)

    build_dir = build_output_dir(config, project_dir)
    if not build_dir.is_dir():
        progress.error("Build failed - output directory not found!")
        raise BuildOutputMissingError(
            f"Build reported success but {config.build_output_rel} does not exist",
            command=BUILD_COMMAND,
            return_code=0,
        )

    progress.success("Build complete!")
    result = BuildResult(build_dir=build_dir, check_ms=check.duration_ms, build_ms=build.duration_ms)

    listing = _list(registry, "list-build-output", build_dir)
    if listing.ok:
        result.listing = listing.output
        result.files = listing.metadata.get("entries", [])
        progress.info("Build output:")
        for line in listing.output.splitlines():
            progress.detail(line)

    if (build_dir / "assets").is_dir():
        assets = _list(registry, "list-build-assets", build_dir / "assets")
        if assets.ok:
            result.assets_listing = assets.output
            for line in assets.output.splitlines():
                progress.detail(f"assets/ {line.strip()}")

    logger.info("Build finished: %s", build_dir)
    return result


def _raise_on_failure(receipt: Receipt, command: list[str], progress: Progress) -> None:
    if receipt.ok:
        return
    display = " ".join(command)
    progress.error(f"{display} failed")
    raise ExternalToolError(
        f"{display} failed (exit code {receipt.return_code})",
        command=command,
        return_code=receipt.return_code,
        stderr=receipt.error or "",
    )


def _list(registry: AdapterRegistry, action_id: str, path: Path) -> Receipt:
    return registry.execute_action(
        Action(
            id=action_id,
            adapter="filesystem",
            stage="build",
            params={"operation": "list", "path": str(path)},
        ),
        workdir=str(path),
    )
