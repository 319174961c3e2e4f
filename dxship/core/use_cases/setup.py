"""
Setup use cases — what the CLI commands call.

``run_setup`` is the full scaffold → build → package run. The other
functions run one stage on its own against an existing workdir. All of
them return a result object instead of raising, so the CLI only has to
print and pick an exit code.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dxship.adapters.registry import AdapterRegistry
from dxship.core.config.loader import check_base_path
from dxship.core.engine.pipeline import PipelineRun, run_pipeline
from dxship.core.errors import MissingToolError, ShipError, UserAbortError
from dxship.core.models.action import Action
from dxship.core.models.config import ShipConfig
from dxship.core.models.template import GeneratedFile
from dxship.core.observability.progress import Progress
from dxship.core.services.builder import build_output_dir, build_project
from dxship.core.services.generators import generate_dogfood_workflow
from dxship.core.services.materializer import Confirm, materialize_project
from dxship.core.services.packager import package_build
from dxship.core.services.prerequisites import check_prerequisites
from dxship.core.services.tool_probe import Which

logger = logging.getLogger(__name__)


@dataclass
class SetupResult:
    """Outcome of a command: payload on success, error on failure."""

    ok: bool = False
    error: str | None = None
    hints: list[str] = field(default_factory=list)
    stderr: str = ""
    exit_code: int = 0
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        result: dict = {"ok": self.ok, **self.data}
        if self.error:
            result["error"] = self.error
        if self.hints:
            result["hints"] = list(self.hints)
        return result

    @classmethod
    def from_error(cls, error: ShipError, data: dict[str, Any] | None = None) -> SetupResult:
        result = cls(ok=False, error=str(error), exit_code=error.exit_code, data=data or {})
        if isinstance(error, MissingToolError):
            result.hints = list(error.hints)
        result.stderr = getattr(error, "stderr", "") or ""
        return result


def run_setup(
    config: ShipConfig,
    workdir: Path,
    confirm: Confirm,
    *,
    registry: AdapterRegistry | None = None,
    which: Which = shutil.which,
    progress: Progress | None = None,
) -> SetupResult:
    """Ask to continue, then run the whole pipeline."""
    progress = progress or Progress()
    registry = registry or AdapterRegistry.default()

    progress.header(f"{config.app_title} Setup")
    progress.info("This script will:")
    for step in (
        "1. Check prerequisites (Rust, dx CLI, etc.)",
        "2. Create project structure",
        "3. Generate all necessary files",
        "4. Build the project",
        "5. Create deployment package",
    ):
        progress.detail(step)
    progress.info(f"Project: {config.project_name}")
    progress.info(f"Base path: {config.base_path} (must match deployment folder name!)")

    if not confirm("Continue?"):
        progress.info("Aborted")
        return SetupResult.from_error(UserAbortError("Aborted by user"))

    run = PipelineRun()
    try:
        run_pipeline(
            config, workdir, confirm, registry,
            which=which, progress=progress, run=run,
        )
    except ShipError as e:
        logger.debug("Setup failed", exc_info=True)
        return SetupResult.from_error(e, data=run.to_dict())

    return SetupResult(ok=True, data=run.to_dict())


def run_check(
    config: ShipConfig,
    workdir: Path,
    *,
    registry: AdapterRegistry | None = None,
    which: Which = shutil.which,
    progress: Progress | None = None,
) -> SetupResult:
    registry = registry or AdapterRegistry.default()
    try:
        report = check_prerequisites(config, registry, workdir=workdir, which=which, progress=progress)
    except ShipError as e:
        return SetupResult.from_error(e)
    return SetupResult(ok=True, data={"prerequisites": report.to_dict()})


def run_scaffold(
    config: ShipConfig,
    workdir: Path,
    confirm: Confirm,
    *,
    registry: AdapterRegistry | None = None,
    progress: Progress | None = None,
) -> SetupResult:
    registry = registry or AdapterRegistry.default()
    try:
        warnings = check_base_path(config)
        if progress:
            for problem in warnings:
                progress.warning(problem)
        result = materialize_project(config, workdir.resolve(), confirm, registry, progress=progress)
    except ShipError as e:
        return SetupResult.from_error(e)
    return SetupResult(ok=True, data={"project": result.to_dict(), "warnings": warnings})


def run_build(
    config: ShipConfig,
    workdir: Path,
    *,
    registry: AdapterRegistry | None = None,
    progress: Progress | None = None,
) -> SetupResult:
    """Build an already materialized project in ``<workdir>/<project_name>``."""
    registry = registry or AdapterRegistry.default()
    project_dir = workdir.resolve() / config.project_name
    if not (project_dir / "Cargo.toml").is_file():
        return SetupResult(
            ok=False,
            error=f"No project at {project_dir}; run 'dxship scaffold' first",
            exit_code=1,
        )
    try:
        result = build_project(config, project_dir, registry, progress=progress)
    except ShipError as e:
        return SetupResult.from_error(e)
    return SetupResult(ok=True, data={"build": result.to_dict()})


def run_package(
    config: ShipConfig,
    workdir: Path,
    *,
    registry: AdapterRegistry | None = None,
    progress: Progress | None = None,
) -> SetupResult:
    """Archive an existing build output without rebuilding."""
    registry = registry or AdapterRegistry.default()
    workdir = workdir.resolve()
    build_dir = build_output_dir(config, workdir / config.project_name)
    if not build_dir.is_dir():
        return SetupResult(
            ok=False,
            error=f"Build output not found: {build_dir}; run 'dxship build' first",
            exit_code=1,
        )
    try:
        result = package_build(config, build_dir, workdir, registry, progress=progress)
    except ShipError as e:
        return SetupResult.from_error(e)
    return SetupResult(ok=True, data={"package": result.to_dict()})


def write_workflow(
    config: ShipConfig,
    repo_root: Path,
    *,
    branch: str = "main",
    force: bool = False,
    registry: AdapterRegistry | None = None,
) -> SetupResult:
    """Write the dogfooding workflow into ``repo_root``."""
    registry = registry or AdapterRegistry.default()
    generated: GeneratedFile = generate_dogfood_workflow(config, branch=branch)
    target = repo_root / generated.path
    if target.exists() and not force:
        return SetupResult(
            ok=False,
            error=f"{generated.path} already exists (use --force to overwrite)",
            exit_code=1,
        )
    receipt = registry.execute_action(
        Action(
            id="write-workflow",
            adapter="filesystem",
            params={"operation": "write", "path": generated.path, "content": generated.content},
        ),
        workdir=str(repo_root),
    )
    if receipt.failed:
        return SetupResult(ok=False, error=receipt.error, exit_code=1)
    logger.info("Wrote %s", target)
    return SetupResult(ok=True, data={"path": str(target)})
