"""
Pipeline — run the four stages strictly in order.

    check → materialize → build → package

Each stage either returns and the state advances, or raises a ShipError
and the state goes to ABORTED. Nothing is rolled back: a failed build
leaves the generated project on disk for debugging.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from dxship.adapters.registry import AdapterRegistry
from dxship.core.config.loader import check_base_path
from dxship.core.errors import ShipError
from dxship.core.models.capability import PrerequisiteReport
from dxship.core.models.config import ShipConfig
from dxship.core.models.state import PipelineStage, PipelineState
from dxship.core.observability.progress import Progress
from dxship.core.services.builder import BuildResult, build_project
from dxship.core.services.materializer import Confirm, MaterializeResult, materialize_project
from dxship.core.services.packager import PackageResult, package_build
from dxship.core.services.prerequisites import check_prerequisites
from dxship.core.services.tool_probe import Which

logger = logging.getLogger(__name__)


@dataclass
class PipelineRun:
    """Everything a run produced, stage by stage."""

    state: PipelineState = field(default_factory=PipelineState)
    warnings: list[str] = field(default_factory=list)
    prerequisites: PrerequisiteReport | None = None
    materialized: MaterializeResult | None = None
    build: BuildResult | None = None
    package: PackageResult | None = None

    def to_dict(self) -> dict:
        result: dict = {
            "stage": self.state.stage.value,
            "history": [s.value for s in self.state.history],
            "warnings": list(self.warnings),
        }
        if self.state.error:
            result["error"] = self.state.error
            result["failed_in"] = self.state.failed_in.value if self.state.failed_in else None
        if self.prerequisites:
            result["prerequisites"] = self.prerequisites.to_dict()
        if self.materialized:
            result["project"] = self.materialized.to_dict()
        if self.build:
            result["build"] = self.build.to_dict()
        if self.package:
            result["package"] = self.package.to_dict()
        return result


def run_pipeline(
    config: ShipConfig,
    workdir: Path,
    confirm: Confirm,
    registry: AdapterRegistry,
    *,
    which: Which = shutil.which,
    progress: Progress | None = None,
    run: PipelineRun | None = None,
) -> PipelineRun:
    """Drive START → CHECKED → MATERIALIZED → BUILT → PACKAGED → DONE.

    ``run`` may be passed in so the caller can still inspect partial
    results after a ShipError propagates.

    Raises:
        ShipError: from whichever stage failed; ``run.state`` is ABORTED.
    """
    progress = progress or Progress()
    run = run or PipelineRun()
    workdir = workdir.resolve()

    try:
        run.warnings.extend(check_base_path(config))
        for problem in run.warnings:
            progress.warning(problem)

        run.prerequisites = check_prerequisites(
            config, registry, workdir=workdir, which=which, progress=progress,
        )
        run.warnings.extend(run.prerequisites.warnings)
        run.state.advance(PipelineStage.CHECKED)

        run.materialized = materialize_project(
            config, workdir, confirm, registry, progress=progress,
        )
        run.state.advance(PipelineStage.MATERIALIZED)

        run.build = build_project(
            config, run.materialized.project_dir, registry, progress=progress,
        )
        run.state.advance(PipelineStage.BUILT)

        run.package = package_build(
            config,
            run.build.build_dir,
            workdir,
            registry,
            zip_available=run.prerequisites.has("zip"),
            progress=progress,
        )
        if run.package.skipped:
            run.warnings.append(run.package.reason)
        run.state.advance(PipelineStage.PACKAGED)

    except ShipError as e:
        logger.debug("Pipeline aborted in %s: %s", run.state.stage.value, e)
        run.state.abort(str(e))
        raise

    run.state.advance(PipelineStage.DONE)
    logger.info("Pipeline finished: %s", " → ".join(s.value for s in run.state.history))
    return run
