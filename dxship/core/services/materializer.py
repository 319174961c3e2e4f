"""
Project materializer — write the template set into a fresh directory.

An existing project directory is never merged into: the user confirms,
the whole tree is deleted and recreated. Declining leaves it untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from dxship.adapters.registry import AdapterRegistry
from dxship.core.errors import MaterializeError, UserAbortError
from dxship.core.models.action import Action, Receipt
from dxship.core.models.config import ShipConfig
from dxship.core.observability.progress import Progress
from dxship.core.services.generators import generate_project_files

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


@dataclass
class MaterializeResult:
    project_dir: Path
    files: list[str] = field(default_factory=list)
    replaced_existing: bool = False

    def to_dict(self) -> dict:
        return {
            "project_dir": str(self.project_dir),
            "files": list(self.files),
            "replaced_existing": self.replaced_existing,
        }


def materialize_project(
    config: ShipConfig,
    workdir: Path,
    confirm: Confirm,
    registry: AdapterRegistry,
    *,
    progress: Progress | None = None,
) -> MaterializeResult:
    """Create ``<workdir>/<project_name>`` and write every template file.

    Raises:
        UserAbortError: the directory exists and the user declined.
        MaterializeError: a filesystem operation failed.
    """
    progress = progress or Progress()
    project_dir = workdir / config.project_name
    result = MaterializeResult(project_dir=project_dir)

    progress.header("Creating Project Structure")

    if project_dir.exists():
        progress.error(f"Directory '{config.project_name}' already exists!")
        if not confirm("Delete and recreate?"):
            progress.error("Aborted")
            raise UserAbortError(f"Directory '{config.project_name}' already exists; not overwritten")
        _require(registry, _fs("remove-project-dir", "remove_tree", str(project_dir)), workdir)
        result.replaced_existing = True
        progress.info("Deleted existing directory")

    # mkdir -p, so a fresh workdir is created here too
    _require(registry, _fs("create-project-dir", "mkdir", str(project_dir / "src")), workdir)
    progress.success(f"Created project directory: {config.project_name}")

    for generated in generate_project_files(config):
        progress.info(f"Creating {generated.path}...")
        action = _fs(
            f"write-{generated.path}",
            "write",
            generated.path,
            content=generated.content,
            executable=generated.executable,
        )
        _require(registry, action, project_dir)
        result.files.append(generated.path)
        progress.success(f"Created {generated.path}" + (f" ({generated.reason})" if generated.reason else ""))

    progress.warning("IMPORTANT: base_path must match your deployment folder name!")
    logger.info("Materialized %d files into %s", len(result.files), project_dir)
    return result


def _fs(action_id: str, operation: str, path: str, **params) -> Action:
    return Action(
        id=action_id,
        adapter="filesystem",
        stage="materialize",
        params={"operation": operation, "path": path, **params},
    )


def _require(registry: AdapterRegistry, action: Action, workdir: Path) -> Receipt:
    receipt = registry.execute_action(action, workdir=str(workdir))
    if receipt.failed:
        raise MaterializeError(f"{action.id}: {receipt.error}")
    return receipt
