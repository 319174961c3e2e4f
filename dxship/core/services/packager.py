"""
Packager — zip the build output for manual upload.

The archive holds the *contents* of the build directory at its root;
hosting expects ``index.html`` directly inside the base-path folder.
A previous archive of the same name is always replaced.

With ``archiver: zip`` and no zip binary the stage is skipped with a
pointer to the raw files; that degrades the run, it does not fail it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from dxship.adapters.archive.zip import zip_cli_available
from dxship.adapters.registry import AdapterRegistry
from dxship.adapters.shell.filesystem import human_size
from dxship.core.errors import PackagingError
from dxship.core.models.action import Action
from dxship.core.models.config import ShipConfig
from dxship.core.observability.progress import Progress

logger = logging.getLogger(__name__)


@dataclass
class PackageResult:
    archive_path: Path | None = None
    size: int = 0
    entries: int = 0
    skipped: bool = False
    reason: str = ""

    def to_dict(self) -> dict:
        return {
            "archive_path": str(self.archive_path) if self.archive_path else None,
            "size": self.size,
            "entries": self.entries,
            "skipped": self.skipped,
            "reason": self.reason,
        }


def archive_path_for(config: ShipConfig, workdir: Path) -> Path:
    return workdir / config.archive_name


def package_build(
    config: ShipConfig,
    build_dir: Path,
    workdir: Path,
    registry: AdapterRegistry,
    *,
    zip_available: bool | None = None,
    progress: Progress | None = None,
) -> PackageResult:
    """Create ``<workdir>/<archive_name>`` from the build directory's contents.

    Args:
        zip_available: Result of the prerequisite check for the zip CLI.
            None means probe now.

    Raises:
        PackagingError: the archiver ran and failed.
    """
    progress = progress or Progress()
    progress.header("Creating Deployment Package")

    if config.archiver == "zip":
        if zip_available is None:
            zip_available = zip_cli_available()
        if not zip_available:
            progress.warning("zip command not found. Skipping package creation.")
            progress.info(f"You can manually copy files from: {build_dir}")
            return PackageResult(skipped=True, reason="zip command not found")
        method = "cli"
    else:
        method = "builtin"

    archive = archive_path_for(config, workdir)
    receipt = registry.execute_action(
        Action(
            id="package-archive",
            adapter="archive",
            stage="package",
            params={
                "source_dir": str(build_dir),
                "archive_path": str(archive),
                "method": method,
            },
        ),
        workdir=str(workdir),
    )
    if not receipt.ok:
        progress.error("Could not create deployment package")
        raise PackagingError(receipt.error or "archive creation failed")

    size = int(receipt.metadata.get("size", 0))
    result = PackageResult(
        archive_path=archive,
        size=size,
        entries=int(receipt.metadata.get("entries", 0)),
    )
    progress.success(f"Created deployment package: {config.archive_name} ({human_size(size)})")
    logger.info("Archive %s: %d entries, %d bytes (%s)", archive, result.entries, size, method)
    return result
