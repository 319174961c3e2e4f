"""
Zip archive adapter — pack a directory's contents into one zip file.

Entries are stored relative to the source directory, so the archive
unpacks flat: ``index.html`` and ``assets/`` at its root, never under
an extra top-level folder. Any existing archive at the target path is
replaced, not appended to.

Two methods:
    cli      ``zip -r -q <archive> .`` run inside the source directory.
    builtin  Python's zipfile module; needs nothing on PATH.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
import zipfile
from pathlib import Path

from dxship.adapters.base import Adapter, ExecutionContext
from dxship.core.models.action import Receipt

logger = logging.getLogger(__name__)

METHODS = ("cli", "builtin")


def zip_cli_available() -> bool:
    return shutil.which("zip") is not None


class ZipArchiveAdapter(Adapter):
    """Create deployment archives.

    Action params:
        source_dir (str): Directory whose contents are archived.
        archive_path (str): Output file.
        method (str): 'cli' or 'builtin' (default: 'builtin').
    """

    @property
    def name(self) -> str:
        return "archive"

    def is_available(self) -> bool:
        # builtin always works; the cli method is checked per action
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        source = context.params.get("source_dir")
        archive = context.params.get("archive_path")
        method = context.params.get("method", "builtin")

        if not source:
            return False, "Missing required param: 'source_dir'"
        if not archive:
            return False, "Missing required param: 'archive_path'"
        if method not in METHODS:
            return False, f"Unknown method '{method}'. Valid: {', '.join(METHODS)}"
        if not Path(context.resolve(source)).is_dir():
            return False, f"Source directory does not exist: {source}"
        if method == "cli" and not zip_cli_available():
            return False, "zip command not found"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        source = Path(context.resolve(context.params["source_dir"])).resolve()
        archive = Path(context.resolve(context.params["archive_path"])).resolve()
        method = context.params.get("method", "builtin")

        start = time.monotonic()
        try:
            if archive.exists():
                archive.unlink()
                logger.debug("Removed stale archive %s", archive)
            archive.parent.mkdir(parents=True, exist_ok=True)

            if method == "cli":
                receipt = self._zip_cli(context, source, archive)
                if not receipt.ok:
                    return receipt
                count = len(_entries(archive))
            else:
                count = self._zip_builtin(source, archive)
        except (OSError, zipfile.BadZipFile) as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Archive error: {e}",
                metadata={"archive_path": str(archive), "source_dir": str(source)},
            )

        size = archive.stat().st_size
        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=f"Created {archive} ({count} entries, {size} bytes)",
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={
                "archive_path": str(archive),
                "size": size,
                "entries": count,
                "method": method,
            },
        )

    def _zip_cli(self, context: ExecutionContext, source: Path, archive: Path) -> Receipt:
        # Relative "." from inside the source keeps the layout flat.
        result = subprocess.run(
            ["zip", "-r", "-q", str(archive), "."],
            cwd=source,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=result.stderr.strip() or f"zip exited with code {result.returncode}",
                return_code=result.returncode,
            )
        return Receipt.success(adapter=self.name, action_id=context.action.id)

    def _zip_builtin(self, source: Path, archive: Path) -> int:
        count = 0
        with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as zf:
            for path in sorted(source.rglob("*")):
                if path == archive:
                    continue
                arcname = path.relative_to(source).as_posix()
                if path.is_dir():
                    zf.write(path, arcname + "/")
                elif path.is_file():
                    zf.write(path, arcname)
                count += 1
        return count


def _entries(archive: Path) -> list[str]:
    with zipfile.ZipFile(archive) as zf:
        return zf.namelist()
