"""
Filesystem adapter — the file and directory effects of a run.

Writes are whole-file overwrites; there is no merge or patch mode.

Action params:
    operation   write | mkdir | remove_tree | list
    path        relative to the workdir, or absolute
    content     text for ``write``
    executable  chmod 0755 after ``write``
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from dxship.adapters.base import Adapter, ExecutionContext
from dxship.core.models.action import Receipt

logger = logging.getLogger(__name__)

OPERATIONS = ("write", "mkdir", "remove_tree", "list")


def human_size(size: int) -> str:
    """Format a byte count the way ``ls -lh`` does (1.2K, 340K, 4.0M)."""
    if size < 1024:
        return str(size)
    value = size / 1024
    unit = "K"
    for next_unit in ("M", "G"):
        if value < 1024:
            break
        value /= 1024
        unit = next_unit
    return f"{value:.1f}{unit}" if value < 10 else f"{value:.0f}{unit}"


class FilesystemAdapter(Adapter):

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation")
        if operation not in OPERATIONS:
            return False, f"Unknown operation {operation!r} (expected one of: {', '.join(OPERATIONS)})"
        if not context.params.get("path"):
            return False, "'path' is required"
        if operation == "write" and not isinstance(context.params.get("content"), str):
            return False, "'content' (str) is required for write"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.params["operation"]
        target = Path(context.resolve(context.params["path"]))
        done = dict(adapter=self.name, action_id=context.action.id)

        try:
            if operation == "write":
                return self._write(context, target, done)
            if operation == "mkdir":
                target.mkdir(parents=True, exist_ok=True)
                return Receipt.success(output=str(target), **done)
            if operation == "remove_tree":
                if not target.exists():
                    return Receipt.skip(reason=f"{target} does not exist", **done)
                shutil.rmtree(target)
                logger.debug("Removed %s", target)
                return Receipt.success(output=f"Deleted {target}", **done)
            return self._list(target, done)
        except OSError as e:
            return Receipt.failure(error=f"{operation} {target}: {e}", **done)

    def _write(self, context: ExecutionContext, target: Path, done: dict) -> Receipt:
        content: str = context.params["content"]
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        if context.params.get("executable"):
            target.chmod(0o755)
        return Receipt.success(output=str(target), metadata={"bytes": len(content.encode())}, **done)

    def _list(self, target: Path, done: dict) -> Receipt:
        """``ls -lh``-style listing; ``metadata["entries"]`` has the raw data."""
        if not target.is_dir():
            return Receipt.failure(error=f"Not a directory: {target}", **done)
        entries = [
            {"name": p.name, "is_dir": p.is_dir(), "size": 0 if p.is_dir() else p.stat().st_size}
            for p in sorted(target.iterdir())
        ]
        lines = [
            f"{'dir':>6}  {e['name']}/" if e["is_dir"] else f"{human_size(e['size']):>6}  {e['name']}"
            for e in entries
        ]
        return Receipt.success(output="\n".join(lines), metadata={"entries": entries}, **done)
