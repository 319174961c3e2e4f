"""
Shell command adapter — run an external tool and capture its output.

Commands are argument lists, never shell strings. No timeout is applied:
a compiler that hangs hangs the run, exactly like running it by hand.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
import time
from pathlib import Path

from dxship.adapters.base import Adapter, ExecutionContext
from dxship.core.models.action import Receipt

logger = logging.getLogger(__name__)


class ShellCommandAdapter(Adapter):
    """Execute commands and capture output.

    Action params:
        command (list[str]): argv of the command to execute.
        cwd (str): Working directory (default: context.workdir).
        stream (bool): Let the tool write straight to stderr instead of
            capturing (used for long builds so progress stays visible).
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.params.get("command")
        if not command:
            return False, "Missing required param: 'command'"
        if isinstance(command, str):
            return False, "Param 'command' must be an argument list, not a string"

        cwd = context.params.get("cwd", context.workdir)
        if cwd and not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        if shutil.which(command[0]) is None:
            return False, f"Command not found: {command[0]}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command: list[str] = list(context.params["command"])
        cwd = context.params.get("cwd", context.workdir)
        stream = bool(context.params.get("stream", False))
        display = " ".join(command)

        logger.debug("Executing: %s (cwd=%s)", display, cwd)
        start = time.monotonic()

        try:
            if stream:
                # stdout belongs to dxship (--json); the tool's progress goes to stderr
                result = subprocess.run(command, cwd=cwd, stdout=sys.stderr, text=True)
            else:
                result = subprocess.run(command, cwd=cwd, capture_output=True, text=True)
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Cannot run {command[0]}: {e}",
                metadata={"command": command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=output,
                duration_ms=elapsed_ms,
                return_code=0,
                metadata={"command": command, "stderr": stderr},
            )

        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=stderr or f"{display} exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            return_code=result.returncode,
            metadata={"command": command, "stdout": output},
        )
