"""
Adapter registry — the one door every side effect of a run goes through.

Services build an Action and call ``execute_action`` (or ``run`` for a
shell command); they never hold an adapter themselves. Whatever happens
inside an adapter, the caller gets a Receipt back.
"""

from __future__ import annotations

import logging
import time

from dxship.adapters.base import Adapter, ExecutionContext
from dxship.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


def _refuse(action: Action, error: str, **kwargs) -> Receipt:
    return Receipt.failure(adapter=action.adapter, action_id=action.id, error=error, **kwargs)


class AdapterRegistry:
    """Adapters keyed by name; dispatches Actions to them."""

    def __init__(self) -> None:
        self._adapters: dict[str, Adapter] = {}

    @classmethod
    def default(cls) -> AdapterRegistry:
        """The real shell, filesystem and archive adapters."""
        from dxship.adapters.archive.zip import ZipArchiveAdapter
        from dxship.adapters.shell.command import ShellCommandAdapter
        from dxship.adapters.shell.filesystem import FilesystemAdapter

        registry = cls()
        for adapter in (ShellCommandAdapter(), FilesystemAdapter(), ZipArchiveAdapter()):
            registry.register(adapter)
        return registry

    def register(self, adapter: Adapter) -> None:
        """Add an adapter; a later one with the same name replaces the earlier."""
        if adapter.name in self._adapters:
            logger.debug("Replacing adapter %s with %r", adapter.name, adapter)
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    @property
    def names(self) -> list[str]:
        return sorted(self._adapters)

    def __contains__(self, name: str) -> bool:
        return name in self._adapters

    def execute_action(self, action: Action, workdir: str = ".") -> Receipt:
        """Validate and execute ``action``. Never raises.

        Unknown adapter, unavailable adapter, failed validation and an
        adapter that raises all come back as failed receipts.
        """
        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return _refuse(action, f"No adapter registered for '{action.adapter}'")
        if not adapter.is_available():
            return _refuse(action, f"Adapter '{action.adapter}' is not available")

        started = time.monotonic()
        context = ExecutionContext(action=action, workdir=workdir)
        try:
            valid, problem = adapter.validate(context)
            if not valid:
                return _refuse(action, f"Validation failed: {problem}", metadata={"validation": True})
            receipt = adapter.execute(context)
        except Exception as e:
            logger.exception("Adapter %s raised on %s", action.adapter, action.id)
            receipt = _refuse(action, f"Unexpected error: {e}")

        if not receipt.duration_ms:
            receipt.duration_ms = int((time.monotonic() - started) * 1000)
        logger.debug("[%s] %s:%s %s in %dms", action.stage or "-", action.adapter, action.id,
                     receipt.status, receipt.duration_ms)
        return receipt

    def run(
        self,
        action_id: str,
        command: list[str],
        *,
        cwd: str,
        stage: str = "",
        stream: bool = False,
    ) -> Receipt:
        """Dispatch ``command`` to the shell adapter, running in ``cwd``."""
        action = Action(
            id=action_id,
            adapter="shell",
            stage=stage,
            params={"command": command, "cwd": cwd, "stream": stream},
        )
        return self.execute_action(action, workdir=cwd)
