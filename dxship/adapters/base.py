"""
Adapter contract.

An adapter owns one kind of side effect (running a command, touching
files, writing an archive). Services reach it only through the
AdapterRegistry, so replacing the "shell" adapter with a MockAdapter
turns a real toolchain run into a scripted one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel

from dxship.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    action: Action
    workdir: str = "."

    @property
    def params(self) -> dict:
        return self.action.params

    def resolve(self, raw: str) -> str:
        """Relative path params are taken relative to ``workdir``."""
        path = Path(raw)
        return str(path if path.is_absolute() else Path(self.workdir) / path)


class Adapter(ABC):
    """Base for shell, filesystem and archive adapters.

    ``execute`` reports every failure in the Receipt it returns; the
    registry still guards against one that raises.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def is_available(self) -> bool:
        """Cheap check that the adapter can work at all on this machine."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """``(True, "")`` or ``(False, reason)``; runs before ``execute``."""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
