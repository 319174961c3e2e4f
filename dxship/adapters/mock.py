"""
Mock adapter — scripted stand-in for any adapter name.

Register one as "shell" and the whole toolchain becomes a table of
action ID → answer. An answer may be a callable, so a scripted build can
also create its output directory or "install" a tool.
"""

from __future__ import annotations

from typing import Callable

from dxship.adapters.base import Adapter, ExecutionContext
from dxship.core.models.action import Receipt

Handler = Callable[[ExecutionContext], Receipt]


class MockAdapter(Adapter):
    """Answers every action with success unless scripted otherwise.

    The most recent ``set_*`` call for an action ID wins.
    """

    def __init__(self, adapter_name: str = "mock", available: bool = True, default_output: str = ""):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._script: dict[str, Handler] = {}
        self.call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        return len(self.call_log)

    @property
    def called_ids(self) -> list[str]:
        return [ctx.action.id for ctx in self.call_log]

    def is_available(self) -> bool:
        return self._available

    def set_output(self, action_id: str, output: str) -> None:
        self._script[action_id] = lambda ctx: Receipt.success(
            adapter=self._name, action_id=action_id, output=output, return_code=0,
        )

    def set_failure(self, action_id: str, error: str = "mock failure", return_code: int = 1) -> None:
        self._script[action_id] = lambda ctx: Receipt.failure(
            adapter=self._name, action_id=action_id, error=error, return_code=return_code,
        )

    def set_handler(self, action_id: str, handler: Handler) -> None:
        self._script[action_id] = handler

    def reset(self) -> None:
        self._script.clear()
        self.call_log.clear()

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self.call_log.append(context)
        handler = self._script.get(context.action.id)
        if handler is not None:
            return handler(context)
        return Receipt.success(
            adapter=self._name,
            action_id=context.action.id,
            output=self._default_output,
            metadata={"mock": True},
        )
