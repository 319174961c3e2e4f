"""
Action and Receipt — the side-effect contract.

Every external effect of a run (a subprocess, a file write, an archive)
is requested as an Action and answered with a Receipt. Adapters never
raise; the services turn failed receipts into ``ShipError`` subclasses.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

ReceiptStatus = Literal["ok", "skipped", "failed"]


class Action(BaseModel):
    """A requested side effect, dispatched through the adapter registry."""

    id: str                         # e.g. "build-release", "write-Cargo.toml"
    adapter: str                    # "shell", "filesystem", "archive"
    stage: str = ""                 # pipeline stage that issued it, for logs
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """What an adapter did with an Action.

    ``output`` is the useful result (stdout, a listing, a path); ``error``
    is the tool's own diagnostic, untouched, when the action failed.
    """

    adapter: str
    action_id: str
    status: ReceiptStatus = "ok"
    output: str = ""
    error: str | None = None
    return_code: int | None = None
    duration_ms: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Nothing to do (e.g. deleting a path that is already gone)."""
        return cls(adapter=adapter, action_id=action_id, status="skipped", output=reason, **kwargs)
