"""
Pipeline state — the forward-only stage machine of a run.

    START → CHECKED → MATERIALIZED → BUILT → PACKAGED → DONE
      └──────────┴──────────┴──────────┴─────────┴──→ ABORTED

No backward edges, no retry edges. ABORTED is terminal.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class PipelineStage(str, Enum):
    START = "start"
    CHECKED = "checked"
    MATERIALIZED = "materialized"
    BUILT = "built"
    PACKAGED = "packaged"
    DONE = "done"
    ABORTED = "aborted"


_ORDER = [
    PipelineStage.START,
    PipelineStage.CHECKED,
    PipelineStage.MATERIALIZED,
    PipelineStage.BUILT,
    PipelineStage.PACKAGED,
    PipelineStage.DONE,
]


class InvalidTransitionError(RuntimeError):
    """Raised when code tries to move the pipeline anywhere but forward by one."""


class PipelineState(BaseModel):
    """Current stage plus the path taken to get there."""

    stage: PipelineStage = PipelineStage.START
    history: list[PipelineStage] = Field(default_factory=lambda: [PipelineStage.START])
    failed_in: PipelineStage | None = None
    error: str | None = None

    @property
    def finished(self) -> bool:
        return self.stage in (PipelineStage.DONE, PipelineStage.ABORTED)

    def advance(self, target: PipelineStage) -> None:
        """Move to the next stage; only the immediate successor is allowed."""
        if self.finished:
            raise InvalidTransitionError(f"Pipeline already {self.stage.value}")
        if target is PipelineStage.ABORTED:
            raise InvalidTransitionError("Use abort() to enter the aborted state")
        expected = _ORDER[_ORDER.index(self.stage) + 1]
        if target is not expected:
            raise InvalidTransitionError(
                f"Cannot go from {self.stage.value} to {target.value} "
                f"(next is {expected.value})"
            )
        self.stage = target
        self.history.append(target)

    def abort(self, error: str) -> None:
        if self.finished:
            raise InvalidTransitionError(f"Pipeline already {self.stage.value}")
        self.failed_in = self.stage
        self.error = error
        self.stage = PipelineStage.ABORTED
        self.history.append(PipelineStage.ABORTED)
