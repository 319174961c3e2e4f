"""
Capability models — what a toolchain probe found.

A probe answers one question about one external tool: is it there,
and is it the version we expect. The mechanism (PATH lookup, version
command, target listing) lives in ``dxship.core.services.tool_probe``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class CapabilityStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    WRONG_VERSION = "wrong-version"


class ToolTier(str, Enum):
    """How the checker reacts when a tool is absent."""

    MANDATORY = "mandatory"     # abort with install instructions
    INSTALLABLE = "installable" # install through the toolchain, re-verify
    OPTIONAL = "optional"       # warn and degrade


class CapabilityResult(BaseModel):
    """Outcome of probing a single tool."""

    tool: str
    status: CapabilityStatus
    tier: ToolTier = ToolTier.OPTIONAL
    version: str | None = None
    expected_version: str | None = None
    detail: str = ""
    installed_now: bool = False     # we installed it during this run

    @property
    def usable(self) -> bool:
        """Present, or present with a version we only warn about."""
        return self.status in (CapabilityStatus.PRESENT, CapabilityStatus.WRONG_VERSION)


class PrerequisiteReport(BaseModel):
    """Everything the checker learned, consumed by later stages."""

    results: list[CapabilityResult] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def get(self, tool: str) -> CapabilityResult | None:
        for result in self.results:
            if result.tool == tool:
                return result
        return None

    def has(self, tool: str) -> bool:
        result = self.get(tool)
        return result is not None and result.usable

    def to_dict(self) -> dict:
        return {
            "tools": {
                r.tool: {
                    "status": r.status.value,
                    "tier": r.tier.value,
                    "version": r.version,
                    "installed_now": r.installed_now,
                }
                for r in self.results
            },
            "warnings": list(self.warnings),
        }
