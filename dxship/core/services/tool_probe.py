"""
Tool probes — read-only capability checks.

A probe is a PATH lookup, optionally followed by a version command whose
output is matched against a regex. Probes never install anything; the
prerequisite checker decides what to do with an absent result.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

from dxship.adapters.registry import AdapterRegistry
from dxship.core.models.capability import CapabilityResult, CapabilityStatus, ToolTier

logger = logging.getLogger(__name__)

Which = Callable[[str], "str | None"]


@dataclass(frozen=True)
class ToolProbe:
    """How to detect one tool.

    ``expected_version`` is a major.minor prefix; when set and the detected
    version does not start with it, the result is WRONG_VERSION.
    """

    tool: str
    executable: str
    tier: ToolTier
    version_command: tuple[str, ...] = ()
    version_pattern: str = r"(\d+\.\d+\.\d+)"
    expected_version: str | None = None


def _version_matches(version: str, expected: str) -> bool:
    have = version.split(".")
    want = expected.split(".")
    return have[: len(want)] == want


def probe_tool(
    probe: ToolProbe,
    registry: AdapterRegistry,
    *,
    cwd: str,
    which: Which,
    action_id: str | None = None,
) -> CapabilityResult:
    """Run a probe and report PRESENT, ABSENT or WRONG_VERSION."""
    path = which(probe.executable)
    if path is None:
        logger.debug("%s: %s not on PATH", probe.tool, probe.executable)
        return CapabilityResult(
            tool=probe.tool,
            status=CapabilityStatus.ABSENT,
            tier=probe.tier,
            expected_version=probe.expected_version,
            detail=f"{probe.executable} not found on PATH",
        )

    if not probe.version_command:
        return CapabilityResult(
            tool=probe.tool,
            status=CapabilityStatus.PRESENT,
            tier=probe.tier,
            detail=path,
        )

    receipt = registry.run(
        action_id or f"probe-{probe.tool}",
        list(probe.version_command),
        cwd=cwd,
        stage="check",
    )
    if not receipt.ok:
        # On PATH but cannot even report a version: treat as broken install.
        return CapabilityResult(
            tool=probe.tool,
            status=CapabilityStatus.ABSENT,
            tier=probe.tier,
            expected_version=probe.expected_version,
            detail=receipt.error or "version probe failed",
        )

    # Some tools print the version to stderr
    text = receipt.output + "\n" + str(receipt.metadata.get("stderr", ""))
    first_line = next((line for line in text.splitlines() if line.strip()), "")
    match = re.search(probe.version_pattern, text)
    version = match.group(1) if match else None

    status = CapabilityStatus.PRESENT
    if version and probe.expected_version and not _version_matches(version, probe.expected_version):
        status = CapabilityStatus.WRONG_VERSION

    return CapabilityResult(
        tool=probe.tool,
        status=status,
        tier=probe.tier,
        version=version,
        expected_version=probe.expected_version,
        detail=first_line.strip(),
    )


def probe_rust_target(
    target: str,
    registry: AdapterRegistry,
    *,
    cwd: str,
    which: Which,
    action_id: str = "probe-wasm-target",
) -> CapabilityResult:
    """Check ``rustup target list --installed`` for a compilation target."""
    if which("rustup") is None:
        return CapabilityResult(
            tool=target,
            status=CapabilityStatus.ABSENT,
            tier=ToolTier.INSTALLABLE,
            detail="rustup not found on PATH",
        )

    receipt = registry.run(
        action_id,
        ["rustup", "target", "list", "--installed"],
        cwd=cwd,
        stage="check",
    )
    installed = receipt.ok and target in receipt.output.split()
    return CapabilityResult(
        tool=target,
        status=CapabilityStatus.PRESENT if installed else CapabilityStatus.ABSENT,
        tier=ToolTier.INSTALLABLE,
        detail="" if receipt.ok else (receipt.error or ""),
    )
