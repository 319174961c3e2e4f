"""
Error taxonomy for a run.

Adapters never raise; services translate failed receipts into these.
Every stage is fail-fast: the first ShipError aborts the pipeline and
nothing already written is rolled back.
"""

from __future__ import annotations


class ShipError(Exception):
    """Base class for every failure that aborts a run."""

    exit_code = 1


class MissingToolError(ShipError):
    """A required tool is absent and could not be installed."""

    def __init__(self, tool: str, message: str, hints: list[str] | None = None):
        super().__init__(message)
        self.tool = tool
        self.hints = hints or []


class UserAbortError(ShipError):
    """The user declined a confirmation prompt."""


class ExternalToolError(ShipError):
    """An external command exited non-zero.

    ``stderr`` is the tool's own diagnostic, kept verbatim.
    """

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        return_code: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = command or []
        self.return_code = return_code
        self.stderr = stderr


class BuildOutputMissingError(ExternalToolError):
    """The build reported success but its output directory does not exist."""


class MaterializeError(ShipError):
    """Writing the project files failed."""


class PackagingError(ShipError):
    """Creating the deployment archive failed."""
