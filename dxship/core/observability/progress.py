"""
Progress reporting — user-facing stage output, decoupled from the terminal.

Services report through a Progress object. The base class forwards to
``logging``; the CLI swaps in ``ClickProgress`` (colored ✓/✗/⚠ lines) and
tests use ``RecordingProgress`` to assert on what the user would see.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("dxship.progress")


class Progress:
    """Default sink: everything goes to the log."""

    def header(self, title: str) -> None:
        logger.info("== %s ==", title)

    def success(self, message: str) -> None:
        logger.info("✓ %s", message)

    def info(self, message: str) -> None:
        logger.info("%s", message)

    def warning(self, message: str) -> None:
        logger.warning("%s", message)

    def error(self, message: str) -> None:
        logger.error("%s", message)

    def detail(self, message: str) -> None:
        """Indented supporting text (install hints, listings)."""
        logger.info("  %s", message)


class RecordingProgress(Progress):
    """Keeps ``(kind, message)`` pairs in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def header(self, title: str) -> None:
        self.events.append(("header", title))

    def success(self, message: str) -> None:
        self.events.append(("success", message))

    def info(self, message: str) -> None:
        self.events.append(("info", message))

    def warning(self, message: str) -> None:
        self.events.append(("warning", message))

    def error(self, message: str) -> None:
        self.events.append(("error", message))

    def detail(self, message: str) -> None:
        self.events.append(("detail", message))

    def messages(self, kind: str) -> list[str]:
        return [m for k, m in self.events if k == kind]
