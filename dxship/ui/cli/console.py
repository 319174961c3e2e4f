"""
Terminal output and prompts for the CLI.

``ClickProgress`` renders stage progress in color; ``make_confirm``
builds the confirmation callback the pipeline receives, so the same
pipeline runs interactively, with ``--yes``, or headless under tests.
"""

from __future__ import annotations

import click

from dxship.core.observability.progress import Progress
from dxship.core.services.materializer import Confirm

_RULE = "=" * 60


class ClickProgress(Progress):
    """Progress sink that prints ✓/✗/⚠/ℹ lines with click.secho."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def header(self, title: str) -> None:
        if self.quiet:
            return
        click.echo()
        click.secho(_RULE, fg="blue")
        click.secho(title, fg="blue", bold=True)
        click.secho(_RULE, fg="blue")
        click.echo()

    def success(self, message: str) -> None:
        if not self.quiet:
            click.secho(f"✓ {message}", fg="green")

    def info(self, message: str) -> None:
        if not self.quiet:
            click.secho(f"ℹ {message}", fg="blue")

    def warning(self, message: str) -> None:
        click.secho(f"⚠ {message}", fg="yellow", err=True)

    def error(self, message: str) -> None:
        click.secho(f"✗ {message}", fg="red", err=True)

    def detail(self, message: str) -> None:
        if not self.quiet:
            click.echo(f"  {message}")


def make_confirm(assume_yes: bool = False) -> Confirm:
    """Build the y/n confirmation callback.

    Only an explicit ``y``/``Y`` confirms; anything else (including just
    pressing Enter) declines.
    """
    if assume_yes:
        def _auto(message: str) -> bool:
            click.echo(f"{message} (y/n): y", err=True)
            return True
        return _auto

    def _ask(message: str) -> bool:
        reply = click.prompt(
            f"{message} (y/n)",
            default="",
            show_default=False,
            prompt_suffix=": ",
            err=True,
        )
        return reply.strip()[:1] in ("y", "Y")

    return _ask
