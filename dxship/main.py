"""
dxship — CLI entrypoint.

Usage:
    dxship                     full run: check, scaffold, build, package
    dxship --yes               same, auto-confirming every prompt (CI)
    dxship check               prerequisites only
    dxship scaffold            write the project files only
    dxship build               build an existing project
    dxship package             zip an existing build
    dxship workflow            write the dogfooding GitHub Actions workflow
"""

from __future__ import annotations

import json
import os
import shutil
import sys
from pathlib import Path

import click

from dxship import __version__
from dxship.core.observability.logging_config import resolve_level, setup_logging


def _load(ctx: click.Context):
    """Resolve the ShipConfig from dxship.yml, env and global flags."""
    from dxship.core.config.loader import ConfigError, load_config

    try:
        return load_config(
            ctx.obj["config_path"],
            start_dir=ctx.obj["workdir"],
            overrides=ctx.obj["overrides"],
        )
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _progress(ctx: click.Context):
    from dxship.ui.cli.console import ClickProgress

    return ClickProgress(quiet=ctx.obj["quiet"] or ctx.obj["as_json"])


def _finish(ctx: click.Context, result) -> None:
    """Print the error (or JSON) for a SetupResult and exit accordingly."""
    if ctx.obj["as_json"]:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else result.exit_code or 1)

    if result.ok:
        return

    click.echo()
    click.secho(f"❌ {result.error}", fg="red", bold=True, err=True)
    for hint in result.hints:
        click.echo(f"   {hint}", err=True)
    if result.stderr:
        for line in result.stderr.splitlines():
            click.echo(f"   │ {line}", err=True)
    sys.exit(result.exit_code or 1)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="dxship")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to dxship.yml (default: auto-detect).",
)
@click.option(
    "--workdir",
    "-C",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to create the project in (default: current directory).",
)
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Answer yes to every prompt.")
@click.option("--project-name", default=None, help="Project / Cargo package name.")
@click.option("--base-path", default=None, help="Deployment base path, e.g. /dioxus.")
@click.option(
    "--archiver",
    type=click.Choice(["zip", "builtin"]),
    default=None,
    help="zip: the zip CLI (skipped if missing). builtin: Python zipfile.",
)
@click.option("--strict", is_flag=True, help="Treat base-path problems as errors.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output results as JSON.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: Path | None,
    workdir: Path | None,
    assume_yes: bool,
    project_name: str | None,
    base_path: str | None,
    archiver: str | None,
    strict: bool,
    as_json: bool,
) -> None:
    """dxship — scaffold, build and package a Dioxus web app for static hosting.

    With no command, runs the whole pipeline: check prerequisites, create
    the project, build it, and zip the output for upload.
    """
    ctx.ensure_object(dict)
    # Tests may pre-seed "registry" and "which" through CliRunner's obj=
    ctx.obj.setdefault("registry", None)
    ctx.obj.setdefault("which", shutil.which)
    ctx.obj["quiet"] = quiet
    ctx.obj["verbose"] = verbose
    ctx.obj["as_json"] = as_json
    ctx.obj["assume_yes"] = assume_yes
    ctx.obj["config_path"] = config_path
    ctx.obj["workdir"] = (workdir or Path.cwd()).resolve()
    ctx.obj["overrides"] = {
        "project_name": project_name,
        "base_path": base_path,
        "archiver": archiver,
        "strict_base_path": True if strict else None,
    }

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get("DXSHIP_LOG_FILE"),
        log_file_level=os.environ.get("DXSHIP_LOG_FILE_LEVEL"),
    )

    if ctx.invoked_subcommand is None:
        _run_all(ctx)


def _run_all(ctx: click.Context) -> None:
    from dxship.core.use_cases.setup import run_setup
    from dxship.ui.cli.console import make_confirm

    config = _load(ctx)
    workdir: Path = ctx.obj["workdir"]
    result = run_setup(
        config,
        workdir,
        make_confirm(ctx.obj["assume_yes"]),
        registry=ctx.obj["registry"],
        which=ctx.obj["which"],
        progress=_progress(ctx),
    )
    _finish(ctx, result)

    if ctx.obj["as_json"] or ctx.obj["quiet"]:
        return

    package = result.data.get("package") or {}
    folder = config.deploy_folder or "my-app"
    progress = _progress(ctx)
    progress.header("🎉 Setup Complete!")
    click.echo(f"Project created in: {workdir / config.project_name}")
    click.echo()
    click.echo("Next steps:")
    click.echo()
    click.echo("1. Test locally:")
    click.echo(f"   cd {config.project_name}")
    click.echo("   dx serve")
    click.echo("   # Visit http://localhost:8080")
    click.echo()
    click.echo("2. Deploy to shared hosting:")
    if package.get("archive_path"):
        click.echo(f"   - Upload {config.archive_name} to your host")
        click.echo(f"   - Extract in a folder named '{folder}' (matching base_path)")
    else:
        click.echo(f"   - Copy the contents of {config.build_output_rel} to your host")
        click.echo(f"   - Put them in a folder named '{folder}' (matching base_path)")
    click.echo(f"   - Access at: https://yourdomain.com/{folder}/")
    click.echo()
    click.echo("3. Push to GitHub:")
    click.echo(f"   cd {config.project_name}")
    click.echo("   git init")
    click.echo("   git add .")
    click.echo(f"   git commit -m 'Initial commit: {config.app_title}'")
    click.echo(f"   git remote add origin https://github.com/yourusername/{config.project_name}.git")
    click.echo("   git push -u origin main")
    click.echo()
    progress.success("All done!")


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Check (and install where possible) the Rust/Dioxus toolchain."""
    from dxship.core.use_cases.setup import run_check

    config = _load(ctx)
    result = run_check(
        config,
        ctx.obj["workdir"],
        registry=ctx.obj["registry"],
        which=ctx.obj["which"],
        progress=_progress(ctx),
    )
    _finish(ctx, result)


@cli.command()
@click.pass_context
def scaffold(ctx: click.Context) -> None:
    """Write the project files without building."""
    from dxship.core.use_cases.setup import run_scaffold
    from dxship.ui.cli.console import make_confirm

    config = _load(ctx)
    workdir: Path = ctx.obj["workdir"]
    result = run_scaffold(
        config, workdir, make_confirm(ctx.obj["assume_yes"]),
        registry=ctx.obj["registry"], progress=_progress(ctx),
    )
    _finish(ctx, result)


@cli.command()
@click.pass_context
def build(ctx: click.Context) -> None:
    """Run cargo check and the release web build on an existing project."""
    from dxship.core.use_cases.setup import run_build

    config = _load(ctx)
    result = run_build(config, ctx.obj["workdir"], registry=ctx.obj["registry"], progress=_progress(ctx))
    _finish(ctx, result)


@cli.command()
@click.pass_context
def package(ctx: click.Context) -> None:
    """Zip an existing build output into the deployment archive."""
    from dxship.core.use_cases.setup import run_package

    config = _load(ctx)
    result = run_package(config, ctx.obj["workdir"], registry=ctx.obj["registry"], progress=_progress(ctx))
    _finish(ctx, result)


@cli.command()
@click.option("--branch", default="main", show_default=True, help="Branch that triggers the workflow.")
@click.option("--force", is_flag=True, help="Overwrite an existing workflow file.")
@click.pass_context
def workflow(ctx: click.Context, branch: str, force: bool) -> None:
    """Write .github/workflows/dogfood.yml (re-run dxship on every push)."""
    from dxship.core.use_cases.setup import write_workflow

    config = _load(ctx)
    result = write_workflow(
        config, ctx.obj["workdir"], branch=branch, force=force, registry=ctx.obj["registry"],
    )
    _finish(ctx, result)
    if not ctx.obj["as_json"]:
        click.secho(f"✓ Wrote {result.data['path']}", fg="green")


def main() -> None:
    """Console-script entry; Ctrl-C exits with code 130."""
    try:
        cli.main(standalone_mode=False)
    except click.exceptions.Abort:
        click.secho("\nAborted", fg="red", err=True)
        sys.exit(130)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
