"""Thin CLI wrapper for openwrt_builder.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from openwrt_builder import __version__
from openwrt_builder.config import Settings, get_settings, print_settings_json
from openwrt_builder.errors import PipelineError

PROG_NAME = "owrt-build"
PUBLISH_PROMPT = "Do you want to create and push a GitHub release? (y/n)"

app = typer.Typer(
    name=PROG_NAME,
    help="OpenWrt Builder - build, collect and release custom OpenWrt firmware",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"openwrt-builder version {__version__}")
        raise typer.Exit()


def configure_logging(level: str) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_settings(**overrides: object) -> Settings:
    """Build settings, exiting with status 1 on invalid values."""
    try:
        return get_settings(**overrides)
    except ValidationError as e:
        console.print("[red]Invalid configuration:[/red]")
        console.print(escape(str(e)))
        raise typer.Exit(code=1) from None


def print_stage(number: int, total: int, title: str) -> None:
    """Announce a pipeline stage."""
    console.print("-" * 40)
    console.print(f"[bold]{escape(f'[{number}/{total}]')} {escape(title)}...[/bold]")


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """OpenWrt Builder - build, collect and release custom OpenWrt firmware."""


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = load_settings()
    if json_output:
        console.print(print_settings_json(settings))
        return

    jobs_display = str(settings.jobs) if settings.jobs else "(all CPUs)"
    console.print("[bold]Effective Configuration:[/bold]")
    console.print()
    console.print("[bold]Sources:[/bold]")
    console.print(f"  Repository:          {settings.repo_url}")
    console.print(f"  Release branch:      {settings.release_branch}")
    console.print(f"  Feed line:           {settings.feed_line}")
    console.print(f"  Diffconfig:          {settings.diffconfig}")
    console.print()
    console.print("[bold]Paths:[/bold]")
    console.print(f"  Source directory:    {settings.src_dir}")
    console.print(f"  Output directory:    {settings.out_dir}")
    console.print(f"  Images directory:    {settings.images_dir}")
    console.print()
    console.print("[bold]Build:[/bold]")
    console.print(f"  Jobs:                {jobs_display}")
    console.print(f"  Verbose:             {settings.verbose}")
    console.print(f"  Artifact pattern:    {escape(settings.artifact_pattern)}")
    console.print(f"  Require artifacts:   {settings.require_artifacts}")
    console.print(f"  Log level:           {settings.log_level}")


@app.command("run")
def run_cmd(
    src_dir: Annotated[
        Path | None,
        typer.Option("--src-dir", help="OpenWrt source checkout directory"),
    ] = None,
    out_dir: Annotated[
        Path | None,
        typer.Option("--out-dir", "-o", help="Output directory (wiped each run)"),
    ] = None,
    branch: Annotated[
        str | None,
        typer.Option("--branch", "-b", help="Release branch or tag to build"),
    ] = None,
    diffconfig: Annotated[
        Path | None,
        typer.Option("--diffconfig", "-c", help="Diffconfig file to apply"),
    ] = None,
    jobs: Annotated[
        int | None,
        typer.Option("--jobs", "-j", help="Parallel make jobs (default: all CPUs)"),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Publish a GitHub release without asking"),
    ] = False,
    no_publish: Annotated[
        bool,
        typer.Option("--no-publish", help="Skip the GitHub release without asking"),
    ] = False,
    require_artifacts: Annotated[
        bool | None,
        typer.Option(
            "--require-artifacts/--allow-empty",
            help="Fail when the build produced no images",
        ),
    ] = None,
) -> None:
    """Sync, configure and build the firmware, then optionally publish it."""
    from openwrt_builder.builds.artifacts import get_primary_artifact
    from openwrt_builder.pipeline import run_pipeline

    if yes and no_publish:
        console.print("[red]Error: --yes and --no-publish are mutually exclusive[/red]")
        raise typer.Exit(code=1)

    settings = load_settings(
        src_dir=src_dir,
        out_dir=out_dir,
        release_branch=branch,
        diffconfig=diffconfig,
        jobs=jobs,
        require_artifacts=require_artifacts,
    )
    configure_logging(settings.log_level)

    def confirm() -> str:
        if yes:
            return "y"
        if no_publish:
            return "n"
        return typer.prompt(PUBLISH_PROMPT, default="", show_default=False)

    try:
        result = run_pipeline(settings, confirm=confirm, on_stage=print_stage)
    except (KeyboardInterrupt, typer.Abort):
        console.print(f"\n{PROG_NAME} execution was interrupted by Ctrl+C.")
        raise typer.Exit(code=1) from None
    except PipelineError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    console.print("-" * 40)
    console.print(f"[bold]Firmware files in {escape(str(settings.out_dir))}:[/bold]")
    for artifact in result.artifacts:
        console.print(f"  {artifact.filename} ({artifact.size_bytes} bytes)")
    primary = get_primary_artifact(result.artifacts)
    if primary is not None:
        console.print(f"  Upgrade image: [green]{primary.filename}[/green]")
    if result.published:
        console.print(f"[green]✓ Published release {result.release_tag}[/green]")
    else:
        console.print("GitHub release: skipped")
    console.print("Done.")


@app.command("release-info")
def release_info_cmd(
    src_dir: Annotated[
        Path | None,
        typer.Option("--src-dir", help="OpenWrt source checkout directory"),
    ] = None,
    out_dir: Annotated[
        Path | None,
        typer.Option("--out-dir", "-o", help="Output directory with the images"),
    ] = None,
    print_output: Annotated[
        bool,
        typer.Option("--print", help="Also print the report"),
    ] = False,
) -> None:
    """Rewrite release-info.txt for the images already in the output directory."""
    from openwrt_builder.release.info import (
        build_release_info,
        render_release_info,
        write_release_info,
    )

    settings = load_settings(src_dir=src_dir, out_dir=out_dir)
    configure_logging(settings.log_level)

    if not settings.out_dir.is_dir():
        console.print(f"[red]Output directory not found: {settings.out_dir}[/red]")
        raise typer.Exit(code=1)

    filenames = [
        p.name for p in settings.out_dir.glob(settings.artifact_pattern) if p.is_file()
    ]
    try:
        info = build_release_info(settings, filenames)
    except PipelineError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    path = write_release_info(info, settings.release_info_path)
    console.print(f"[green]Wrote {path}[/green]")
    if print_output:
        console.print(escape(render_release_info(info)), end="")


if __name__ == "__main__":
    app()
