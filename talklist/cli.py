"""Command-line interface for talklist.

This module defines the CLI commands using Click framework.

Commands:
- list: Print the talks found under the prefix.
- build: Render the talks listing page into the output directory.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__
from .collections import InvalidPrefixError, MissingAttributeError, validate_prefix


def _check_prefix(ctx, param, value):
    if value is None:
        return None
    try:
        return validate_prefix(value)
    except InvalidPrefixError as exc:
        raise click.BadParameter(str(exc)) from None


prefix_option = click.option(
    "--prefix",
    callback=_check_prefix,
    help="URL prefix selecting the talks (overrides talklist.yaml)",
)
drafts_option = click.option(
    "--drafts", is_flag=True, help="Include draft content"
)


@click.group()
@click.version_option(version=__version__, prog_name="talklist")
def cli():
    """Talk listings for static sites."""


@cli.command("list")
@prefix_option
@drafts_option
@click.option("--site", "site_dir", help="Site directory (overrides talklist.yaml)")
@click.option("--sort", is_flag=True, help="Newest talks first")
def list_talks(prefix: str | None, drafts: bool, site_dir: str | None, sort: bool):
    """Print the URL and title of each talk."""
    from .build import BuildError, load_config, load_talks

    project_root = Path.cwd()
    config = load_config(project_root)
    overrides = {
        "prefix": prefix,
        "drafts": drafts or None,
        "site_dir": site_dir,
        "sort": sort or None,
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    try:
        talks = load_talks(project_root, config)
        for talk in talks:
            click.echo(f"{talk.url}\t{talk.title}")
    except BuildError as exc:
        _report(project_root, exc.source_path, exc.message)
    except MissingAttributeError as exc:
        _report(project_root, project_root / config["site_dir"], str(exc))
    except InvalidPrefixError as exc:
        raise click.ClickException(str(exc)) from None
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from None


@cli.command()
@prefix_option
@drafts_option
@click.option("--output", "output_dir", help="Output directory (overrides talklist.yaml)")
@click.option("--layout", help="Layout used for the listing page")
@click.option("--sort", is_flag=True, help="Newest talks first")
def build(
    prefix: str | None,
    drafts: bool,
    output_dir: str | None,
    layout: str | None,
    sort: bool,
):
    """Build the talks listing page."""
    from .build import BuildError, build_talks

    project_root = Path.cwd()
    try:
        result = build_talks(
            project_root,
            prefix=prefix,
            drafts=drafts or None,
            output_dir=output_dir,
            layout=layout,
            sort=sort or None,
        )
    except BuildError as exc:
        _report(project_root, exc.source_path, exc.message)
    except InvalidPrefixError as exc:
        raise click.ClickException(str(exc)) from None
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from None
    click.echo(f"Listed {len(result.talks)} talks in {result.output_path}")


def _report(project_root: Path, source_path: Path, message: str) -> None:
    """Print a build failure and exit with status 1."""
    try:
        shown = source_path.relative_to(project_root)
    except ValueError:
        shown = source_path
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    click.echo(click.style(f"  File: {shown}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {message}", fg="white"), err=True)
    raise SystemExit(1)


def main():
    """Entry point for the CLI application."""
    cli()
