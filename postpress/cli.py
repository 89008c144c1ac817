"""Command-line interface for postpress.

This module defines the CLI commands using the Click framework.

Commands:
- build: Build a site into the output directory.
- serve: Serve the output directory with a demo web server.
- init: Write an example site to start from.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__
from .config import load_config
from .errors import BuildError

_DIR = click.Path(file_okay=False, path_type=Path)


@click.group()
@click.version_option(version=__version__, prog_name="postpress")
def cli():
    """postpress static site generator."""


@cli.command()
@click.argument("source", type=_DIR, default=".")
@click.option("--out", "output", type=_DIR, help="Output dir for the generated site")
def build(source: Path, output: Path | None):
    """Build the site in SOURCE into the output directory."""
    from .build import build_site

    try:
        config = load_config(source)
        output_dir = output or Path(config["output_dir"])
        _check_output_dir(source, output_dir)
        result = build_site(source, output_dir)
    except BuildError as exc:
        _report_build_error(exc, source)
        raise SystemExit(1) from None
    except OSError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(
        f"Wrote {len(result.posts)} posts, {result.templates} pages "
        f"and {result.files} files to {result.output_dir}"
    )


@cli.command()
@click.argument("source", type=_DIR, default=".")
@click.option("--out", "output", type=_DIR, help="Dir to serve")
@click.option("--addr", "address", help="Address to listen on, as host:port")
def serve(source: Path, output: Path | None, address: str | None):
    """Run a demo web server for the generated site."""
    from .server import DemoServer

    try:
        config = load_config(source)
    except BuildError as exc:
        _report_build_error(exc, source)
        raise SystemExit(1) from None
    server = DemoServer(
        output or Path(config["output_dir"]),
        address or config["address"],
    )
    server.start()


@cli.command()
@click.argument("target", type=_DIR, default="example")
def init(target: Path):
    """Write an example site into TARGET."""
    from .scaffold import write_example

    target = target.resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    written = write_example(target)
    click.echo(f"Wrote {len(written)} files to {target}")


def _check_output_dir(source: Path, output_dir: Path) -> None:
    """Refuse to write the site over its own sources."""
    if output_dir.resolve() == source.resolve():
        raise click.ClickException(
            f"Output directory {output_dir} must differ from the source directory {source}"
        )


def _report_build_error(exc: BuildError, source: Path) -> None:
    """Display a build error with the offending file."""
    try:
        rel_path = exc.source_path.resolve().relative_to(source.resolve())
    except ValueError:
        rel_path = exc.source_path
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)


def main():
    """Entry point for the CLI application."""
    cli()

