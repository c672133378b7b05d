"""Click-based CLI for project root discovery and server installs."""

import sys
from pathlib import Path
from typing import Any

import click

from . import __version__
from .config import SessionsSettings, load_settings
from .errors import SessionsError, handle_exception
from .install import NpmInstaller
from .roots import ProjectRootDetector, root_pattern
from .sessions_logging import setup_logging


def _fail(error: Exception, verbose: bool = False) -> None:
    message, exit_code = handle_exception(
        error, use_color=sys.stderr.isatty(), verbose=verbose
    )
    click.echo(message, err=True)
    sys.exit(exit_code)


def _settings(ctx: click.Context) -> SessionsSettings:
    return ctx.obj["settings"]


def _installer(
    ctx: click.Context,
    server: str,
    packages: tuple[str, ...],
    binaries: tuple[str, ...],
    post_install: str | None = None,
) -> NpmInstaller:
    return NpmInstaller(
        server_name=server,
        packages=list(packages),
        binaries=list(binaries),
        install_root=_settings(ctx).install_dir,
        post_install_script=post_install,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option(
    "--config", type=click.Path(exists=True, dir_okay=False), help="Settings file path"
)
@click.pass_context
def cli(ctx: Any, verbose: bool, quiet: bool, config: str | None) -> None:
    """LSP sessions - project root discovery and language-server setup."""
    if verbose and quiet:
        click.echo("Error: --quiet and --verbose are mutually exclusive", err=True)
        sys.exit(2)
    try:
        settings = load_settings(Path(config) if config else None)
    except SessionsError as e:
        _fail(e, verbose)
    setup_logging(
        level=settings.log_level,
        quiet=quiet,
        verbose=verbose,
        log_file=settings.log_file,
        log_format=settings.log_format,
    )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("path", type=click.Path())
@click.option(
    "--marker",
    "-m",
    "markers",
    multiple=True,
    help="Root marker file or directory (repeatable, checked in order)",
)
@click.pass_context
def root(ctx: Any, path: str, markers: tuple[str, ...]) -> None:
    """Print the project root enclosing PATH."""
    resolve = root_pattern(list(markers) or _settings(ctx).project_markers)
    try:
        root_dir = resolve(path)
    except OSError as e:
        _fail(e, ctx.obj["verbose"])
    if root_dir is None:
        click.echo(f"No project root found for {path}", err=True)
        sys.exit(1)
    click.echo(root_dir)


@cli.command()
@click.argument("path", type=click.Path())
@click.pass_context
def marker(ctx: Any, path: str) -> None:
    """Print the detected project root and the marker that identified it."""
    try:
        root_dir = ProjectRootDetector.find_project_root(path)
        if root_dir is None:
            click.echo(f"No project root found for {path}", err=True)
            sys.exit(1)
        found = ProjectRootDetector.get_project_marker(root_dir)
    except OSError as e:
        _fail(e, ctx.obj["verbose"])
    click.echo(f"{root_dir}\t{found}")


@cli.command("install-info")
@click.argument("server")
@click.option("--package", "-p", "packages", multiple=True, help="npm package (defaults to SERVER)")
@click.option("--binary", "-b", "binaries", multiple=True, required=True, help="Binary name")
@click.pass_context
def install_info(
    ctx: Any, server: str, packages: tuple[str, ...], binaries: tuple[str, ...]
) -> None:
    """Show where SERVER is installed and whether its binaries exist."""
    try:
        info = _installer(ctx, server, packages or (server,), binaries).info()
    except SessionsError as e:
        _fail(e, ctx.obj["verbose"])
    click.echo(f"install_dir: {info.install_dir}")
    click.echo(f"bin_dir: {info.bin_dir}")
    for name, path in info.binaries.items():
        click.echo(f"  {name}: {path}")
    click.echo(f"installed: {'yes' if info.is_installed else 'no'}")


@cli.command()
@click.argument("server")
@click.option("--package", "-p", "packages", multiple=True, required=True, help="npm package")
@click.option("--binary", "-b", "binaries", multiple=True, required=True, help="Binary name")
@click.option("--post-install", help="Shell snippet run in the install directory afterwards")
@click.pass_context
def install(
    ctx: Any,
    server: str,
    packages: tuple[str, ...],
    binaries: tuple[str, ...],
    post_install: str | None,
) -> None:
    """Install SERVER's npm packages into the private install directory."""
    try:
        info = _installer(ctx, server, packages, binaries, post_install).install()
    except SessionsError as e:
        _fail(e, ctx.obj["verbose"])
    click.echo(f"{server} installed in {info.install_dir}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
