"""
shellmark — CLI entrypoint.

Usage:
    shellmark --help
    shellmark add work
    shellmark list
    python -m shellmark.main get work
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from shellmark import __version__
from shellmark.core.config.loader import ConfigError, load_settings
from shellmark.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="shellmark")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--store",
    "-s",
    "store_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Bookmark file (default: ~/.shell-config/bookmarks/.bookmarks).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to shellmark.yml (default: <home>/shellmark.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    store_path: str | None,
    config_path: str | None,
) -> None:
    """shellmark — bookmark directories and jump back to them."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    try:
        settings = load_settings(
            config_path=Path(config_path) if config_path else None,
            store_file=Path(store_path) if store_path else None,
        )
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    ctx.obj["settings"] = settings

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(settings.log_level, debug=debug, verbose=verbose, quiet=quiet),
        log_file=settings.log_file,
        log_file_level=settings.log_file_level,
        store_path=str(settings.store_path),
    )


# ── Register commands from shellmark/ui/cli/ ──────────────────────

from shellmark.ui.cli.bookmarks import (
    add,
    get,
    list_cmd,
    prune,
    remove,
    rename,
    rename_dir,
)
from shellmark.ui.cli.config import config
from shellmark.ui.cli.shell import init_shell

cli.add_command(add)
cli.add_command(remove)
cli.add_command(rename)
cli.add_command(rename_dir)
cli.add_command(get)
cli.add_command(list_cmd)
cli.add_command(prune)
cli.add_command(config)
cli.add_command(init_shell)


if __name__ == "__main__":
    cli()
