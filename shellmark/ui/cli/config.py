"""
CLI commands for settings inspection.
"""

from __future__ import annotations

import json

import click


@click.group()
def config() -> None:
    """Settings — show where bookmarks are stored and how logging is set."""


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show the resolved settings."""
    settings = ctx.obj["settings"]
    data = settings.to_dict()

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.secho("⚙️  shellmark settings", fg="cyan", bold=True)
    for key, value in data.items():
        click.echo(f"   {key}: {value if value is not None else '-'}")
    state = "present" if settings.store_path.is_file() else "not created yet"
    click.echo(f"   store: {state}")


@config.command("path")
@click.pass_context
def config_path(ctx: click.Context) -> None:
    """Print the bookmark store path."""
    click.echo(str(ctx.obj["settings"].store_path))
