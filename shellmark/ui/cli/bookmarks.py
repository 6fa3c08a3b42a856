"""
CLI commands for bookmarks.

Thin wrappers over ``shellmark.core.services.bookmark_store``. Every
store error exits with code 1; ``--json`` output carries an ``error``
key instead of the pretty message.
"""

from __future__ import annotations

import json
import shlex
import sys
from typing import NoReturn

import click

from shellmark.core.errors import ConflictError, ShellmarkError
from shellmark.core.models.plan import Receipt
from shellmark.core.services.bookmark_store import BookmarkStore

_DONE_MESSAGES = {
    "add": "🟢 Bookmark '{name}' saved",
    "replace": "🟢 Bookmark '{name}' saved",
    "remove": "🟢 Bookmark '{name}' removed",
    "rename": "🟢 Bookmark renamed: {note}",
    "rename_dir": "🟢 Directory renamed, bookmark '{name}' updated",
    "prune": "🟢 Removed inactive bookmarks: {name}",
}

_dry_run_option = click.option(
    "--dry-run", "-n", is_flag=True, help="Print the planned change instead of applying it."
)
_json_option = click.option(
    "--json-output", "--json", "as_json", is_flag=True, help="Output as JSON."
)


def _store(ctx: click.Context) -> BookmarkStore:
    """Build the store handle from resolved settings."""
    return BookmarkStore(ctx.obj["settings"].store_path)


def _fail(error: ShellmarkError, as_json: bool) -> NoReturn:
    if as_json:
        click.echo(json.dumps({"error": str(error), "kind": error.kind}, indent=2))
    else:
        click.secho(f"🔴 {error}", fg="red", err=True)
    sys.exit(1)


def _echo_preview(text: str) -> None:
    for line in text.splitlines():
        if line.startswith("+ "):
            click.secho(line, fg="green")
        elif line.startswith("- "):
            click.secho(line, fg="red")
        elif line.startswith("mv "):
            click.secho(line, fg="cyan")
        else:
            click.secho(f"[dry-run] {line}", fg="yellow")


def _report(ctx: click.Context, receipt: Receipt, as_json: bool) -> None:
    """Print a receipt for humans or as JSON."""
    if as_json:
        click.echo(json.dumps(receipt.to_dict(), indent=2))
        return

    if receipt.dry_run:
        _echo_preview(receipt.output)
        return

    if not receipt.ok:
        click.secho(f"🟡 {receipt.output}", fg="yellow")
        return

    if ctx.obj.get("quiet"):
        return
    note = receipt.metadata.get("note", "")
    message = _DONE_MESSAGES[receipt.kind].format(name=receipt.name, note=note)
    click.secho(message, fg="green")
    if ctx.obj.get("verbose"):
        for line in receipt.output.splitlines()[1:]:
            click.echo(f"   │ {line}")


# ── Mutations ───────────────────────────────────────────────────────


@click.command()
@click.argument("name")
@click.option(
    "--path",
    "-p",
    "target",
    type=click.Path(file_okay=False, resolve_path=True),
    default=None,
    help="Directory to bookmark (default: current directory).",
)
@click.option("--force", "-f", is_flag=True, help="Replace an existing bookmark without asking.")
@_dry_run_option
@_json_option
@click.pass_context
def add(
    ctx: click.Context,
    name: str,
    target: str | None,
    force: bool,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Bookmark a directory as NAME.

    Examples:

        shellmark add work

        shellmark add docs --path ~/Documents --force
    """
    store = _store(ctx)
    try:
        receipt = store.add(name, target, force=force, dry_run=dry_run)
    except ConflictError as e:
        if as_json:
            _fail(e, as_json)
        click.secho(f"🟠 {e}", fg="yellow")
        if not click.confirm("Replace it?", default=False):
            click.echo("Aborted.")
            sys.exit(1)
        try:
            receipt = store.add(name, target, force=True, dry_run=dry_run)
        except ShellmarkError as retry_error:
            _fail(retry_error, as_json)
    except ShellmarkError as e:
        _fail(e, as_json)

    _report(ctx, receipt, as_json)


@click.command()
@click.argument("name")
@_dry_run_option
@_json_option
@click.pass_context
def remove(ctx: click.Context, name: str, dry_run: bool, as_json: bool) -> None:
    """Remove the bookmark NAME."""
    try:
        receipt = _store(ctx).remove(name, dry_run=dry_run)
    except ShellmarkError as e:
        _fail(e, as_json)
    _report(ctx, receipt, as_json)


@click.command()
@click.argument("old_name")
@click.argument("new_name")
@_dry_run_option
@_json_option
@click.pass_context
def rename(
    ctx: click.Context,
    old_name: str,
    new_name: str,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Rename bookmark OLD_NAME to NEW_NAME (the path is kept)."""
    try:
        receipt = _store(ctx).rename(old_name, new_name, dry_run=dry_run)
    except ShellmarkError as e:
        _fail(e, as_json)
    _report(ctx, receipt, as_json)


@click.command("rename-dir")
@click.argument("name")
@click.argument("new_dir_name")
@_dry_run_option
@_json_option
@click.pass_context
def rename_dir(
    ctx: click.Context,
    name: str,
    new_dir_name: str,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Rename the directory bookmarked as NAME to NEW_DIR_NAME.

    The directory keeps its parent; the bookmark follows it.
    """
    try:
        receipt = _store(ctx).rename_directory(name, new_dir_name, dry_run=dry_run)
    except ShellmarkError as e:
        _fail(e, as_json)
    _report(ctx, receipt, as_json)


@click.command()
@click.argument("names", nargs=-1)
@_dry_run_option
@_json_option
@click.pass_context
def prune(ctx: click.Context, names: tuple[str, ...], dry_run: bool, as_json: bool) -> None:
    """Remove bookmarks whose directories no longer exist.

    With NAMES, only those bookmarks are pruned (each must be inactive).
    """
    try:
        receipt = _store(ctx).prune(list(names) or None, dry_run=dry_run)
    except ShellmarkError as e:
        _fail(e, as_json)
    _report(ctx, receipt, as_json)


# ── Reads ───────────────────────────────────────────────────────────


@click.command()
@click.argument("name")
@click.option("--cd", "as_cd", is_flag=True, help="Print a cd command instead of the bare path.")
@click.pass_context
def get(ctx: click.Context, name: str, as_cd: bool) -> None:
    """Print the directory bookmarked as NAME."""
    try:
        path = _store(ctx).resolve(name)
    except ShellmarkError as e:
        _fail(e, as_json=False)

    click.echo(f"cd {shlex.quote(path)}" if as_cd else path)


@click.command("list")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["table", "selector", "raw"]),
    default="table",
    help="table: pretty; selector: 'name (path) [status]'; raw: store lines.",
)
@click.option("--inactive", is_flag=True, help="Only show bookmarks whose directory is gone.")
@_json_option
@click.pass_context
def list_cmd(ctx: click.Context, fmt: str, inactive: bool, as_json: bool) -> None:
    """List bookmarks with their active/inactive status."""
    store = _store(ctx)
    try:
        entries = store.list()
    except ShellmarkError as e:
        _fail(e, as_json)

    if inactive:
        entries = [e for e in entries if not e.active]

    if as_json:
        data = {"store": str(store.path), "bookmarks": [e.to_dict() for e in entries]}
        click.echo(json.dumps(data, indent=2))
        return

    if not entries:
        if not ctx.obj.get("quiet"):
            click.secho("No bookmarks found.", fg="yellow")
        return

    if fmt == "selector":
        for entry in entries:
            click.echo(entry.selector_line())
        return
    if fmt == "raw":
        for entry in entries:
            click.echo(f"{entry.path}|{entry.name}")
        return

    width = max(10, *(len(e.name) for e in entries))
    for entry in entries:
        color = "green" if entry.active else "red"
        click.echo("👉 ", nl=False)
        click.secho(f"{entry.name:<{width}}", fg="yellow", nl=False)
        click.echo(f" {entry.path} ", nl=False)
        click.secho(f"[{entry.status}]", fg=color)
