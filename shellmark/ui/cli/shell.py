"""
CLI command for shell integration.
"""

from __future__ import annotations

import click

from shellmark.core.services.shell_init import SUPPORTED_SHELLS, shell_snippet


@click.command("init-shell")
@click.argument("shell", type=click.Choice(SUPPORTED_SHELLS), default="bash")
def init_shell(shell: str) -> None:
    """Print the goto function for your shell rc file.

    Examples:

        eval "$(shellmark init-shell zsh)"
    """
    click.echo(shell_snippet(shell), nl=False)
