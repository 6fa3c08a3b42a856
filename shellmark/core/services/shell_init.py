"""
Shell integration — the ``goto`` function users source into their shell.

A child process cannot change its parent's working directory, so the
``cd`` happens in a shell function that asks ``shellmark get`` for the
path.
"""

from __future__ import annotations

import textwrap

from shellmark.core.errors import InvalidArgumentError

SUPPORTED_SHELLS = ("bash", "zsh")

_GOTO_FUNCTION = textwrap.dedent("""\
    # shellmark: goto <name> jumps to a bookmark; goto alone lists them.
    goto() {
        if [ $# -eq 0 ]; then
            {exe} list
            return $?
        fi
        local target
        target="$({exe} get "$1")" || return 1
        cd "$target" || return 1
    }
""")


def shell_snippet(shell: str = "bash", executable: str = "shellmark") -> str:
    """Return the ``goto`` function for a supported shell.

    Raises:
        InvalidArgumentError: Unsupported shell.
    """
    if shell not in SUPPORTED_SHELLS:
        raise InvalidArgumentError(
            f"Unsupported shell '{shell}'. Supported: {', '.join(SUPPORTED_SHELLS)}"
        )
    # bash and zsh share the POSIX function syntax
    return _GOTO_FUNCTION.replace("{exe}", executable)
