"""
Renderer — formats a Plan as text for dry-run preview.

The renderer and the executor read the same Plan: what is previewed is
exactly what would be applied.
"""

from __future__ import annotations

import shlex

from shellmark.core.models.plan import Plan

_HEADERS = {
    "add": "add bookmark '{name}'",
    "replace": "replace bookmark '{name}'",
    "remove": "remove bookmark '{name}'",
    "rename": "rename bookmark {note}",
    "rename_dir": "rename directory of bookmark '{name}'",
    "prune": "prune inactive bookmarks: {name}",
}


def render_plan(plan: Plan) -> list[str]:
    """Render a plan as preview lines.

    Layout::

        <header> in <store_path>
        mv '<from>' '<to>'          (directory renames only)
        - <removed line>
        + <added line>
        = <unparsed line>            (kept as-is)
    """
    if plan.is_noop:
        return [plan.note or f"{plan.kind}: nothing to do"]

    header = _HEADERS[plan.kind].format(name=plan.name, note=plan.note)
    lines = [f"{header} in {plan.store_path}"]

    if plan.moves_directory:
        lines.append(f"mv {shlex.quote(plan.move_from)} {shlex.quote(plan.move_to)}")

    lines.extend(f"- {line}" for line in plan.removed)
    lines.extend(f"+ {line}" for line in plan.added)
    lines.extend(f"= {u.text}" for u in plan.unparsed)
    return lines


def render_text(plan: Plan) -> str:
    return "\n".join(render_plan(plan))
