"""
Executor — applies a Plan to disk, or previews it.

``execute`` is the single entry point for every mutating store
operation: in dry-run it returns a skipped Receipt carrying the rendered
preview and touches nothing; otherwise it applies the plan.

Directory renames run in a fixed order: the physical rename first, the
store rewrite second. If the rewrite fails after the directory has
moved, the bookmark still points at the old path; that state is reported
as InconsistentError and never swallowed.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from shellmark.core.engine.renderer import render_text
from shellmark.core.errors import InconsistentError, StoreIOError
from shellmark.core.models.plan import Plan, Receipt
from shellmark.core.persistence.store_file import write_entries

logger = logging.getLogger(__name__)


def _move_directory(plan: Plan) -> None:
    assert plan.move_from is not None and plan.move_to is not None
    try:
        Path(plan.move_from).rename(plan.move_to)
    except OSError as e:
        raise StoreIOError(
            f"Failed to rename directory {plan.move_from} → {plan.move_to}: {e}"
        ) from e
    logger.info("Renamed directory %s → %s", plan.move_from, plan.move_to)


def apply_plan(plan: Plan) -> Receipt:
    """Apply a plan for real.

    Raises:
        StoreIOError: The directory rename or the store write failed and
            nothing was changed.
        InconsistentError: The directory was renamed but the store write
            failed.
    """
    start = time.monotonic()

    if plan.is_noop:
        return Receipt.skip(plan, reason=plan.note or "Nothing to do.")

    store_path = Path(plan.store_path)

    if plan.moves_directory:
        _move_directory(plan)
        try:
            write_entries(plan.after, store_path, plan.unparsed)
        except StoreIOError as e:
            assert plan.move_from is not None and plan.move_to is not None
            raise InconsistentError(
                f"Directory renamed to {plan.move_to} but bookmark "
                f"'{plan.name}' could not be updated: {e}",
                moved_from=plan.move_from,
                moved_to=plan.move_to,
            ) from e
    else:
        write_entries(plan.after, store_path, plan.unparsed)

    elapsed_ms = int((time.monotonic() - start) * 1000)
    logger.info(
        "✓ %s '%s' → %s (-%d +%d)",
        plan.kind,
        plan.name,
        store_path,
        len(plan.removed),
        len(plan.added),
    )
    return Receipt.success(
        plan,
        output=render_text(plan),
        duration_ms=elapsed_ms,
        metadata=plan.to_dict(),
    )


def preview_plan(plan: Plan) -> Receipt:
    """Describe a plan without applying it."""
    return Receipt.skip(
        plan,
        reason=render_text(plan),
        dry_run=True,
        metadata=plan.to_dict(),
    )


def execute(plan: Plan, dry_run: bool = False) -> Receipt:
    """Preview (dry-run) or apply a plan."""
    if dry_run:
        logger.debug("[dry-run] %s '%s'", plan.kind, plan.name)
        return preview_plan(plan)
    return apply_plan(plan)
