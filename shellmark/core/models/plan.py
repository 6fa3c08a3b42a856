"""
Plan and Receipt models — the mutation contract.

A Plan describes one store mutation as data: which entries exist before,
which exist after, and an optional directory move. The renderer formats
a Plan for dry-run preview; the executor applies it. Receipts record
what happened.
"""

from __future__ import annotations

import difflib
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from shellmark.core.models.bookmark import Entry, UnparsedLine

PlanKind = Literal["add", "replace", "remove", "rename", "rename_dir", "prune"]


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Plan(BaseModel):
    """A fully computed mutation of the bookmark store.

    Built by the planner without touching disk. ``before`` is the entry
    list as read; ``after`` is the entry list to write. ``unparsed`` lines
    are written back untouched.
    """

    kind: PlanKind
    name: str
    store_path: str
    before: list[Entry] = Field(default_factory=list)
    after: list[Entry] = Field(default_factory=list)
    unparsed: list[UnparsedLine] = Field(default_factory=list)
    move_from: str | None = None    # directory rename source
    move_to: str | None = None      # directory rename target
    note: str = ""

    def _line_diff(self) -> tuple[list[str], list[str]]:
        old = [e.to_line() for e in self.before]
        new = [e.to_line() for e in self.after]
        removed: list[str] = []
        added: list[str] = []
        matcher = difflib.SequenceMatcher(a=old, b=new, autojunk=False)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag in ("replace", "delete"):
                removed.extend(old[i1:i2])
            if tag in ("replace", "insert"):
                added.extend(new[j1:j2])
        return removed, added

    @property
    def removed(self) -> list[str]:
        """Lines dropped from their position in the file."""
        return self._line_diff()[0]

    @property
    def added(self) -> list[str]:
        """Lines written at a new position in the file."""
        return self._line_diff()[1]

    @property
    def moves_directory(self) -> bool:
        return self.move_from is not None and self.move_to is not None

    @property
    def is_noop(self) -> bool:
        return not self.moves_directory and self.before == self.after

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "kind": self.kind,
            "name": self.name,
            "store_path": self.store_path,
            "removed": self.removed,
            "added": self.added,
        }
        if self.moves_directory:
            data["move"] = {"from": self.move_from, "to": self.move_to}
        if self.unparsed:
            data["unparsed_kept"] = [u.text for u in self.unparsed]
        if self.note:
            data["note"] = self.note
        return data


class Receipt(BaseModel):
    """Result of executing or previewing a Plan."""

    kind: str
    name: str
    status: Literal["ok", "skipped"] = "ok"
    dry_run: bool = False

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the plan was applied."""
        return self.status == "ok"

    @classmethod
    def success(cls, plan: Plan, output: str = "", **kwargs: Any) -> Receipt:
        """Create a receipt for an applied plan."""
        return cls(kind=plan.kind, name=plan.name, status="ok", output=output, **kwargs)

    @classmethod
    def skip(cls, plan: Plan, reason: str = "", **kwargs: Any) -> Receipt:
        """Create a receipt for a plan that was previewed or had nothing to do."""
        return cls(kind=plan.kind, name=plan.name, status="skipped", output=reason, **kwargs)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
