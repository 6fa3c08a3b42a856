"""
Domain models — Pydantic types for the bookmark store.

All models are re-exported here for convenient access:

    from shellmark.core.models import Entry, ListedEntry, Plan, Receipt
"""

from shellmark.core.models.bookmark import (
    Entry,
    ListedEntry,
    UnparsedLine,
    normalize_name,
    parse_lines,
    parse_selector_line,
    parse_store,
    serialize,
)
from shellmark.core.models.plan import Plan, Receipt

__all__ = [
    # bookmark.py
    "Entry",
    "ListedEntry",
    "UnparsedLine",
    "normalize_name",
    "parse_lines",
    "parse_selector_line",
    "parse_store",
    "serialize",
    # plan.py
    "Plan",
    "Receipt",
]
