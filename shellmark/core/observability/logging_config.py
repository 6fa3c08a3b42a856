"""
Logging setup for the shellmark CLI.

main.py calls ``setup_logging`` once per invocation, after settings are
resolved. Console records go to stderr so the output of ``shellmark get``
can be fed straight to ``cd``.

Console level precedence:
    --debug  >  --verbose  >  --quiet  >  SHELLMARK_LOG_LEVEL / config  >  WARNING

Every record is stamped with the store file the invocation works on, and
the optional log file (SHELLMARK_LOG_FILE) shows it, so one log can be
shared by several stores.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

# Console formats by level. Anything above INFO uses the plain form.
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_FMT_PLAIN = "shellmark: %(message)s"

_FMT_FILE = "%(asctime)s %(levelname)-5s [%(store)s] %(name)s:%(lineno)d  %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


class StoreContextFilter(logging.Filter):
    """Stamp records with the store path (``record.store``)."""

    def __init__(self, store_path: str | None):
        super().__init__()
        self.store_path = store_path or "-"

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "store"):
            record.store = self.store_path
        return True


def resolve_level(
    configured: str | None,
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> str:
    """Console level name from the global CLI flags and the settings value."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return (configured or "WARNING").upper()


def _console_formatter(numeric_level: int) -> logging.Formatter:
    for threshold in (logging.DEBUG, logging.INFO):
        if numeric_level <= threshold:
            fmt, datefmt = _CONSOLE_FORMATS[threshold]
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(_FMT_PLAIN)


def _open_log_file(log_file: str) -> logging.Handler | None:
    path = Path(log_file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot open log file %s: %s", path, e)
        return None


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    store_path: str | None = None,
) -> None:
    """Configure the root logger for one CLI invocation.

    Replaces any handlers from an earlier call. A log file that cannot be
    opened is reported on the console and otherwise ignored.
    """
    console_level = parse_level(level)
    store_filter = StoreContextFilter(store_path)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))
    console.addFilter(store_filter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(console_level)

    if not log_file:
        return

    handler = _open_log_file(log_file)
    if handler is None:
        return

    file_level = parse_level(log_file_level) if log_file_level else console_level
    handler.setLevel(file_level)
    handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
    handler.addFilter(store_filter)
    root.addHandler(handler)
    root.setLevel(min(console_level, file_level))


def parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
