"""Line-level access to the JSONL issue store.

The conflict tooling never decodes the store as a whole: a file left
behind by a failed merge is not valid JSONL. Instead the file is read as
raw lines (split on ``\\n`` so that joining them again reproduces the
original bytes) and records are parsed one line at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from .models import Record, RecordParseError, parse_record

logger = logging.getLogger(__name__)

WriteText = Callable[[Path, str], None]


class StoreError(Exception):
    """Raised when the issue store cannot be read or written."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


def read_lines(path: Path) -> list[str]:
    """Read the store as a list of raw lines.

    ``"\\n".join(read_lines(p))`` is exactly the file content; a trailing
    newline shows up as a final empty line.
    """
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            content = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise StoreError(f"Failed to read {path}: {exc}", path) from exc
    return content.split("\n")


def write_text(path: Path, content: str) -> None:
    """Plain (non-atomic) write, used when the caller supplies no writer."""
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(content)


def write_lines(path: Path, lines: list[str], write: WriteText = write_text) -> None:
    """Join ``lines`` with ``\\n`` and write them through ``write``."""
    try:
        write(path, "\n".join(lines))
    except OSError as exc:
        raise StoreError(f"Failed to write {path}: {exc}", path) from exc


def iter_records(lines: Iterable[str]) -> Iterator[Record]:
    """Yield every line that parses as a record, skipping everything else.

    Merge markers, blank lines and malformed lines are all skipped, so this
    also works on a file that still contains conflict regions.
    """
    for raw_line in lines:
        stripped = raw_line.strip()
        if not stripped:
            continue
        try:
            yield parse_record(stripped)
        except RecordParseError:
            continue


__all__ = [
    "StoreError",
    "WriteText",
    "iter_records",
    "read_lines",
    "write_lines",
    "write_text",
]
