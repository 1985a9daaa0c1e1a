"""Conflict region scanning for the JSONL issue store.

Walks the raw lines of a file left behind by a failed git merge and
returns each conflict region with the records found on either side.

The line classifier and the state machine defined here are shared with
the reconstructor, which replays the same walk to rebuild the file. Both
walks must stay in lockstep: region N seen by the scanner is region N
rebuilt by the reconstructor.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from beads_cli.issues.models import Record, RecordParseError, parse_record

__all__ = [
    "ANCESTOR_MARKER",
    "CLOSE_MARKER",
    "ConflictRegion",
    "DIVIDER_MARKER",
    "LineKind",
    "OPEN_MARKER",
    "ScanState",
    "classify_line",
    "next_state",
    "scan_conflicts",
]

logger = logging.getLogger(__name__)

OPEN_MARKER = "<<<<<<<"
ANCESTOR_MARKER = "|||||||"
DIVIDER_MARKER = "======="
CLOSE_MARKER = ">>>>>>>"


class LineKind(Enum):
    BLANK = auto()
    OPEN = auto()
    ANCESTOR = auto()
    DIVIDER = auto()
    CLOSE = auto()
    CONTENT = auto()


class ScanState(Enum):
    OUTSIDE = auto()
    IN_HEAD = auto()
    IN_ANCESTOR = auto()
    IN_BASE = auto()


@dataclass
class ConflictRegion:
    """A single conflict region and the records on each side.

    Line numbers are 1-based and point at the open and close markers.
    """

    line_start: int
    line_end: int = 0
    head_records: list[Record] = field(default_factory=list)
    base_records: list[Record] = field(default_factory=list)

    @property
    def head_ids(self) -> list[str]:
        return [record.id for record in self.head_records]

    @property
    def base_ids(self) -> list[str]:
        return [record.id for record in self.base_records]

    def to_dict(self) -> dict[str, object]:
        return {
            "line_start": self.line_start,
            "line_end": self.line_end,
            "head_issues": self.head_ids,
            "base_issues": self.base_ids,
        }


def classify_line(line: str) -> LineKind:
    """Classify one raw line. Surrounding whitespace is ignored."""
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK
    if stripped.startswith(OPEN_MARKER):
        return LineKind.OPEN
    if stripped.startswith(CLOSE_MARKER):
        return LineKind.CLOSE
    if stripped.startswith(ANCESTOR_MARKER):
        return LineKind.ANCESTOR
    if stripped == DIVIDER_MARKER:
        return LineKind.DIVIDER
    return LineKind.CONTENT


def next_state(state: ScanState, kind: LineKind) -> ScanState:
    """Return the state after a line of ``kind`` is seen in ``state``.

    Content and blank lines never change state. Markers that make no sense
    in the current state (a divider outside a region, a second divider in
    the base section, a close marker with no open marker) are ignored.
    """
    if kind is LineKind.OPEN:
        return ScanState.IN_HEAD
    if state is ScanState.OUTSIDE:
        return state
    if kind is LineKind.CLOSE:
        return ScanState.OUTSIDE
    if kind is LineKind.ANCESTOR and state is ScanState.IN_HEAD:
        return ScanState.IN_ANCESTOR
    if kind is LineKind.DIVIDER and state in (ScanState.IN_HEAD, ScanState.IN_ANCESTOR):
        return ScanState.IN_BASE
    return state


def scan_conflicts(lines: Sequence[str]) -> list[ConflictRegion]:
    """Parse raw lines into the ordered list of conflict regions.

    Never raises: lines inside a region that do not parse as records are
    dropped, and regions that are never closed are not reported.
    """
    regions: list[ConflictRegion] = []
    current: ConflictRegion | None = None
    state = ScanState.OUTSIDE

    for line_number, line in enumerate(lines, start=1):
        kind = classify_line(line)

        if kind is LineKind.CONTENT:
            if current is None or state is ScanState.IN_ANCESTOR:
                continue
            try:
                record = parse_record(line.strip())
            except RecordParseError as exc:
                logger.debug("Dropping line %d inside conflict region: %s", line_number, exc)
                continue
            if state is ScanState.IN_HEAD:
                current.head_records.append(record)
            else:
                current.base_records.append(record)
            continue

        state = next_state(state, kind)

        if kind is LineKind.OPEN:
            if current is not None:
                logger.warning(
                    "Conflict region opened at line %d was never closed; "
                    "abandoning it at line %d",
                    current.line_start,
                    line_number,
                )
            current = ConflictRegion(line_start=line_number)
        elif kind is LineKind.CLOSE and current is not None:
            current.line_end = line_number
            regions.append(current)
            current = None

    if current is not None:
        logger.warning(
            "Conflict region opened at line %d is not closed before end of file",
            current.line_start,
        )

    return regions
