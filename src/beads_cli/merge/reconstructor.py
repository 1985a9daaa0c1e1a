"""Rebuild a conflicted JSONL file from a resolution plan.

Replays the raw lines once with the scanner's state machine. Conflict
regions (markers included) are replaced by their resolved records; every
other line passes through, rewritten only when it is a record that
references a remapped id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from beads_cli.issues.models import Record, RecordParseError, parse_record, serialize_record

from .resolver import Resolution, ResolutionPlan, Side
from .rewriter import rewrite_references, with_identity
from .scanner import LineKind, ScanState, classify_line, next_state

__all__ = ["ReconstructionError", "ReconstructionResult", "reconstruct"]

logger = logging.getLogger(__name__)


class ReconstructionError(RuntimeError):
    """Raised when the replay disagrees with the resolution plan."""


@dataclass
class ReconstructionResult:
    """Rebuilt lines plus counters for reporting."""

    lines: list[str]
    regions_resolved: int = 0
    records_rewritten: int = 0


@dataclass
class _PendingRegion:
    raw_lines: list[str] = field(default_factory=list)
    head: list[tuple[str, Record]] = field(default_factory=list)
    base: list[tuple[str, Record]] = field(default_factory=list)


def _render(raw_line: str, original: Record, updated: Record) -> str:
    """Return the output line for a record, keeping raw text when unchanged."""
    if updated is original:
        return raw_line
    line = serialize_record(updated)
    if raw_line.endswith("\r"):
        line += "\r"
    return line


class _Replay:
    def __init__(self, plan: ResolutionPlan) -> None:
        self.plan = plan
        self.base_resolutions: Iterator[Resolution] = iter(plan.for_side(Side.BASE))
        self.output: list[str] = []
        self.regions_resolved = 0
        self.records_rewritten = 0

    def _emit_record(self, raw_line: str, original: Record, updated: Record) -> None:
        if updated is not original:
            self.records_rewritten += 1
            logger.debug("Rewrote record %s", updated.id)
        self.output.append(_render(raw_line, original, updated))

    def outside(self, raw_line: str) -> None:
        try:
            record = parse_record(raw_line.strip())
        except RecordParseError:
            self.output.append(raw_line)
            return
        updated = rewrite_references(record, self.plan.remap_table)
        self._emit_record(raw_line, record, updated)

    def _next_base_resolution(self, record: Record) -> Resolution:
        resolution = next(self.base_resolutions, None)
        if resolution is None or resolution.old_id != record.id:
            expected = resolution.old_id if resolution else "nothing"
            raise ReconstructionError(
                f"Resolution plan out of step: expected {expected}, found {record.id}"
            )
        return resolution

    def close(self, region: _PendingRegion) -> None:
        for raw_line, record in region.head:
            updated = rewrite_references(
                record, self.plan.remap_table, exclude=self.plan.head_ids
            )
            self._emit_record(raw_line, record, updated)

        for raw_line, record in region.base:
            resolution = self._next_base_resolution(record)
            updated = record
            if resolution.is_remap:
                updated = with_identity(record, resolution.new_id)
            updated = rewrite_references(updated, self.plan.remap_table)
            self._emit_record(raw_line, record, updated)

        self.regions_resolved += 1

    def flush_unresolved(self, region: _PendingRegion) -> None:
        self.output.extend(region.raw_lines)


def reconstruct(lines: Sequence[str], plan: ResolutionPlan) -> ReconstructionResult:
    """Replay ``lines`` and return the resolved file as lines.

    ``plan`` must come from resolving the regions that
    :func:`~beads_cli.merge.scanner.scan_conflicts` found in the same lines.
    """
    replay = _Replay(plan)
    state = ScanState.OUTSIDE
    pending: _PendingRegion | None = None

    for raw_line in lines:
        kind = classify_line(raw_line)

        if pending is None:
            if kind is LineKind.OPEN:
                pending = _PendingRegion(raw_lines=[raw_line])
                state = next_state(state, kind)
            elif kind is LineKind.CONTENT:
                replay.outside(raw_line)
            else:
                replay.output.append(raw_line)
            continue

        if kind is LineKind.OPEN:
            # Same rule as the scanner: the unfinished region is abandoned.
            replay.flush_unresolved(pending)
            pending = _PendingRegion(raw_lines=[raw_line])
            state = next_state(state, kind)
            continue

        pending.raw_lines.append(raw_line)

        if kind is LineKind.CONTENT:
            if state is ScanState.IN_ANCESTOR:
                continue
            try:
                record = parse_record(raw_line.strip())
            except RecordParseError:
                continue
            target = pending.head if state is ScanState.IN_HEAD else pending.base
            target.append((raw_line, record))
            continue

        state = next_state(state, kind)
        if kind is LineKind.CLOSE:
            replay.close(pending)
            pending = None

    if pending is not None:
        replay.flush_unresolved(pending)

    leftover = next(replay.base_resolutions, None)
    if leftover is not None:
        raise ReconstructionError(
            f"Resolution plan out of step: {leftover.old_id} was never reached"
        )

    return ReconstructionResult(
        lines=replay.output,
        regions_resolved=replay.regions_resolved,
        records_rewritten=replay.records_rewritten,
    )
