"""Entry points for conflict detection and mechanical resolution.

Two operations are exposed:

``detect_conflicts``
    Read the file and return its conflict regions. Never writes.

``resolve_conflicts``
    Read the file, resolve identifier collisions, rebuild the file and
    (unless ``dry_run``) write it back through the supplied write
    primitive. Every read and every allocation happens before the write,
    so a failure leaves the file as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from beads_cli.issues.ids import IdentifierSource, NamespaceScanSource
from beads_cli.issues.store import WriteText, iter_records, read_lines, write_lines, write_text

from .reconstructor import reconstruct
from .resolver import ResolutionPlan, resolve_collisions
from .scanner import ConflictRegion, scan_conflicts

__all__ = ["ResolutionReport", "detect_conflicts", "resolve_conflicts"]

logger = logging.getLogger(__name__)


@dataclass
class ResolutionReport:
    """Outcome of :func:`resolve_conflicts`."""

    path: Path
    regions: list[ConflictRegion] = field(default_factory=list)
    plan: ResolutionPlan = field(default_factory=ResolutionPlan)
    lines: list[str] = field(default_factory=list)
    written: bool = False
    records_rewritten: int = 0

    @property
    def content(self) -> str:
        return "\n".join(self.lines)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.regions)


def detect_conflicts(path: Path) -> list[ConflictRegion]:
    """Return the conflict regions of the JSONL file at ``path``."""
    return scan_conflicts(read_lines(path))


def resolve_conflicts(
    path: Path,
    source: IdentifierSource | None = None,
    *,
    prefix: str | None = None,
    dry_run: bool = False,
    write: WriteText = write_text,
) -> ResolutionReport:
    """Resolve every conflict region in the JSONL file at ``path``.

    Args:
        path: The conflicted issue store.
        source: Where fresh ids come from. Defaults to a namespace scan
            over every parseable record in the file.
        prefix: Namespace for the default source; ignored when ``source``
            is given.
        dry_run: Compute everything but do not write.
        write: Write primitive. The core does not make writes atomic;
            pass an atomic writer if that matters.

    Raises:
        StoreError: The file could not be read or written.
        AllocationError: ``source`` failed; nothing was written.
    """
    lines = read_lines(path)
    regions = scan_conflicts(lines)
    if not regions:
        logger.info("No conflict regions in %s", path)
        return ResolutionReport(path=path, lines=lines)

    ordered_ids = [record.id for record in iter_records(lines)]
    existing_ids = set(ordered_ids)
    if source is None:
        source = NamespaceScanSource(ordered_ids, prefix=prefix)

    plan = resolve_collisions(regions, source, reserved_ids=existing_ids)
    result = reconstruct(lines, plan)

    report = ResolutionReport(
        path=path,
        regions=regions,
        plan=plan,
        lines=result.lines,
        records_rewritten=result.records_rewritten,
    )
    if dry_run:
        return report

    write_lines(path, result.lines, write)
    report.written = True
    logger.info(
        "Resolved %d conflict region(s) in %s (%d remap(s), %d record(s) rewritten)",
        result.regions_resolved,
        path,
        len(plan.remaps),
        result.records_rewritten,
    )
    return report
