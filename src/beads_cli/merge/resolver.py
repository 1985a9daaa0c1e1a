"""Mechanical identifier collision resolution.

The policy is deterministic and content-blind:

1. Every HEAD record keeps its id.
2. A BASE record keeps its id unless that id is already claimed (by a HEAD
   record or an earlier BASE record), in which case it is remapped to a
   fresh id from the namespace.

HEAD records are claimed across *all* regions before any BASE record is
looked at, so a BASE record in region 1 loses to a HEAD record in region 3.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from beads_cli.issues.ids import AllocationError, IdentifierSource, format_id, split_id

from .scanner import ConflictRegion

__all__ = [
    "COLLISION_REASON",
    "Resolution",
    "ResolutionAction",
    "ResolutionPlan",
    "Side",
    "resolve_collisions",
]

logger = logging.getLogger(__name__)

COLLISION_REASON = "identifier present in both sides"
HEAD_REASON = "HEAD version"
NO_COLLISION_REASON = "no collision"

# Consecutive source answers that are already in use before giving up.
MAX_SOURCE_ATTEMPTS = 100


class ResolutionAction(StrEnum):
    KEEP = "keep"
    REMAP = "remap"


class Side(StrEnum):
    HEAD = "head"
    BASE = "base"


@dataclass(frozen=True)
class Resolution:
    """How one record instance is resolved.

    For ``keep`` resolutions ``old_id == new_id``.
    """

    action: ResolutionAction
    side: Side
    old_id: str
    new_id: str
    reason: str

    @classmethod
    def keep(cls, side: Side, issue_id: str, reason: str) -> Resolution:
        return cls(ResolutionAction.KEEP, side, issue_id, issue_id, reason)

    @classmethod
    def remap(cls, old_id: str, new_id: str, reason: str) -> Resolution:
        return cls(ResolutionAction.REMAP, Side.BASE, old_id, new_id, reason)

    @property
    def issue_id(self) -> str:
        return self.old_id

    @property
    def is_remap(self) -> bool:
        return self.action is ResolutionAction.REMAP

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"action": str(self.action), "reason": self.reason}
        if self.is_remap:
            d["old_id"] = self.old_id
            d["new_id"] = self.new_id
        else:
            d["issue_id"] = self.issue_id
        return d


@dataclass(frozen=True)
class ResolutionPlan:
    """Output of one resolver run.

    Attributes:
        resolutions: One entry per record instance, HEAD side first.
        remap_table: ``old_id -> new_id``; first remap of an id wins.
        head_ids: Ids owned by HEAD records.
    """

    resolutions: tuple[Resolution, ...] = ()
    remap_table: dict[str, str] = field(default_factory=dict)
    head_ids: frozenset[str] = frozenset()

    @property
    def remaps(self) -> list[Resolution]:
        return [r for r in self.resolutions if r.is_remap]

    def for_side(self, side: Side) -> list[Resolution]:
        return [r for r in self.resolutions if r.side is side]


class _IdAllocator:
    """Hands out fresh ids, querying the source only to seed a high-water mark."""

    def __init__(self, source: IdentifierSource, reserved: set[str]) -> None:
        self._source = source
        self._reserved = reserved
        # (prefix, next number) once the source has handed out a numeric id
        self._cursor: tuple[str, int] | None = None

    def _ask_source(self) -> str:
        try:
            return self._source.next_id()
        except Exception as exc:
            raise AllocationError(f"Failed to get next ID: {exc}") from exc

    def reserve(self, issue_id: str) -> None:
        self._reserved.add(issue_id)

    def allocate(self) -> str:
        attempts = 0
        while True:
            if self._cursor is None:
                attempts += 1
                if attempts > MAX_SOURCE_ATTEMPTS:
                    raise AllocationError(
                        f"Failed to get next ID: source returned ids already in use "
                        f"{MAX_SOURCE_ATTEMPTS} times in a row"
                    )
                candidate = self._ask_source()
                prefix, number = split_id(candidate)
                if number is not None:
                    self._cursor = (prefix, number + 1)
            else:
                prefix, number = self._cursor
                candidate = format_id(prefix, number)
                self._cursor = (prefix, number + 1)
            if candidate not in self._reserved:
                return candidate
            logger.debug("Skipping %s: already in use", candidate)


@dataclass
class _ResolverState:
    claimed: set[str] = field(default_factory=set)
    remap_table: dict[str, str] = field(default_factory=dict)
    resolutions: list[Resolution] = field(default_factory=list)


def resolve_collisions(
    regions: Sequence[ConflictRegion],
    source: IdentifierSource,
    reserved_ids: Iterable[str] = (),
) -> ResolutionPlan:
    """Decide keep/remap for every record in ``regions``.

    ``reserved_ids`` are ids that fresh allocations must avoid (normally
    every id present anywhere in the file). They do not count as claims:
    a BASE record is only remapped when its id collides with another
    record inside the conflict regions.

    Raises :class:`AllocationError` if the identifier source fails; no
    partial plan is returned in that case.
    """
    state = _ResolverState()

    for region in regions:
        for record in region.head_records:
            state.resolutions.append(Resolution.keep(Side.HEAD, record.id, HEAD_REASON))
            state.claimed.add(record.id)
    head_ids = frozenset(state.claimed)

    reserved = set(reserved_ids)
    allocator = _IdAllocator(source, reserved | state.claimed)

    for region in regions:
        for record in region.base_records:
            if record.id not in state.claimed:
                state.resolutions.append(Resolution.keep(Side.BASE, record.id, NO_COLLISION_REASON))
                state.claimed.add(record.id)
                allocator.reserve(record.id)
                continue

            new_id = allocator.allocate()
            allocator.reserve(new_id)
            state.claimed.add(new_id)
            state.remap_table.setdefault(record.id, new_id)
            state.resolutions.append(Resolution.remap(record.id, new_id, COLLISION_REASON))
            logger.debug("Remapping %s -> %s", record.id, new_id)

    return ResolutionPlan(
        resolutions=tuple(state.resolutions),
        remap_table=dict(state.remap_table),
        head_ids=head_ids,
    )
