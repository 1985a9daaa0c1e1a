"""Identifier namespace helpers and identifier sources.

Issue ids have the shape ``<prefix>-<suffix>``. The prefix is everything
before the last hyphen, so ``bd-web-9`` lives in the ``bd-web`` namespace,
not in ``bd``. Only all-digit suffixes take part in high-water arithmetic;
hash-style ids such as ``bd-a3f8`` are never counted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from beads_cli.core.constants import DEFAULT_ISSUE_PREFIX

logger = logging.getLogger(__name__)


class AllocationError(RuntimeError):
    """Raised when a fresh identifier cannot be obtained."""


class IdentifierSource(Protocol):
    """Allocates the next unused identifier in the active namespace."""

    def next_id(self) -> str:
        ...


def split_id(issue_id: str) -> tuple[str, int | None]:
    """Split an id into ``(prefix, number)``.

    ``number`` is None when the suffix is not all digits or the id has no
    hyphen at all (in which case the whole id is returned as the prefix).
    """
    prefix, sep, suffix = issue_id.rpartition("-")
    if not sep or not prefix:
        return issue_id, None
    if suffix.isascii() and suffix.isdigit():
        return prefix, int(suffix)
    return prefix, None


def format_id(prefix: str, number: int) -> str:
    return f"{prefix}-{number}"


def infer_prefix(ids: Iterable[str]) -> str | None:
    """Return the prefix of the first id with a numeric suffix."""
    for issue_id in ids:
        prefix, number = split_id(issue_id)
        if number is not None:
            return prefix
    return None


def high_water_mark(ids: Iterable[str], prefix: str) -> int:
    """Return the largest numeric suffix among ids in ``prefix`` (0 if none)."""
    highest = 0
    for issue_id in ids:
        id_prefix, number = split_id(issue_id)
        if number is not None and id_prefix == prefix and number > highest:
            highest = number
    return highest


class NamespaceScanSource:
    """IdentifierSource backed by a scan of the store's existing ids.

    The scan runs once, on the first call; every later call is an in-memory
    increment of the high-water mark.
    """

    def __init__(self, ids: Iterable[str], prefix: str | None = None) -> None:
        self._ids = list(ids)
        self._prefix = prefix
        self._next: int | None = None

    @property
    def prefix(self) -> str:
        if self._prefix is None:
            self._prefix = infer_prefix(self._ids) or DEFAULT_ISSUE_PREFIX
        return self._prefix

    def next_id(self) -> str:
        if self._next is None:
            highest = high_water_mark(self._ids, self.prefix)
            logger.debug("High-water mark for %s is %d", self.prefix, highest)
            self._next = highest + 1
        issue_id = format_id(self.prefix, self._next)
        self._next += 1
        return issue_id


__all__ = [
    "AllocationError",
    "IdentifierSource",
    "NamespaceScanSource",
    "format_id",
    "high_water_mark",
    "infer_prefix",
    "split_id",
]
