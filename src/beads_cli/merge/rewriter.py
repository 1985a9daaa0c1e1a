"""Reference rewriting for remapped identifiers.

Applies a remap table to one record: dependency edges and free-text
fields. Free-text matching is whole-token only and longest-first, so
remapping ``bd-1`` leaves ``bd-10``, ``xbd-1`` and the child id
``bd-1.2`` alone, and a single pass means a freshly substituted id is
never substituted again.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Mapping
from dataclasses import replace
from functools import lru_cache

from beads_cli.issues.models import TEXT_FIELDS, Dependency, Record

__all__ = [
    "compile_id_pattern",
    "remap_text",
    "rewrite_references",
    "with_identity",
]

# An id is a whole token when it is not glued to identifier characters on
# either side. A trailing "." only counts as glue when another identifier
# character follows it (child ids such as bd-1.2), not at sentence end.
_LEFT_BOUNDARY = r"(?<![\w-])"
_RIGHT_BOUNDARY = r"(?![\w-]|\.\w)"


@lru_cache(maxsize=64)
def _compile(ids: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(issue_id) for issue_id in ids)
    return re.compile(f"{_LEFT_BOUNDARY}(?:{alternatives}){_RIGHT_BOUNDARY}")


def compile_id_pattern(ids: Collection[str]) -> re.Pattern[str] | None:
    """Return one pattern matching any of ``ids`` as a whole token.

    Alternatives are ordered longest first. Returns None for no ids.
    """
    if not ids:
        return None
    ordered = tuple(sorted(set(ids), key=lambda issue_id: (-len(issue_id), issue_id)))
    return _compile(ordered)


def remap_text(text: str, table: Mapping[str, str]) -> str:
    """Replace every whole-token occurrence of a table key in ``text``."""
    if not text or not table:
        return text
    pattern = compile_id_pattern(table.keys())
    if pattern is None:
        return text
    return pattern.sub(lambda match: table[match.group(0)], text)


def _effective_table(table: Mapping[str, str], exclude: Collection[str]) -> Mapping[str, str]:
    if not exclude:
        return table
    return {old: new for old, new in table.items() if old not in exclude}


def rewrite_references(
    record: Record,
    table: Mapping[str, str],
    exclude: Collection[str] = (),
) -> Record:
    """Return ``record`` with references to remapped ids rewritten.

    ``exclude`` removes ids from the table for this call only. The record's
    own id is never touched. When nothing changes the same object is
    returned.
    """
    effective = _effective_table(table, exclude)
    if not effective:
        return record

    changes: dict[str, object] = {}

    dependencies = tuple(
        replace(dep, depends_on_id=effective[dep.depends_on_id])
        if dep.depends_on_id in effective
        else dep
        for dep in record.dependencies
    )
    if dependencies != record.dependencies:
        changes["dependencies"] = dependencies

    for name in TEXT_FIELDS:
        original = getattr(record, name)
        rewritten = remap_text(original, effective)
        if rewritten != original:
            changes[name] = rewritten

    if not changes:
        return record
    return replace(record, **changes)


def _rename_edge(dep: Dependency, old_id: str, new_id: str) -> Dependency:
    if dep.issue_id != old_id:
        return dep
    raw = dict(dep.raw)
    raw["issue_id"] = new_id
    return replace(dep, raw=raw)


def with_identity(record: Record, new_id: str) -> Record:
    """Return ``record`` renamed to ``new_id``.

    Dependency edges that name the record as their source (``issue_id``)
    follow the rename.
    """
    if new_id == record.id:
        return record
    return replace(
        record,
        id=new_id,
        dependencies=tuple(_rename_edge(dep, record.id, new_id) for dep in record.dependencies),
    )
