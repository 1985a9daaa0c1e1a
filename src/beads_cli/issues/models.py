"""Issue record model for the JSONL store.

Defines the parts of an issue record the conflict tooling needs to see:
the identifier, the free-text fields that may mention other issues, and
the dependency edges. Every other key of the JSON object is carried along
untouched so that re-serialization never drops data.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

TEXT_FIELDS = ("description", "design", "acceptance_criteria", "notes")


class RecordParseError(ValueError):
    """Raised when a line is not a usable issue record."""


@dataclass(frozen=True)
class Dependency:
    """A dependency edge from one issue to another."""

    depends_on_id: str
    relation_type: str = ""
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def issue_id(self) -> str | None:
        value = self.raw.get("issue_id")
        return value if isinstance(value, str) else None

    def to_dict(self) -> dict[str, Any]:
        d = dict(self.raw)
        # An edge without a usable target is carried as-is.
        if self.depends_on_id:
            d["depends_on_id"] = self.depends_on_id
        key = "relation_type" if "relation_type" in d and "type" not in d else "type"
        if self.relation_type or d.get(key) is not None:
            d[key] = self.relation_type
        return d

    @classmethod
    def from_dict(cls, data: Any) -> Dependency:
        if not isinstance(data, dict):
            raise RecordParseError(f"dependency must be an object, got {type(data).__name__}")
        target = data.get("depends_on_id")
        if not isinstance(target, str):
            target = ""
        relation = data.get("type", data.get("relation_type", ""))
        if relation is None:
            relation = ""
        if not isinstance(relation, str):
            raise RecordParseError("dependency type must be a string")
        return cls(depends_on_id=target, relation_type=relation, raw=dict(data))


@dataclass(frozen=True)
class Record:
    """One issue record (one line of the JSONL store)."""

    id: str
    title: str = ""
    description: str = ""
    design: str = ""
    acceptance_criteria: str = ""
    notes: str = ""
    dependencies: tuple[Dependency, ...] = ()
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object for this record.

        Keys keep the order they had in the source line. Known fields that
        were absent in the source are only added when non-empty.
        """
        d = dict(self.raw)
        d["id"] = self.id
        for name in ("title", *TEXT_FIELDS):
            value = getattr(self, name)
            if value or d.get(name) is not None:
                d[name] = value
        if "dependencies" in d or self.dependencies:
            d["dependencies"] = [dep.to_dict() for dep in self.dependencies]
        return d

    @classmethod
    def from_dict(cls, data: Any) -> Record:
        if not isinstance(data, dict):
            raise RecordParseError(f"record must be a JSON object, got {type(data).__name__}")

        issue_id = data.get("id")
        if not isinstance(issue_id, str) or not issue_id:
            raise RecordParseError("record is missing a string id")

        strings: dict[str, str] = {}
        for name in ("title", *TEXT_FIELDS):
            value = data.get(name)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise RecordParseError(f"{name} of {issue_id} must be a string")
            strings[name] = value

        deps_data = data.get("dependencies")
        if deps_data is None:
            deps_data = []
        if not isinstance(deps_data, list):
            raise RecordParseError(f"dependencies of {issue_id} must be a list")

        return cls(
            id=issue_id,
            dependencies=tuple(Dependency.from_dict(d) for d in deps_data),
            raw=dict(data),
            **strings,
        )


def parse_record(line: str) -> Record:
    """Parse one JSONL line into a :class:`Record`.

    Raises :class:`RecordParseError` for invalid JSON or an object that
    lacks the fields needed to locate identifiers and references.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise RecordParseError(f"invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise RecordParseError("JSON nested too deeply") from exc
    return Record.from_dict(data)


def serialize_record(record: Record) -> str:
    """Serialize a record as one compact JSON line (no trailing newline)."""
    return json.dumps(record.to_dict(), ensure_ascii=False, separators=(",", ":"))


__all__ = [
    "Dependency",
    "Record",
    "RecordParseError",
    "TEXT_FIELDS",
    "parse_record",
    "serialize_record",
]
