"""Helpers for building conflicted issue stores in tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


def issue(issue_id: str, title: str | None = None, **fields: Any) -> dict[str, Any]:
    """Build an issue dict in store key order."""
    data: dict[str, Any] = {"id": issue_id, "title": title or f"Issue {issue_id}"}
    data.update(fields)
    return data


def dep(issue_id: str, depends_on_id: str, kind: str = "blocks") -> dict[str, Any]:
    return {"issue_id": issue_id, "depends_on_id": depends_on_id, "type": kind}


def line(issue_id: str, title: str | None = None, **fields: Any) -> str:
    """One compact JSONL line for an issue."""
    return json.dumps(issue(issue_id, title, **fields), separators=(",", ":"))


def conflict(
    head: list[str],
    base: list[str],
    ancestor: list[str] | None = None,
    label: str = "feature",
) -> list[str]:
    """Wrap two sides in git conflict markers."""
    lines = ["<<<<<<< HEAD", *head]
    if ancestor is not None:
        lines += ["||||||| merged common ancestors", *ancestor]
    lines += ["=======", *base, f">>>>>>> {label}"]
    return lines


def as_content(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def load(line_text: str) -> dict[str, Any]:
    return json.loads(line_text)


def malformed_corpus() -> list[str]:
    """Lines that must never parse as records."""
    text = (FIXTURES_DIR / "malformed_records.jsonl").read_text(encoding="utf-8")
    return [raw for raw in text.splitlines() if raw.strip()]


class StubSource:
    """Deterministic identifier source: counts up from a high-water mark."""

    def __init__(self, high_water: int = 5, prefix: str = "bd") -> None:
        self.prefix = prefix
        self.high_water = high_water
        self.calls = 0

    def next_id(self) -> str:
        self.calls += 1
        self.high_water += 1
        return f"{self.prefix}-{self.high_water}"


class FailingSource:
    """Identifier source whose backend is unavailable."""

    def __init__(self) -> None:
        self.calls = 0

    def next_id(self) -> str:
        self.calls += 1
        raise ConnectionError("store not initialized")
