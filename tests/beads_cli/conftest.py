"""Shared fixtures for beads_cli tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.utils import StubSource


@pytest.fixture
def beads_project(tmp_path: Path) -> Path:
    """A project root with an empty .beads directory."""
    (tmp_path / ".beads").mkdir()
    return tmp_path


@pytest.fixture
def store_path(beads_project: Path) -> Path:
    return beads_project / ".beads" / "issues.jsonl"


@pytest.fixture
def stub_source() -> StubSource:
    """High-water mark bd-5: the first fresh id is bd-6."""
    return StubSource(high_water=5)
