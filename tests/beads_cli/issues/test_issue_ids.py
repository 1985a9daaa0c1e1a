"""Tests for identifier namespace helpers and NamespaceScanSource."""

from __future__ import annotations

import pytest

from beads_cli.issues.ids import (
    NamespaceScanSource,
    format_id,
    high_water_mark,
    infer_prefix,
    split_id,
)


@pytest.mark.parametrize(
    "issue_id,expected",
    [
        ("bd-1", ("bd", 1)),
        ("bd-42", ("bd", 42)),
        ("bd-web-9", ("bd-web", 9)),
        ("bd-a3f8", ("bd", None)),
        ("bd-1.2", ("bd", None)),
        ("nohyphen", ("nohyphen", None)),
        ("-7", ("-7", None)),
    ],
)
def test_split_id(issue_id, expected):
    assert split_id(issue_id) == expected


def test_format_id():
    assert format_id("bd", 6) == "bd-6"


def test_infer_prefix_uses_first_numeric_id():
    assert infer_prefix(["bd-a3f8", "proj-3", "bd-9"]) == "proj"
    assert infer_prefix(["bd-a3f8"]) is None
    assert infer_prefix([]) is None


def test_high_water_mark_respects_namespace_boundary():
    ids = ["bd-3", "bd-12", "bd-web-40", "bd-a3f8", "other-99", "bd-12.1"]
    assert high_water_mark(ids, "bd") == 12
    assert high_water_mark(ids, "bd-web") == 40
    assert high_water_mark(ids, "missing") == 0


class TestNamespaceScanSource:
    def test_allocates_after_high_water_mark(self):
        source = NamespaceScanSource(["bd-1", "bd-5", "bd-3"])
        assert source.next_id() == "bd-6"
        assert source.next_id() == "bd-7"

    def test_configured_prefix_wins(self):
        source = NamespaceScanSource(["bd-1", "proj-4"], prefix="proj")
        assert source.prefix == "proj"
        assert source.next_id() == "proj-5"

    def test_default_prefix_when_nothing_is_numeric(self):
        source = NamespaceScanSource(["abc"])
        assert source.next_id() == "bd-1"

    def test_empty_store(self):
        assert NamespaceScanSource([]).next_id() == "bd-1"

    def test_scan_is_a_snapshot(self):
        ids = ["bd-2"]
        source = NamespaceScanSource(ids)
        ids.append("bd-50")
        assert source.next_id() == "bd-3"
