"""Unit tests for conflict region scanning.

Covers marker detection, side attribution, malformed-line dropping and
the edge cases of the scanner's state machine.
"""

from __future__ import annotations

import pytest

from beads_cli.merge.scanner import (
    LineKind,
    ScanState,
    classify_line,
    next_state,
    scan_conflicts,
)
from tests.utils import conflict, line, malformed_corpus


class TestClassifyLine:
    @pytest.mark.parametrize(
        "raw,kind",
        [
            ("", LineKind.BLANK),
            ("   \t", LineKind.BLANK),
            ("\r", LineKind.BLANK),
            ("<<<<<<< HEAD", LineKind.OPEN),
            ("  <<<<<<< HEAD", LineKind.OPEN),
            ("=======", LineKind.DIVIDER),
            ("=======\r", LineKind.DIVIDER),
            ("======= trailing", LineKind.CONTENT),
            ("========", LineKind.CONTENT),
            (">>>>>>> feature/branch", LineKind.CLOSE),
            ("||||||| base", LineKind.ANCESTOR),
            ('{"id":"bd-1"}', LineKind.CONTENT),
        ],
    )
    def test_kinds(self, raw, kind):
        assert classify_line(raw) is kind


class TestNextState:
    def test_divider_outside_is_ignored(self):
        assert next_state(ScanState.OUTSIDE, LineKind.DIVIDER) is ScanState.OUTSIDE

    def test_close_outside_is_ignored(self):
        assert next_state(ScanState.OUTSIDE, LineKind.CLOSE) is ScanState.OUTSIDE

    def test_full_cycle(self):
        state = next_state(ScanState.OUTSIDE, LineKind.OPEN)
        assert state is ScanState.IN_HEAD
        state = next_state(state, LineKind.ANCESTOR)
        assert state is ScanState.IN_ANCESTOR
        state = next_state(state, LineKind.DIVIDER)
        assert state is ScanState.IN_BASE
        assert next_state(state, LineKind.DIVIDER) is ScanState.IN_BASE
        assert next_state(state, LineKind.CLOSE) is ScanState.OUTSIDE


class TestScanConflicts:
    def test_no_markers(self):
        assert scan_conflicts([line("bd-1"), line("bd-2"), ""]) == []

    def test_single_region(self):
        lines = [line("bd-1"), *conflict([line("bd-2")], [line("bd-3")]), line("bd-4")]
        regions = scan_conflicts(lines)
        assert len(regions) == 1
        region = regions[0]
        assert (region.line_start, region.line_end) == (2, 6)
        assert region.head_ids == ["bd-2"]
        assert region.base_ids == ["bd-3"]

    def test_regions_are_ordered_and_disjoint(self):
        lines = [
            *conflict([line("bd-1")], [line("bd-2")]),
            line("bd-9"),
            *conflict([line("bd-3"), line("bd-4")], [line("bd-5")]),
        ]
        regions = scan_conflicts(lines)
        assert [(r.line_start, r.line_end) for r in regions] == [(1, 5), (7, 12)]
        assert regions[1].head_ids == ["bd-3", "bd-4"]
        assert all(r.line_start < r.line_end for r in regions)

    def test_intra_side_order_is_preserved(self):
        head = [line(f"bd-{n}") for n in (7, 3, 5)]
        base = [line(f"bd-{n}") for n in (9, 1)]
        region = scan_conflicts(conflict(head, base))[0]
        assert region.head_ids == ["bd-7", "bd-3", "bd-5"]
        assert region.base_ids == ["bd-9", "bd-1"]

    def test_missing_divider_attributes_everything_to_head(self):
        lines = ["<<<<<<< HEAD", line("bd-1"), line("bd-2"), ">>>>>>> feature"]
        region = scan_conflicts(lines)[0]
        assert region.head_ids == ["bd-1", "bd-2"]
        assert region.base_records == []

    def test_blank_lines_are_skipped(self):
        lines = conflict(["", line("bd-1"), "   "], ["", line("bd-2")])
        region = scan_conflicts(lines)[0]
        assert region.head_ids == ["bd-1"]
        assert region.base_ids == ["bd-2"]

    def test_malformed_lines_are_dropped(self):
        corpus = malformed_corpus()
        lines = conflict([*corpus, line("bd-1")], [line("bd-2"), *corpus])
        region = scan_conflicts(lines)[0]
        assert region.head_ids == ["bd-1"]
        assert region.base_ids == ["bd-2"]

    def test_stray_close_marker_is_ignored(self):
        lines = [line("bd-1"), ">>>>>>> feature", *conflict([line("bd-2")], [line("bd-3")])]
        regions = scan_conflicts(lines)
        assert len(regions) == 1
        assert regions[0].line_start == 3

    def test_stray_divider_is_ignored(self):
        assert scan_conflicts(["=======", line("bd-1")]) == []

    def test_unterminated_region_is_not_reported(self):
        lines = ["<<<<<<< HEAD", line("bd-1"), "=======", line("bd-2")]
        assert scan_conflicts(lines) == []

    def test_nested_open_marker_abandons_the_first_region(self):
        lines = [
            "<<<<<<< HEAD",
            line("bd-1"),
            *conflict([line("bd-2")], [line("bd-3")]),
        ]
        regions = scan_conflicts(lines)
        assert len(regions) == 1
        assert regions[0].line_start == 3
        assert regions[0].head_ids == ["bd-2"]

    def test_diff3_ancestor_section_is_dropped(self):
        lines = conflict([line("bd-1")], [line("bd-2")], ancestor=[line("bd-0")])
        region = scan_conflicts(lines)[0]
        assert region.head_ids == ["bd-1"]
        assert region.base_ids == ["bd-2"]

    def test_crlf_lines(self):
        lines = [raw + "\r" for raw in conflict([line("bd-1")], [line("bd-2")])]
        region = scan_conflicts(lines)[0]
        assert region.head_ids == ["bd-1"]
        assert region.base_ids == ["bd-2"]

    def test_to_dict(self):
        region = scan_conflicts(conflict([line("bd-1")], [line("bd-2")]))[0]
        assert region.to_dict() == {
            "line_start": 1,
            "line_end": 5,
            "head_issues": ["bd-1"],
            "base_issues": ["bd-2"],
        }


def test_deeply_nested_line_does_not_abort_the_scan():
    lines = conflict([line("bd-1"), "[" * 100_000], [line("bd-1")])
    region = scan_conflicts(lines)[0]
    assert region.head_ids == ["bd-1"]
    assert region.base_ids == ["bd-1"]
