"""Shared path constants for the beads repository layout."""

from __future__ import annotations

BEADS_DIR = ".beads"
ISSUES_FILENAME = "issues.jsonl"
LEGACY_ISSUES_FILENAME = "beads.jsonl"
CONFIG_FILENAME = "config.yaml"
DEFAULT_ISSUE_PREFIX = "bd"

__all__ = [
    "BEADS_DIR",
    "CONFIG_FILENAME",
    "DEFAULT_ISSUE_PREFIX",
    "ISSUES_FILENAME",
    "LEGACY_ISSUES_FILENAME",
]
