"""Locate the beads project directory and its JSONL store."""

from __future__ import annotations

from pathlib import Path

from beads_cli.core.config import BeadsConfig
from beads_cli.core.constants import BEADS_DIR, LEGACY_ISSUES_FILENAME


class ProjectNotFoundError(RuntimeError):
    """Raised when no .beads directory exists at or above the start path."""


def find_beads_dir(start: Path | None = None) -> Path:
    """Walk upward until a ``.beads`` directory is found."""
    current = (start or Path.cwd()).resolve()
    for candidate in [current, *current.parents]:
        beads_dir = candidate / BEADS_DIR
        if beads_dir.is_dir():
            return beads_dir
    raise ProjectNotFoundError(
        f"Unable to locate a {BEADS_DIR} directory from {current}"
    )


def find_jsonl_path(beads_dir: Path, config: BeadsConfig) -> Path:
    """Return the issue store path for a project.

    Prefers the configured file name; falls back to the legacy
    ``beads.jsonl`` when only that one exists.
    """
    configured = beads_dir / config.jsonl_file
    if configured.exists():
        return configured
    legacy = beads_dir / LEGACY_ISSUES_FILENAME
    if legacy.exists():
        return legacy
    return configured


__all__ = ["ProjectNotFoundError", "find_beads_dir", "find_jsonl_path"]
