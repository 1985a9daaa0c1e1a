"""Merge subpackage: mechanical resolution of conflicted issue stores.

This package detects git conflict regions in the JSONL issue store and
resolves identifier collisions between the two sides.

Modules:
    scanner: Conflict region detection
    resolver: Keep/remap decisions and fresh id allocation
    rewriter: Reference rewriting for remapped ids
    reconstructor: Rebuilding the file from a resolution plan
    engine: Detect and resolve-and-apply entry points
"""

from __future__ import annotations

from .engine import ResolutionReport, detect_conflicts, resolve_conflicts
from .reconstructor import ReconstructionError, ReconstructionResult, reconstruct
from .resolver import (
    COLLISION_REASON,
    Resolution,
    ResolutionAction,
    ResolutionPlan,
    Side,
    resolve_collisions,
)
from .rewriter import remap_text, rewrite_references, with_identity
from .scanner import ConflictRegion, scan_conflicts

__all__ = [
    "COLLISION_REASON",
    "ConflictRegion",
    "ReconstructionError",
    "ReconstructionResult",
    "Resolution",
    "ResolutionAction",
    "ResolutionPlan",
    "ResolutionReport",
    "Side",
    "detect_conflicts",
    "reconstruct",
    "remap_text",
    "resolve_collisions",
    "resolve_conflicts",
    "rewrite_references",
    "scan_conflicts",
    "with_identity",
]
