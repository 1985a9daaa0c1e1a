"""``bd resolve-conflicts``: detect and resolve git conflicts in the issue store.

Modes:
  - Detection only (default): show conflicts without modifying files
  - Auto-resolve (``--auto``): remap conflicting ids and rewrite the file
  - Dry run (``--dry-run``): show the proposed resolution, write nothing

The mechanical resolution strategy:
  1. Keep all HEAD issues unchanged
  2. Remap BASE issues with conflicting ids to new ids
  3. Update all text references and dependencies
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.markup import escape

from beads_cli.cli.helpers import console, locate_store_or_exit
from beads_cli.core.fileio import write_text_atomic
from beads_cli.issues.ids import AllocationError
from beads_cli.issues.store import StoreError
from beads_cli.merge.engine import ResolutionReport, detect_conflicts, resolve_conflicts
from beads_cli.merge.reconstructor import ReconstructionError
from beads_cli.merge.resolver import Resolution
from beads_cli.merge.scanner import ConflictRegion


def _emit_json(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _print_conflicts(path: Path, regions: list[ConflictRegion]) -> None:
    console.print(f"Found {len(regions)} conflict(s) in {escape(str(path))}:\n")
    for index, region in enumerate(regions, start=1):
        console.print(f"Conflict {index} (lines {region.line_start}-{region.line_end}):")
        console.print(f"  HEAD issues: {len(region.head_records)}")
        for record in region.head_records:
            console.print(f"    - [cyan]{escape(record.id)}[/cyan]: {escape(record.title)}")
        console.print(f"  BASE issues: {len(region.base_records)}")
        for record in region.base_records:
            console.print(f"    - [yellow]{escape(record.id)}[/yellow]: {escape(record.title)}")
        console.print()


def _print_resolutions(resolutions: tuple[Resolution, ...]) -> None:
    console.print("Proposed resolutions:")
    for res in resolutions:
        if res.is_remap:
            console.print(
                f"  ↻ Remap [yellow]{escape(res.old_id)}[/yellow] → "
                f"[green]{escape(res.new_id)}[/green] ({escape(res.reason)})"
            )
        else:
            console.print(f"  ✓ Keep [cyan]{escape(res.issue_id)}[/cyan] unchanged")
    console.print()


def _print_next_steps(report: ResolutionReport) -> None:
    name = report.path.name
    console.print(f"[green]✓[/green] Resolved {len(report.regions)} conflict(s)")
    console.print("\nNext steps:")
    console.print(f"  1. Review changes: git diff {escape(name)}")
    console.print("  2. Import to database: bd import")
    console.print(f"  3. Commit resolution: git add {escape(name)} && git commit")


def resolve_conflicts_cmd(
    auto: bool = typer.Option(False, "--auto", help="Automatically resolve conflicts"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would be resolved without making changes"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
    file: Path | None = typer.Option(
        None, "--file", "-f", help="JSONL file to check (default: the project's issue store)"
    ),
    prefix: str | None = typer.Option(
        None, "--prefix", help="Issue prefix for new ids (default: from config or existing issues)"
    ),
) -> None:
    """Detect and resolve git merge conflicts in the issue JSONL file."""
    jsonl_path, config = locate_store_or_exit(file)

    try:
        regions = detect_conflicts(jsonl_path)
    except StoreError as exc:
        console.print(f"[red]Error detecting conflicts:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    if not regions:
        if json_output:
            _emit_json({"conflicts": 0, "file": str(jsonl_path)})
        else:
            console.print(f"[green]✓[/green] No conflicts found in {escape(str(jsonl_path))}")
        return

    if not json_output:
        _print_conflicts(jsonl_path, regions)

    if not auto and not dry_run:
        if json_output:
            _emit_json(
                {
                    "conflicts": len(regions),
                    "file": str(jsonl_path),
                    "details": [region.to_dict() for region in regions],
                }
            )
        else:
            console.print("Run 'bd resolve-conflicts --auto' to apply automatic resolution.")
        return

    try:
        report = resolve_conflicts(
            jsonl_path,
            prefix=prefix or config.issue_prefix,
            dry_run=dry_run,
            write=write_text_atomic,
        )
    except (AllocationError, ReconstructionError, StoreError) as exc:
        console.print(f"[red]Error resolving conflicts:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    if not json_output:
        _print_resolutions(report.plan.resolutions)

    if dry_run:
        if json_output:
            _emit_json(
                {
                    "dry_run": True,
                    "resolutions": [res.to_dict() for res in report.plan.resolutions],
                }
            )
        else:
            console.print("Dry-run mode: no changes made")
        return

    if json_output:
        _emit_json(
            {
                "success": True,
                "conflicts": len(report.regions),
                "resolutions": len(report.plan.resolutions),
                "file": str(jsonl_path),
            }
        )
    else:
        _print_next_steps(report)
