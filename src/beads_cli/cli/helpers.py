"""Shared console and project lookup helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from beads_cli.core.config import BeadsConfig, ConfigError, load_config
from beads_cli.core.paths import ProjectNotFoundError, find_beads_dir, find_jsonl_path

console = Console()


def locate_store(file: Path | None = None) -> tuple[Path, BeadsConfig]:
    """Return the JSONL store to operate on and the project config.

    An explicit ``file`` wins over discovery; its project config is still
    honoured when the file lives inside a ``.beads`` tree.
    """
    if file is not None:
        try:
            beads_dir = find_beads_dir(file.parent)
        except ProjectNotFoundError:
            return file, BeadsConfig()
        return file, load_config(beads_dir)

    beads_dir = find_beads_dir()
    config = load_config(beads_dir)
    return find_jsonl_path(beads_dir, config), config


def locate_store_or_exit(file: Path | None = None) -> tuple[Path, BeadsConfig]:
    try:
        return locate_store(file)
    except (ProjectNotFoundError, ConfigError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


__all__ = ["console", "locate_store", "locate_store_or_exit"]
