"""Beads CLI - conflict tooling for the git-distributed issue store.

Usage:
    bd resolve-conflicts
    bd resolve-conflicts --dry-run
    bd resolve-conflicts --auto
"""

import typer

from beads_cli.cli.commands.resolve_conflicts import resolve_conflicts_cmd

__version__ = "0.1.0"

app = typer.Typer(
    name="bd",
    help="Issue tracker tooling for beads projects",
    add_completion=False,
    no_args_is_help=True,
)

app.command("resolve-conflicts")(resolve_conflicts_cmd)


@app.callback()
def callback() -> None:
    """Beads issue tracker."""


def main():
    app()


if __name__ == "__main__":
    main()
