"""CLI command modules for beads.

Each module holds one command; they are registered on the root app in
``beads_cli.__init__``.
"""

__all__: list[str] = []
