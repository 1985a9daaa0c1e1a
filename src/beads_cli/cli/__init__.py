"""CLI helpers exposed for other modules."""

from .helpers import console, locate_store, locate_store_or_exit

__all__ = ["console", "locate_store", "locate_store_or_exit"]
