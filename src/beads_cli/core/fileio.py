"""File write primitives."""

from __future__ import annotations

import os
from pathlib import Path


def write_text_atomic(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` via a temporary file and ``os.replace``.

    Readers never observe a partially written file.
    """
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(str(tmp_path), str(path))
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


__all__ = ["write_text_atomic"]
