"""Core utilities and configuration exports."""

from .config import BeadsConfig, ConfigError, load_config
from .fileio import write_text_atomic
from .paths import ProjectNotFoundError, find_beads_dir, find_jsonl_path

__all__ = [
    "BeadsConfig",
    "ConfigError",
    "ProjectNotFoundError",
    "find_beads_dir",
    "find_jsonl_path",
    "load_config",
    "write_text_atomic",
]
