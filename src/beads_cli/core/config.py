"""Project configuration helpers.

Loads ``.beads/config.yaml``. Only the keys the conflict tooling needs are
read; everything else in the file is ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ruamel.yaml import YAML

from beads_cli.core.constants import CONFIG_FILENAME, ISSUES_FILENAME

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when .beads/config.yaml cannot be parsed or validated."""


@dataclass(frozen=True)
class BeadsConfig:
    """Project configuration.

    Attributes:
        issue_prefix: Active identifier namespace, or None to infer it
            from the existing records.
        jsonl_file: Name of the issue store inside ``.beads/``.
    """

    issue_prefix: str | None = None
    jsonl_file: str = ISSUES_FILENAME


def _optional_str(data: dict, key: str, config_file: Path) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"Invalid {key} in {config_file}: expected a non-empty string"
        )
    return value.strip()


def load_config(beads_dir: Path) -> BeadsConfig:
    """Load configuration from ``<beads_dir>/config.yaml``."""
    config_file = beads_dir / CONFIG_FILENAME

    if not config_file.exists():
        logger.debug("Config file not found: %s", config_file)
        return BeadsConfig()

    yaml = YAML(typ="safe")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.load(f) or {}
    except Exception as exc:
        logger.error("Failed to load config: %s", exc)
        raise ConfigError(f"Invalid YAML in {config_file}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {config_file}: expected a mapping at top level")

    jsonl_file = _optional_str(data, "jsonl-file", config_file) or ISSUES_FILENAME
    if Path(jsonl_file).name != jsonl_file:
        raise ConfigError(
            f"Invalid jsonl-file in {config_file}: expected a bare file name, got {jsonl_file!r}"
        )

    return BeadsConfig(
        issue_prefix=_optional_str(data, "issue-prefix", config_file),
        jsonl_file=jsonl_file,
    )


__all__ = [
    "BeadsConfig",
    "ConfigError",
    "load_config",
]
