"""Project-level configuration loaded from ``tokencalc.yaml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


CONFIG_FILENAME = "tokencalc.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "suggestion_limit": None,  # None: no cap on suggestions shown
    "custom_placeholder": 0.0,
    "logging_enabled": True,
    "logging_fsync": False,
    "logging_tail_bytes": 2_097_152,  # 2 MB
}

EXAMPLE_CONFIG = """\
# tokencalc project configuration
#
# suggestion_limit: 8
# custom_placeholder: 0
# logging_enabled: true
# logging_fsync: false
# logging_tail_bytes: 2097152
"""


def load_config(project_dir: Path) -> dict[str, Any]:
    """Load configuration from ``tokencalc.yaml``, with defaults.

    Args:
        project_dir: Directory holding the config file.  A missing file
            yields the defaults.

    Returns:
        Merged configuration dict.

    Raises:
        ValueError: If the file is not a YAML mapping.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = project_dir / CONFIG_FILENAME
    if config_path.exists():
        user_config = yaml.safe_load(config_path.read_text()) or {}
        if not isinstance(user_config, dict):
            raise ValueError(f"{CONFIG_FILENAME} must contain a mapping")
        config.update(user_config)

    limit = config.get("suggestion_limit")
    if limit is not None:
        config["suggestion_limit"] = max(0, int(limit))
    config["custom_placeholder"] = float(config.get("custom_placeholder") or 0.0)
    return config


def write_example_config(project_dir: Path) -> Path:
    """Write a commented ``tokencalc.yaml`` unless one already exists."""
    project_dir.mkdir(parents=True, exist_ok=True)
    config_path = project_dir / CONFIG_FILENAME
    if config_path.exists():
        raise FileExistsError(f"{config_path} already exists")
    config_path.write_text(EXAMPLE_CONFIG)
    return config_path
