"""Configuration paths and defaults for typeschema."""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "typeschema.toml"
CONFIG_ENV_VAR = "TYPESCHEMA_CONFIG"

DEFAULT_SPEC = "Draft_2020_12"
DEFAULT_ALLOW_ADDITIONAL_PROPERTIES = False
DEFAULT_OUTPUT_DIR = "schemas"


def config_path(cwd: Path | None = None) -> Path:
    """Config file location: ``$TYPESCHEMA_CONFIG`` or ``typeschema.toml`` in *cwd*."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return (cwd or Path.cwd()) / CONFIG_FILENAME
