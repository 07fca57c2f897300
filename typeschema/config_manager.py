"""Configuration manager for typeschema using TOML files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from . import config
from .json_schema import JsonSchemaRendererOptions, parse_spec

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "json_schema": {
        "spec": config.DEFAULT_SPEC,
        "allow_additional_properties": config.DEFAULT_ALLOW_ADDITIONAL_PROPERTIES,
    },
    "output": {
        "directory": config.DEFAULT_OUTPUT_DIR,
    },
}


def _defaults() -> Dict[str, Dict[str, Any]]:
    return {section: values.copy() for section, values in DEFAULT_CONFIG.items()}


def load_full_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the entire TOML config (all sections), or ``{}`` if there is none."""
    path = path or config.config_path()
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return toml.load(f)


def load_config(path: Optional[Path] = None) -> Dict[str, Dict[str, Any]]:
    """Load configuration, filling in defaults for missing sections and keys.

    Malformed TOML propagates as ``toml.TomlDecodeError``.
    """
    merged = _defaults()
    for section, values in load_full_config(path).items():
        if section in merged and isinstance(values, dict):
            merged[section].update(values)
        else:
            logger.debug("Ignoring unknown config section %r", section)
    return merged


def save_config(
    spec: str,
    allow_additional_properties: bool,
    output_directory: Optional[str] = None,
    path: Optional[Path] = None,
) -> Path:
    """Write the JSON Schema settings, preserving other sections in the file."""
    path = path or config.config_path()
    full = load_full_config(path)

    full["json_schema"] = {
        **full.get("json_schema", {}),
        "spec": parse_spec(spec).value,
        "allow_additional_properties": allow_additional_properties,
    }
    if output_directory is not None:
        full["output"] = {**full.get("output", {}), "directory": output_directory}

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        toml.dump(full, f)
    return path


def renderer_options_from_config(
    cfg: Dict[str, Dict[str, Any]],
    spec: Optional[str] = None,
    allow_additional_properties: Optional[bool] = None,
) -> JsonSchemaRendererOptions:
    """Build renderer options; explicit arguments override the config values."""
    section = cfg.get("json_schema", {})
    return JsonSchemaRendererOptions(
        spec=parse_spec(spec if spec is not None else section.get("spec", config.DEFAULT_SPEC)),
        allow_additional_properties=bool(
            allow_additional_properties
            if allow_additional_properties is not None
            else section.get("allow_additional_properties", config.DEFAULT_ALLOW_ADDITIONAL_PROPERTIES)
        ),
    )
