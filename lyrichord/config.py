"""Configuration loading and validation for lyrichord.

This module loads YAML configuration, applies defaults, and validates that
enumerations and diagram dimensions are sane before the host uses them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from lyrichord.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULTS_PATH = Path(__file__).with_name("defaults.yml")

ALLOWED_CONFLICT_POLICIES = {"replace", "reject"}
ALLOWED_HIT_MODES = {"offset", "aligned"}
ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_DIAGRAM_DEFAULTS: dict[str, float] = {
    "width": 220.0,
    "height": 160.0,
    "left_padding": 10.0,
    "right_padding": 10.0,
    "top_padding": 15.0,
    "bottom_padding": 30.0,
    "gutter_width": 17.5,
    "note_radius": 10.0,
}


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level.")
    return data


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from YAML or package defaults.

    Args:
        path: Optional path to a YAML config. If None, use ``defaults.yml``.

    Returns:
        A dictionary with configuration values (not yet validated).
    """
    source = Path(path) if path else DEFAULTS_PATH
    logger.debug("Loading config from %s", source)
    return _load_yaml(source)


def validate_config(cfg: dict[str, Any]) -> dict[str, Any]:
    """Apply defaults and validate configuration values.

    Unknown enum values fall back to their default with a warning. Diagram
    dimensions that cannot produce a drawable grid raise ConfigError.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    for section in ("diagram", "editor", "storage", "logging"):
        cfg.setdefault(section, {})
        if not isinstance(cfg[section], dict):
            raise ConfigError(f"Config section '{section}' must be a mapping.")

    diagram = cfg["diagram"]
    editor = cfg["editor"]
    storage = cfg["storage"]
    log_cfg = cfg["logging"]

    for key, value in _DIAGRAM_DEFAULTS.items():
        diagram.setdefault(key, value)
    editor.setdefault("conflict_policy", "replace")
    editor.setdefault("hit_mode", "offset")
    storage.setdefault("state_path", "./lyrichord_state.json")
    log_cfg.setdefault("level", "WARNING")

    # Enum validations
    policy = editor.get("conflict_policy")
    if policy not in ALLOWED_CONFLICT_POLICIES:
        logger.warning("Unsupported conflict_policy '%s', using 'replace'.", policy)
        editor["conflict_policy"] = "replace"

    hit_mode = editor.get("hit_mode")
    if hit_mode not in ALLOWED_HIT_MODES:
        logger.warning("Unsupported hit_mode '%s', using 'offset'.", hit_mode)
        editor["hit_mode"] = "offset"

    level = str(log_cfg.get("level", "")).upper()
    if level not in ALLOWED_LOG_LEVELS:
        logger.warning("Unsupported logging level '%s', using 'WARNING'.", log_cfg.get("level"))
        level = "WARNING"
    log_cfg["level"] = level

    # Dimension sanity
    for key in _DIAGRAM_DEFAULTS:
        try:
            diagram[key] = float(diagram[key])
        except (TypeError, ValueError):
            raise ConfigError(f"diagram.{key} must be a number, got {diagram[key]!r}.") from None
        if diagram[key] < 0:
            raise ConfigError(f"diagram.{key} must not be negative.")

    grid_width = diagram["width"] - diagram["left_padding"] - diagram["gutter_width"] - diagram["right_padding"]
    grid_height = diagram["height"] - diagram["top_padding"] - diagram["bottom_padding"]
    if grid_width <= 0 or grid_height <= 0:
        raise ConfigError("Diagram paddings leave no room for the fret grid.")

    storage["state_path"] = str(storage["state_path"])
    return cfg


def get_config(path: str | None = None) -> dict[str, Any]:
    """Load and validate in one step; the usual entry point for hosts."""
    return validate_config(load_config(path))
