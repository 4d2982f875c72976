"""Configuration loader and validator for SimStation.

Provides ``load_config(path)`` which reads a JSON config (with
comment and trailing-comma tolerant sanitizer) and merges user
overrides from ``~/.config/simstation/config.json``.

Also provides ``validate_config(conf)`` which normalizes and
validates config keys, raising ``ValueError`` on invalid values, and
``tool_paths_from_config(conf)`` which turns a config into the
``ToolPaths`` every command is built with.
"""

from __future__ import annotations

import json
import logging
import os
import re

from simstation.commands.base import ToolPaths

logger = logging.getLogger(__name__)

USER_CONFIG_PATH = '~/.config/simstation/config.json'

# Single source of truth for default configuration
DEFAULT_CONFIG: dict = {
    'debug': False,
    'xcrun_path': '/usr/bin/xcrun',
    'open_path': '/usr/bin/open',
    'bash_path': '/bin/bash',
    'simulator_app': 'Simulator',
    'refresh_on_create': True,
}

_PATH_KEYS = ('xcrun_path', 'open_path', 'bash_path')
_BOOL_KEYS = ('debug', 'refresh_on_create')


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _sanitize_json_text(s: str) -> str:
    """Remove ``#``/``//`` comments and trailing commas from JSON-like text."""
    # Hash-style line comments
    s = re.sub(r"^[ \t]*#.*$", "", s, flags=re.MULTILINE)
    # C++-style line comments (not the // inside "file://" style values)
    s = re.sub(r"(?<!:)//.*$", "", s, flags=re.MULTILINE)
    # Trailing commas before } or ]
    s = re.sub(r",[ \t\r\n]+(\}|\])", r"\1", s)
    return s


# ------------------------------------------------------------------
# Validation
# ------------------------------------------------------------------

def validate_config(conf: dict | None) -> dict:
    """Validate and normalize configuration dictionary.

    Returns a normalized dict with all expected keys.
    Raises ``ValueError`` on invalid values.
    """
    if conf is None:
        conf = {}

    out = dict(DEFAULT_CONFIG)

    for key in _BOOL_KEYS:
        value = conf.get(key, DEFAULT_CONFIG[key])
        if not isinstance(value, bool):
            raise ValueError(f"Invalid '{key}': must be boolean")
        out[key] = value

    # tool paths must be absolute
    for key in _PATH_KEYS:
        value = conf.get(key, DEFAULT_CONFIG[key])
        if not isinstance(value, str) or not value:
            raise ValueError(f"Invalid '{key}': must be a non-empty string")
        expanded = os.path.expanduser(value)
        if not os.path.isabs(expanded):
            raise ValueError(f"Invalid '{key}': {value} (must be an absolute path)")
        out[key] = expanded

    # simulator_app: application name passed to `open -a`
    app = conf.get('simulator_app', DEFAULT_CONFIG['simulator_app'])
    if not isinstance(app, str) or not app.strip():
        raise ValueError("Invalid 'simulator_app': must be a non-empty string")
    out['simulator_app'] = app.strip()

    return out


def tool_paths_from_config(conf: dict) -> ToolPaths:
    return ToolPaths(
        xcrun=conf.get('xcrun_path', DEFAULT_CONFIG['xcrun_path']),
        open=conf.get('open_path', DEFAULT_CONFIG['open_path']),
        bash=conf.get('bash_path', DEFAULT_CONFIG['bash_path']),
        simulator_app=conf.get('simulator_app', DEFAULT_CONFIG['simulator_app']),
    )


def _read_and_merge(path: str, target_config: dict, debug: bool = False) -> bool:
    """Read a JSON file, validate, and merge into *target_config*.

    Returns True on success, False on any error.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = f.read()
    except OSError as exc:
        if debug:
            logger.warning("Cannot read config %s: %s", path, exc)
        return False

    try:
        cfg = json.loads(raw)
    except json.JSONDecodeError:
        try:
            cfg = json.loads(_sanitize_json_text(raw))
        except json.JSONDecodeError as exc:
            if debug:
                logger.warning("JSON parse error in %s: %s", path, exc)
            return False

    if not isinstance(cfg, dict):
        if debug:
            logger.warning("Config %s is not a JSON object", path)
        return False

    try:
        validated = validate_config(cfg)
    except ValueError as verr:
        if debug:
            logger.warning("Invalid config %s: %s", path, verr)
        return False

    # Only override keys explicitly present in source
    for k in cfg:
        if k in validated:
            target_config[k] = validated[k]
    return True


# ------------------------------------------------------------------
# Top-level loader
# ------------------------------------------------------------------

def load_config(config_path: str | None = None, debug: bool = False) -> dict:
    """Load and merge configuration.

    If *config_path* is given, uses only that file (returns defaults if
    the file does not exist).  Otherwise falls back to
    ``~/.config/simstation/config.json``.

    Returns the effective configuration dict (always has all default keys).
    """
    config = dict(DEFAULT_CONFIG)

    path = config_path if config_path is not None else os.path.expanduser(USER_CONFIG_PATH)
    if os.path.exists(path):
        _read_and_merge(path, config, debug=debug)
    elif config_path is not None and debug:
        logger.debug("Config file %s does not exist; using defaults", path)

    return config

