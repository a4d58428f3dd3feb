"""Load service defaults from an optional settings.yml.

Only the ``defaults`` mapping is used; its keys are ``Settings`` field names.
A missing, unreadable or malformed file means built-in values.
"""

from __future__ import annotations

import os
from pathlib import Path

import structlog
import yaml

log = structlog.get_logger()

# Not to be confused with config.json, the bootstrap payload fetched at load
# time. This file configures the service process itself.
_SETTINGS_PATH = Path(os.environ.get("PASSFIELD_GUARD_SETTINGS_PATH", "settings.yml"))

_cache: dict | None = None


def _load() -> dict:
    global _cache
    if _cache is None:
        with open(_SETTINGS_PATH, encoding="utf-8") as f:
            document = yaml.safe_load(f)
        if document is not None and not isinstance(document, dict):
            raise ValueError(f"{_SETTINGS_PATH}: top level must be a mapping")
        _cache = document or {}
    return _cache


def get_defaults() -> dict:
    """Return the defaults section, or empty dict if it is unavailable."""
    try:
        defaults = _load().get("defaults") or {}
    except (FileNotFoundError, OSError):
        return {}
    except (yaml.YAMLError, ValueError) as e:
        log.warning("settings_file_invalid", path=str(_SETTINGS_PATH), error=str(e))
        return {}
    if not isinstance(defaults, dict):
        log.warning("settings_defaults_not_mapping", path=str(_SETTINGS_PATH))
        return {}
    return defaults
