from __future__ import annotations

"""Utility functions for loading and saving user settings.

The settings are stored as a list of dictionaries to preserve order.
Each dictionary contains ``key``, ``value`` and ``type`` entries.

``COACHLIX_API_BASE_URL`` and ``COACHLIX_AUTH_TOKEN`` in the environment
take precedence over the stored connection settings.
"""

import json
import logging
import os
from typing import Any, Dict, List

from backend import (
    DATA_DIR,
    DEFAULT_API_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_REST_SECONDS,
)

# Path to the JSON file where settings are persisted.
SETTINGS_PATH = DATA_DIR / "settings.json"

# Default settings to initialize the file on first run.
DEFAULT_SETTINGS: List[Dict[str, Any]] = [
    {"key": "sound_level", "value": 1.0, "type": "slider"},
    {"key": "sound_on", "value": True, "type": "bool"},
    {"key": "api_base_url", "value": DEFAULT_API_BASE_URL, "type": "str"},
    {"key": "auth_token", "value": "", "type": "str"},
    {"key": "request_timeout", "value": DEFAULT_REQUEST_TIMEOUT, "type": "int"},
    {"key": "default_rest_seconds", "value": DEFAULT_REST_SECONDS, "type": "int"},
]

ENV_OVERRIDES = {
    "api_base_url": "COACHLIX_API_BASE_URL",
    "auth_token": "COACHLIX_AUTH_TOKEN",
}

# Internal cache so settings are only read from disk once.
_settings_cache: List[Dict[str, Any]] | None = None


def load_settings() -> List[Dict[str, Any]]:
    """Load settings from :data:`SETTINGS_PATH` or create defaults.

    Keys added to :data:`DEFAULT_SETTINGS` after the file was written are
    appended with their default values.
    """
    if SETTINGS_PATH.exists():
        try:
            with SETTINGS_PATH.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError):
            logging.exception("Could not read settings from %s", SETTINGS_PATH)
        else:
            if isinstance(data, list):
                known = {item.get("key") for item in data if isinstance(item, dict)}
                for item in DEFAULT_SETTINGS:
                    if item["key"] not in known:
                        data.append(dict(item))
                return data
    defaults = [dict(item) for item in DEFAULT_SETTINGS]
    save_settings(defaults)
    return defaults


def save_settings(settings: List[Dict[str, Any]]) -> None:
    """Persist ``settings`` to :data:`SETTINGS_PATH`."""
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with SETTINGS_PATH.open("w", encoding="utf-8") as fh:
        json.dump(settings, fh)


def get_settings() -> List[Dict[str, Any]]:
    """Return the cached settings list, loading from disk if needed."""
    global _settings_cache
    if _settings_cache is None:
        _settings_cache = load_settings()
    return _settings_cache


def clear_cache() -> None:
    """Forget cached settings so the next access reads the file again."""
    global _settings_cache
    _settings_cache = None


def get_value(key: str) -> Any:
    """Fetch the value associated with ``key``."""
    env_name = ENV_OVERRIDES.get(key)
    if env_name and os.environ.get(env_name):
        return os.environ[env_name]
    for item in get_settings():
        if item.get("key") == key:
            return item.get("value")
    return None


def set_value(key: str, value: Any) -> None:
    """Update ``key`` with ``value`` and persist the change."""
    settings = get_settings()
    for item in settings:
        if item.get("key") == key:
            item["value"] = value
            break
    else:
        settings.append({"key": key, "value": value, "type": type(value).__name__})
    save_settings(settings)


# ----------------------------------------------------------------------
# Typed accessors
# ----------------------------------------------------------------------

def api_base_url() -> str:
    return str(get_value("api_base_url") or DEFAULT_API_BASE_URL).rstrip("/")


def auth_token() -> str | None:
    return get_value("auth_token") or None


def request_timeout() -> float:
    try:
        return float(get_value("request_timeout"))
    except (TypeError, ValueError):
        return float(DEFAULT_REQUEST_TIMEOUT)


def sound_on() -> bool:
    value = get_value("sound_on")
    return True if value is None else bool(value)


def default_rest_seconds() -> int:
    """Rest used when an exercise has no usable ``restTime``."""
    try:
        seconds = int(get_value("default_rest_seconds"))
    except (TypeError, ValueError):
        return DEFAULT_REST_SECONDS
    return seconds if seconds > 0 else DEFAULT_REST_SECONDS
