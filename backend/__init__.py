"""Shared constants for backend modules."""

from __future__ import annotations

from pathlib import Path

# Rest between exercises when the plan does not configure one (or sets it to 0)
DEFAULT_REST_SECONDS = 60

# Target sets shown for an exercise that does not declare any
DEFAULT_TARGET_SETS = 3

# Reported in the finish summary when the workout has no intensity
DEFAULT_INTENSITY = "Moderate"

# Seconds between timer callbacks
TICK_INTERVAL = 1

# Location of the workout plan REST API
DEFAULT_API_BASE_URL = "http://localhost:3000/api/workout-plans"

# Seconds to wait for the API before giving up on a request
DEFAULT_REQUEST_TIMEOUT = 15

# Directory holding user settings
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

__all__ = [
    "DEFAULT_REST_SECONDS",
    "DEFAULT_TARGET_SETS",
    "DEFAULT_INTENSITY",
    "TICK_INTERVAL",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_REQUEST_TIMEOUT",
    "DATA_DIR",
]
