"""UI screen modules for Coachlix."""

from .session import WorkoutSessionScreen
from .general import PlanEntryScreen, SettingsScreen

__all__ = [
    "PlanEntryScreen",
    "SettingsScreen",
    "WorkoutSessionScreen",
]
