"""Screens not directly part of the workout session loop."""

from .plan_entry_screen import PlanEntryScreen
from .settings_screen import SettingsScreen

__all__ = [
    "PlanEntryScreen",
    "SettingsScreen",
]
