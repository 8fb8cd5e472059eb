"""Screens used during an active workout session."""

from .workout_session_screen import WorkoutSessionScreen

__all__ = ["WorkoutSessionScreen"]
