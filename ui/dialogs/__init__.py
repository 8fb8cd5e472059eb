"""Modal dialogs."""

from .add_exercise_dialog import AddExerciseDialog
from .workout_session_dialog import WorkoutSessionDialog

__all__ = ["AddExerciseDialog", "WorkoutSessionDialog"]
