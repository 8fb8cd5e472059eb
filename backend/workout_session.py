"""Controller for a workout being performed.

:class:`WorkoutSession` owns all state of an active session: the stopwatch,
the rest countdown, which exercise is on screen, the sets recorded so far and
which exercises are finished.  Both the full-screen session page and the
modal session dialog drive the same controller; neither keeps session state
of its own.

Nothing here talks to the network.  Loading a session from a plan and
writing progress back is handled by :mod:`backend.sessions`.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend import DEFAULT_INTENSITY, DEFAULT_TARGET_SETS
from backend.completion import CompletionTracker
from backend.exercise_cursor import ExerciseCursor
from backend.refs import WorkoutAddress
from backend.rest_scheduler import RestScheduler, rest_seconds_for
from backend.session_clock import SessionClock
from backend.set_ledger import SetLedger, SetRecord


@dataclass(frozen=True)
class ExerciseLocalState:
    """Session-local view of one exercise."""

    completed: bool
    sets: tuple[SetRecord, ...]
    notes: str


def format_time(seconds: int) -> str:
    """Return ``seconds`` as ``MM:SS``."""

    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


class WorkoutSession:
    """In-memory state of one workout session.

    ``workout`` is the workout dict taken from the plan document.  Exercises
    that already carry ``isCompleted``, ``completedSets`` or ``notes`` from
    an earlier save start out with that progress.

    ``scheduler`` is the object used to register the one-second timers
    (Kivy's ``Clock`` when omitted) and ``cue`` is called when a rest period
    runs out.
    """

    def __init__(
        self,
        workout: dict,
        *,
        address: WorkoutAddress | None = None,
        scheduler=None,
        cue=None,
        sound_enabled: bool = True,
    ) -> None:
        self.workout = workout
        self.address = address
        self.exercises: list[dict] = list(workout.get("exercises") or [])
        count = len(self.exercises)

        self.clock = SessionClock(scheduler)
        self.rest = RestScheduler(scheduler, cue, sound_enabled=sound_enabled)
        self.cursor = ExerciseCursor(count, on_move=self._on_exercise_changed)
        self.ledger = SetLedger(count)
        self.tracker = CompletionTracker(
            count,
            [idx for idx, ex in enumerate(self.exercises) if ex.get("isCompleted")],
        )
        self._notes: dict[int, str] = {}
        for idx, ex in enumerate(self.exercises):
            self.ledger.seed(idx, ex.get("completedSets"))
            self._notes[idx] = ex.get("notes") or ""

        self.current_set_number = 1
        self.workout_notes = ""
        self.closed = False

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.workout.get("name", "")

    @property
    def exercise_count(self) -> int:
        return len(self.exercises)

    @property
    def current_exercise_index(self) -> int:
        return self.cursor.index

    @property
    def current_exercise(self) -> dict | None:
        if not self.exercises:
            return None
        return self.exercises[self.cursor.index]

    @property
    def is_running(self) -> bool:
        return self.clock.is_running

    @property
    def is_resting(self) -> bool:
        return self.rest.is_resting

    @property
    def rest_remaining_seconds(self) -> int:
        return self.rest.remaining_seconds

    @property
    def total_elapsed_seconds(self) -> int:
        return self.clock.total_elapsed_seconds

    @property
    def exercise_elapsed_seconds(self) -> int:
        return self.clock.exercise_elapsed_seconds

    @property
    def completed_indices(self) -> frozenset[int]:
        return self.tracker.completed_indices

    @property
    def sound_enabled(self) -> bool:
        return self.rest.sound_enabled

    def exercise_state(self, index: int) -> ExerciseLocalState:
        return ExerciseLocalState(
            completed=self.tracker.is_completed(index),
            sets=self.ledger.sets_for(index),
            notes=self._notes.get(index, ""),
        )

    def sets_for(self, index: int) -> tuple[SetRecord, ...]:
        return self.ledger.sets_for(index)

    def total_sets(self) -> int:
        return self.ledger.total_sets()

    def progress_percentage(self) -> int:
        return self.tracker.progress_percentage()

    def is_workout_complete(self) -> bool:
        return self.tracker.is_workout_complete()

    def target_sets(self, index: int | None = None) -> int:
        """Number of sets planned for the exercise at ``index``."""

        exercise = self._exercise_at(index)
        if not exercise:
            return DEFAULT_TARGET_SETS
        return exercise.get("targetSets") or exercise.get("sets") or DEFAULT_TARGET_SETS

    def exercise_display(self) -> str:
        """Return e.g. ``"Exercise 2 of 5"`` for the current exercise."""

        if not self.exercises:
            return ""
        return f"Exercise {self.cursor.index + 1} of {self.exercise_count}"

    def set_display(self) -> str:
        return f"Set {self.current_set_number} of {self.target_sets()}"

    def snapshot(self) -> dict:
        """Plain mapping of the session state, for display and debugging."""

        return {
            "currentExerciseIndex": self.cursor.index,
            "currentSetNumber": self.current_set_number,
            "completedExerciseIndices": sorted(self.tracker.completed_indices),
            "totalElapsedSeconds": self.clock.total_elapsed_seconds,
            "currentExerciseElapsedSeconds": self.clock.exercise_elapsed_seconds,
            "isRunning": self.clock.is_running,
            "isResting": self.rest.is_resting,
            "restRemainingSeconds": self.rest.remaining_seconds,
            "workoutNotes": self.workout_notes,
        }

    # ------------------------------------------------------------------
    # Timer control
    # ------------------------------------------------------------------

    def start(self) -> None:
        self.clock.start()

    def pause(self) -> None:
        self.clock.pause()

    def toggle_playback(self) -> bool:
        """Start or pause the session clock.  Returns ``True`` if now running."""

        return self.clock.toggle()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def next_exercise(self) -> bool:
        return self.cursor.next()

    def previous_exercise(self) -> bool:
        return self.cursor.previous()

    def jump_to(self, index) -> bool:
        return self.cursor.jump_to(index)

    def _on_exercise_changed(self, index: int) -> None:
        self.clock.reset_exercise()
        self.current_set_number = 1

    # ------------------------------------------------------------------
    # Sets and completion
    # ------------------------------------------------------------------

    def complete_set(self, reps, weight=None) -> SetRecord | None:
        """Record a set for the current exercise.

        Returns the stored :class:`SetRecord`, or ``None`` when ``reps`` was
        missing or invalid, in which case nothing changes.
        """

        if not self.exercises:
            return None
        record = self.ledger.record_set(self.cursor.index, reps, weight)
        if record is not None:
            self.current_set_number += 1
        return record

    def complete_exercise(self, index: int | None = None) -> bool:
        """Mark the exercise at ``index`` (default: current) as completed.

        Unless it is the last exercise, a rest period using that exercise's
        rest time begins and the cursor moves to the following exercise.
        Completing an already completed exercise changes nothing and returns
        ``False``.  Exercises without any recorded sets may be completed.
        """

        if index is None:
            index = self.cursor.index
        if not self.tracker.complete(index):
            return False
        if index < self.exercise_count - 1:
            self.rest.begin(rest_seconds_for(self.exercises[index]))
            self.cursor.jump_to(index + 1)
        return True

    def update_exercise_notes(self, index: int, notes: str) -> None:
        if 0 <= index < self.exercise_count:
            self._notes[index] = notes or ""

    def set_workout_notes(self, notes: str) -> None:
        self.workout_notes = notes or ""

    # ------------------------------------------------------------------
    # Rest
    # ------------------------------------------------------------------

    def skip_rest(self) -> None:
        self.rest.skip()

    def reset_rest_timer(self) -> None:
        """Restart the rest countdown with the current exercise's rest time."""

        self.rest.begin(rest_seconds_for(self.current_exercise))

    def set_sound_enabled(self, enabled: bool) -> None:
        self.rest.sound_enabled = bool(enabled)

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------

    def dirty_exercises(self):
        """Yield ``(index, exercise, state)`` for exercises with progress.

        An exercise has progress when it has recorded sets, is completed or
        carries notes.
        """

        for idx, exercise in enumerate(self.exercises):
            state = self.exercise_state(idx)
            if state.sets or state.completed or state.notes:
                yield idx, exercise, state

    def build_summary(self) -> dict:
        """Return the payload submitted when the workout is finished.

        ``duration`` and ``exercises`` repeat ``durationMinutes`` and
        ``perExercise`` under the names the complete endpoint reads.
        """

        per_exercise = []
        for idx in range(self.exercise_count):
            state = self.exercise_state(idx)
            per_exercise.append(
                {
                    "exerciseIndex": idx,
                    "completed": state.completed,
                    "actualSets": [record.to_dict() for record in state.sets],
                    "notes": state.notes,
                }
            )
        return {
            "durationMinutes": self.clock.duration_minutes,
            "duration": self.clock.duration_minutes,
            "totalExercises": self.exercise_count,
            "completedExercises": self.tracker.completed_count,
            "totalSets": self.ledger.total_sets(),
            "perExercise": per_exercise,
            "exercises": per_exercise,
            "notes": self.workout_notes,
            "averageIntensity": self.workout.get("intensity") or DEFAULT_INTENSITY,
        }

    def close(self) -> None:
        """Release both timers.  The session must not be used afterwards."""

        self.clock.release()
        self.rest.release()
        self.closed = True

    def _exercise_at(self, index: int | None) -> dict | None:
        if index is None:
            return self.current_exercise
        if 0 <= index < self.exercise_count:
            return self.exercises[index]
        return None
