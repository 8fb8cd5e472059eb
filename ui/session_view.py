"""Behaviour shared by the workout session screen and dialog.

Both presentation shells mix in :class:`SessionView`.  It owns the bound
:class:`~backend.workout_session.WorkoutSession`, forwards button presses to
it, refreshes the on-screen values once per second and runs every network
call on a worker thread so the timers keep ticking while a save is in
flight.  Results are handed back on the Kivy main thread.
"""

from __future__ import annotations

import logging
import threading

from kivy.clock import Clock, mainthread

from backend import TICK_INTERVAL, settings
from backend.errors import CoachlixError, SessionNotFoundError
from backend.sessions import SessionPersistenceAdapter
from backend.workout_session import WorkoutSession, format_time
from ui.alerts import show_alert


def describe_target(exercise: dict, target_sets: int) -> str:
    """Return e.g. ``"3 x 10 @ 40 kg"`` for ``exercise``."""

    reps = exercise.get("targetReps") or exercise.get("reps")
    text = f"{target_sets} x {reps}" if reps else f"{target_sets} sets"
    weight = exercise.get("targetWeight") or exercise.get("weight")
    if weight:
        text += f" @ {weight} kg"
    return text


def describe_set(record) -> str:
    text = f"Set {record.set_number}: {record.reps} reps"
    if record.weight is not None:
        text += f" @ {record.weight:g} kg"
    return text


class SessionView:
    """Mixin connecting a session panel to a :class:`WorkoutSession`.

    Subclasses provide a ``panel`` attribute (a
    :class:`~ui.session_panel.SessionPanel`) and override
    :meth:`on_session_closed_by_error` and :meth:`on_workout_finished` to
    navigate away.
    """

    session: WorkoutSession | None = None
    adapter: SessionPersistenceAdapter | None = None
    sound = None
    busy: bool = False
    _refresh_event = None
    _load_token: int = 0

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------

    def on_session_closed_by_error(self) -> None:
        """Called after the user acknowledges a failed load."""

    def on_workout_finished(self) -> None:
        """Called after the user acknowledges a completed workout."""

    def show_alert(self, title: str, text: str, on_close=None) -> None:
        show_alert(title, text, on_close=on_close)

    def run_in_background(self, work, on_done) -> None:
        """Run ``work`` on a worker thread and pass its outcome to ``on_done``.

        ``on_done(result, error)`` is invoked on the main thread; ``error`` is
        the exception raised by ``work`` or ``None``.
        """

        @mainthread
        def deliver(result, error):
            on_done(result, error)

        def target():
            try:
                result = work()
            except CoachlixError as exc:
                deliver(None, exc)
            except Exception as exc:
                logging.exception("Background task failed")
                deliver(None, exc)
            else:
                deliver(result, None)

        threading.Thread(target=target, daemon=True).start()

    def apply_display(self, values: dict) -> None:
        panel = getattr(self, "panel", None)
        if panel is not None:
            panel.apply(values)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def get_adapter(self) -> SessionPersistenceAdapter:
        if self.adapter is None:
            self.adapter = SessionPersistenceAdapter()
        return self.adapter

    def session_kwargs(self) -> dict:
        return {
            "cue": self.sound.play_rest_cue if self.sound else None,
            "sound_enabled": settings.sound_on(),
        }

    def open_session(self, plan_id, week_number, day_number, workout_id) -> None:
        """Load the workout in the background and bind it when it arrives."""

        self.release_session()
        token = self._load_token
        adapter = self.get_adapter()
        kwargs = self.session_kwargs()

        def work():
            session = adapter.load_session(
                plan_id, week_number, day_number, workout_id, **kwargs
            )
            if session.exercise_count:
                adapter.start_workout(session)
            return session

        def done(session, error):
            if token != self._load_token:
                # The view was closed or reopened while loading.
                if session is not None:
                    session.close()
                return
            self._on_loaded(session, error)

        self.busy = True
        self.apply_display({"loading": True})
        self.run_in_background(work, done)

    def _on_loaded(self, session, error) -> None:
        self.busy = False
        if error is not None:
            if isinstance(error, SessionNotFoundError):
                message = f"Error: {error}"
            else:
                message = f"Could not load workout: {error}"
            self.show_alert("Error", message, on_close=self.on_session_closed_by_error)
            self.apply_display({"loading": False})
            return
        self.bind_session(session)

    def bind_session(self, session: WorkoutSession) -> None:
        """Display ``session`` and start refreshing once per second."""

        if self.session is not None and self.session is not session:
            self.session.close()
        self.session = session
        self._cancel_refresh()
        self._refresh_event = Clock.schedule_interval(self.refresh, TICK_INTERVAL)
        self.refresh()

    def release_session(self) -> None:
        """Stop all timers and forget the current session.

        Any load still in flight is discarded when it completes.
        """

        self._load_token += 1
        self._cancel_refresh()
        if self.session is not None:
            self.session.close()
            self.session = None
        self.busy = False

    def _cancel_refresh(self) -> None:
        if self._refresh_event is not None:
            self._refresh_event.cancel()
            self._refresh_event = None

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def session_display(self) -> dict:
        """Return the values shown by the session panel."""

        session = self.session
        if session is None:
            return {"loading": self.busy, "has_exercises": False}
        exercise = session.current_exercise or {}
        index = session.current_exercise_index
        state = session.exercise_state(index)
        return {
            "loading": False,
            "saving": self.busy,
            "has_exercises": bool(session.exercise_count),
            "workout_name": session.name,
            "timer_text": format_time(session.total_elapsed_seconds),
            "exercise_timer_text": format_time(session.exercise_elapsed_seconds),
            "rest_text": format_time(session.rest_remaining_seconds),
            "is_resting": session.is_resting,
            "is_running": session.is_running,
            "sound_enabled": session.sound_enabled,
            "exercise_name": exercise.get("name", ""),
            "exercise_instructions": exercise.get("instructions") or "",
            "exercise_position": session.exercise_display(),
            "set_text": session.set_display(),
            "target_text": describe_target(exercise, session.target_sets()),
            "logged_sets_text": "\n".join(describe_set(r) for r in state.sets),
            "exercise_notes": state.notes,
            "exercise_completed": state.completed,
            "is_first": session.cursor.is_first(),
            "is_last": session.cursor.is_last(),
            "progress": session.progress_percentage(),
            "progress_text": (
                f"{len(session.completed_indices)}/{session.exercise_count} exercises"
            ),
            "finish_text": (
                "Finish Workout" if session.is_workout_complete() else "Finish Early"
            ),
            "exercise_items": [
                {
                    "index": idx,
                    "name": ex.get("name", f"Exercise {idx + 1}"),
                    "completed": idx in session.completed_indices,
                    "current": idx == index,
                }
                for idx, ex in enumerate(session.exercises)
            ],
        }

    def refresh(self, *_args) -> None:
        self.apply_display(self.session_display())

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def toggle_playback(self) -> None:
        if self.session:
            self.session.toggle_playback()
            self.refresh()

    def next_exercise(self) -> None:
        if self.session:
            self.session.next_exercise()
            self.refresh()

    def previous_exercise(self) -> None:
        if self.session:
            self.session.previous_exercise()
            self.refresh()

    def select_exercise(self, index: int) -> None:
        if self.session:
            self.session.jump_to(index)
            self.refresh()

    def complete_set(self, reps_text: str, weight_text: str = "") -> bool:
        """Record a set from the input fields.

        Returns ``True`` when the set was stored so the caller can clear the
        inputs; invalid reps leave everything as it was.
        """

        if not self.session:
            return False
        record = self.session.complete_set(reps_text, weight_text)
        self.refresh()
        return record is not None

    def complete_exercise(self) -> None:
        if self.session:
            self.session.complete_exercise()
            self.refresh()

    def skip_rest(self) -> None:
        if self.session:
            self.session.skip_rest()
            self.refresh()

    def reset_rest(self) -> None:
        if self.session:
            self.session.reset_rest_timer()
            self.refresh()

    def toggle_sound(self) -> None:
        if self.session:
            self.session.set_sound_enabled(not self.session.sound_enabled)
            self.refresh()

    def update_exercise_notes(self, text: str) -> None:
        if self.session:
            self.session.update_exercise_notes(
                self.session.current_exercise_index, text
            )

    def update_workout_notes(self, text: str) -> None:
        if self.session:
            self.session.set_workout_notes(text)

    def save_progress(self) -> None:
        """Write progress in the background and report the outcome."""

        if not self.session or self.busy:
            return
        session = self.session
        adapter = self.get_adapter()
        self.busy = True
        self.refresh()
        self.run_in_background(lambda: adapter.save_progress(session), self._on_saved)

    def _on_saved(self, saved, error) -> None:
        self.busy = False
        self.refresh()
        if error is not None:
            self.show_alert("Save failed", "Failed to save progress. Please try again.")
        else:
            self.show_alert("Saved", "Progress saved successfully!")

    def finish_workout(self) -> None:
        """Submit the workout summary.

        Finishing is allowed with exercises left incomplete.
        """

        if not self.session or self.busy:
            return
        session = self.session
        adapter = self.get_adapter()
        self.busy = True
        self.refresh()
        self.run_in_background(
            lambda: adapter.complete_workout(session), self._on_finished
        )

    def _on_finished(self, response, error) -> None:
        self.busy = False
        if error is not None:
            self.refresh()
            self.show_alert(
                "Finish failed", "Failed to complete workout. Please try again."
            )
            return
        self.release_session()
        self.show_alert(
            "Workout complete",
            "Workout completed successfully!",
            on_close=self.on_workout_finished,
        )

    def add_exercises(self, exercises: list[dict]) -> None:
        """Append ``exercises`` to the workout and show the reloaded session."""

        if not self.session or self.busy or not exercises:
            return
        session = self.session
        token = self._load_token
        adapter = self.get_adapter()
        kwargs = self.session_kwargs()
        count = len(exercises)

        def done(new_session, error):
            if token != self._load_token:
                # The view was closed while the exercises were being added.
                if new_session is not None:
                    new_session.close()
                return
            self._on_exercises_added(new_session, error, count)

        self.busy = True
        self.run_in_background(
            lambda: adapter.add_exercises(session, exercises, **kwargs), done
        )

    def _on_exercises_added(self, session, error, count: int) -> None:
        self.busy = False
        if error is not None:
            logging.warning("Adding exercises failed: %s", error)
            if self.session is not None and self.session.closed:
                # The exercises were added but reloading the workout failed.
                self.release_session()
                self.show_alert(
                    "Error",
                    f"Could not reload workout: {error}",
                    on_close=self.on_session_closed_by_error,
                )
                return
            self.refresh()
            self.show_alert("Error", "Failed to add exercises. Please try again.")
            return
        self.session = None
        self.bind_session(session)
        self.show_alert(
            "Exercises added",
            f"{count} exercise{'s' if count != 1 else ''} added successfully!",
        )
