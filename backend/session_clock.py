"""Stopwatch for an active workout session.

The clock counts whole seconds for the session as a whole and for the
exercise currently on screen.  A single interval event drives both
counters; starting an already running clock does not register a second
callback, so pausing and resuming can never double count.
"""

from __future__ import annotations

from kivy.clock import Clock

from backend import TICK_INTERVAL


class SessionClock:
    """Total and per-exercise elapsed time, advanced once per tick."""

    def __init__(self, scheduler=None, interval: float = TICK_INTERVAL) -> None:
        self._scheduler = scheduler if scheduler is not None else Clock
        self._interval = interval
        self._event = None
        self.total_elapsed_seconds = 0
        self.exercise_elapsed_seconds = 0

    @property
    def is_running(self) -> bool:
        return self._event is not None

    @property
    def duration_minutes(self) -> int:
        """Elapsed session time in whole minutes."""
        return self.total_elapsed_seconds // 60

    def start(self) -> None:
        """Begin ticking.  Calling ``start`` while running does nothing."""

        if self._event is not None:
            return
        self._event = self._scheduler.schedule_interval(self.tick, self._interval)

    def pause(self) -> None:
        """Stop ticking and release the interval event."""

        if self._event is not None:
            self._event.cancel()
            self._event = None

    def toggle(self) -> bool:
        """Start when paused, pause when running.  Returns the new state."""

        if self.is_running:
            self.pause()
        else:
            self.start()
        return self.is_running

    def tick(self, dt=None) -> None:
        # Kivy unschedules interval callbacks that return False, so this
        # always returns None.
        if self._event is None:
            return
        self.total_elapsed_seconds += 1
        self.exercise_elapsed_seconds += 1

    def reset_exercise(self) -> None:
        self.exercise_elapsed_seconds = 0

    def release(self) -> None:
        """Cancel any scheduled callback.  Safe to call more than once."""

        self.pause()
