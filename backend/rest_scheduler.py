"""Rest countdown between exercises.

The scheduler is either idle or resting.  A rest period counts down one
second per tick; when it runs out the scheduler returns to idle and plays
the rest cue in the same step.  Skipping ends the rest early without a
cue.
"""

from __future__ import annotations

import logging

from kivy.clock import Clock

from backend import TICK_INTERVAL, settings

IDLE = "idle"
RESTING = "resting"


def rest_seconds_for(exercise: dict | None) -> int:
    """Return the rest duration configured for ``exercise``.

    Missing, zero and unparseable ``restTime`` values all fall back to the
    ``default_rest_seconds`` setting (60 unless changed).
    """

    value = exercise.get("restTime") if exercise else None
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        seconds = 0
    return seconds if seconds > 0 else settings.default_rest_seconds()


class RestScheduler:
    """Countdown with an audible cue at zero."""

    def __init__(
        self,
        scheduler=None,
        cue=None,
        *,
        sound_enabled: bool = True,
        interval: float = TICK_INTERVAL,
    ) -> None:
        self._scheduler = scheduler if scheduler is not None else Clock
        self._cue = cue
        self._interval = interval
        self._event = None
        self.sound_enabled = sound_enabled
        self.state = IDLE
        self.remaining_seconds = 0

    @property
    def is_resting(self) -> bool:
        return self.state == RESTING

    def begin(self, seconds: int) -> None:
        """Start (or restart) a rest period of ``seconds``."""

        self._cancel()
        seconds = int(seconds)
        if seconds <= 0:
            self.state = IDLE
            self.remaining_seconds = 0
            return
        self.state = RESTING
        self.remaining_seconds = seconds
        self._event = self._scheduler.schedule_interval(self.tick, self._interval)

    def skip(self) -> None:
        """End the current rest immediately without playing the cue."""

        self._cancel()
        self.state = IDLE
        self.remaining_seconds = 0

    def tick(self, dt=None) -> None:
        if self.state != RESTING:
            return
        if self.remaining_seconds > 1:
            self.remaining_seconds -= 1
            return
        self.remaining_seconds = 0
        self.state = IDLE
        self._cancel()
        self._play_cue()

    def release(self) -> None:
        """Cancel the countdown callback, keeping the current state."""

        self._cancel()

    def _cancel(self) -> None:
        if self._event is not None:
            self._event.cancel()
            self._event = None

    def _play_cue(self) -> None:
        if not self.sound_enabled or self._cue is None:
            return
        try:
            self._cue()
        except Exception:
            logging.exception("Rest cue playback failed")
