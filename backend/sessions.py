"""Loading workout sessions from a plan and writing their progress back.

This module translates between the in-memory :class:`WorkoutSession` and
the plan API's addressing scheme (week number, day number, workout and
exercise references).  Network failures are logged here and re-raised as
:class:`~backend.errors.RemoteWriteError` so screens only have to handle
one error type when saving.
"""

from __future__ import annotations

import logging

from backend.errors import ApiError, RemoteWriteError, SessionNotFoundError
from backend.plan_api import PlanApiClient
from backend.refs import (
    IndexRef,
    WorkoutAddress,
    exercise_ref,
    parse_ref,
)
from backend.workout_session import WorkoutSession


def unwrap_plan(response) -> dict:
    """Return the plan document from a ``GET`` response.

    The API answers either with the plan itself or with ``{"plan": {...}}``.
    """

    if isinstance(response, dict) and isinstance(response.get("plan"), dict):
        return response["plan"]
    return response if isinstance(response, dict) else {}


def find_workout(plan: dict, week_number: int, day_number: int, workout_id) -> dict:
    """Locate a workout inside ``plan``.

    Weeks and days are matched on their exact ``weekNumber``/``dayNumber``.
    The workout is looked up in three steps:

    1. if ``workout_id`` is a whole number, the workout at that position;
    2. a workout whose ``_id`` or ``id`` equals ``workout_id``;
    3. a workout whose position, as a string, equals ``workout_id``.

    Raises :class:`SessionNotFoundError` when any level is missing.
    """

    week = next(
        (w for w in plan.get("weeks") or [] if w.get("weekNumber") == week_number),
        None,
    )
    if week is None:
        raise SessionNotFoundError(f"Week {week_number} not found")
    day = next(
        (d for d in week.get("days") or [] if d.get("dayNumber") == day_number),
        None,
    )
    if day is None:
        raise SessionNotFoundError(
            f"Day {day_number} of week {week_number} not found"
        )

    workouts = day.get("workouts") or []
    ref = parse_ref(workout_id)
    if isinstance(ref, IndexRef) and ref.index < len(workouts):
        return workouts[ref.index]

    wanted = str(workout_id)
    for workout in workouts:
        for key in ("_id", "id"):
            if workout.get(key) is not None and str(workout[key]) == wanted:
                return workout
    for position, workout in enumerate(workouts):
        if str(position) == wanted:
            return workout
    raise SessionNotFoundError(f"Workout {workout_id!r} not found")


def _as_int(value, default: int = 1) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class SessionPersistenceAdapter:
    """Bridge between :class:`WorkoutSession` objects and the plan API."""

    def __init__(self, client: PlanApiClient | None = None) -> None:
        self.client = client if client is not None else PlanApiClient()

    def load_session(
        self, plan_id: str, week_number, day_number, workout_id, **session_kwargs
    ) -> WorkoutSession:
        """Fetch the plan and build a session for the requested workout.

        ``week_number`` and ``day_number`` may be given as strings (as they
        arrive from a route); values that do not parse default to 1.
        Extra keyword arguments are passed to :class:`WorkoutSession`.

        Raises :class:`SessionNotFoundError` if the plan, week, day or
        workout does not exist, and :class:`ApiError` for other failures.
        """

        week = _as_int(week_number)
        day = _as_int(day_number)
        try:
            response = self.client.get_plan(plan_id)
        except ApiError as exc:
            if exc.status == 404:
                raise SessionNotFoundError(f"Plan {plan_id} not found") from exc
            raise
        workout = find_workout(unwrap_plan(response), week, day, workout_id)
        address = WorkoutAddress(plan_id, week, day, parse_ref(workout_id))
        return WorkoutSession(workout, address=address, **session_kwargs)

    def start_workout(self, session: WorkoutSession) -> bool:
        """Notify the server that ``session`` has begun.

        Failure is logged and reported as ``False``; the session can go on
        without it.
        """

        addr = session.address
        try:
            self.client.start_workout(
                addr.plan_id, addr.week_number, addr.day_number, addr.workout_ref
            )
        except ApiError:
            logging.exception("Could not mark workout %s as started", addr)
            return False
        return True

    def save_progress(self, session: WorkoutSession) -> list[int]:
        """Send one update for every exercise that has progress.

        Each update is independent: a failed exercise does not stop the
        remaining ones, and exercises already written stay written.
        Returns the indices that were saved.  If any update failed a
        :class:`RemoteWriteError` is raised after all were attempted.
        """

        addr = session.address
        saved: list[int] = []
        failures: dict[int, ApiError] = {}
        for index, exercise, state in session.dirty_exercises():
            payload = {
                "completedSets": [record.to_dict() for record in state.sets],
                "isCompleted": state.completed,
                "notes": state.notes,
            }
            try:
                self.client.update_exercise(
                    addr.plan_id,
                    addr.week_number,
                    addr.day_number,
                    addr.workout_ref,
                    exercise_ref(exercise, index),
                    payload,
                )
            except ApiError as exc:
                logging.exception("Saving exercise %s failed", index)
                failures[index] = exc
                continue
            saved.append(index)

        if failures:
            raise RemoteWriteError(
                f"Failed to save {len(failures)} of "
                f"{len(failures) + len(saved)} exercises",
                failures=failures,
                saved=saved,
            )
        logging.info("Saved progress for %d exercises", len(saved))
        return saved

    def complete_workout(self, session: WorkoutSession) -> dict:
        """Submit the session summary and close ``session``.

        On failure the session stays open so the user can retry.
        """

        addr = session.address
        summary = session.build_summary()
        try:
            response = self.client.complete_workout(
                addr.plan_id,
                addr.week_number,
                addr.day_number,
                addr.workout_ref,
                summary,
            )
        except ApiError as exc:
            logging.exception("Completing workout %s failed", addr)
            raise RemoteWriteError(
                f"Failed to complete workout: {exc.message}", failures={None: exc}
            ) from exc
        session.close()
        logging.info(
            "Completed workout %s (%d sets)", addr, summary["totalSets"]
        )
        return response

    def add_exercises(
        self, session: WorkoutSession, exercises: list[dict], **session_kwargs
    ) -> WorkoutSession:
        """Append ``exercises`` to the session's workout and reload it.

        The old session is closed and the freshly loaded one is returned.
        """

        addr = session.address
        for exercise in exercises:
            try:
                self.client.add_exercise(
                    addr.plan_id,
                    addr.week_number,
                    addr.day_number,
                    addr.workout_ref,
                    exercise,
                )
            except ApiError as exc:
                logging.exception("Adding exercise %r failed", exercise.get("name"))
                raise RemoteWriteError(
                    f"Failed to add exercises: {exc.message}", failures={None: exc}
                ) from exc
        session.close()
        return self.load_session(
            addr.plan_id,
            addr.week_number,
            addr.day_number,
            str(addr.workout_ref),
            **session_kwargs,
        )
