import pytest

from backend.workout_session import WorkoutSession, format_time


def _full_body(plan):
    return plan["weeks"][0]["days"][0]["workouts"][2]


def test_format_time():
    assert format_time(0) == "00:00"
    assert format_time(65) == "01:05"
    assert format_time(3600) == "60:00"


def test_complete_all_exercises_in_order(plan, make_session, scheduler):
    session = make_session(_full_body(plan))
    rest_transitions = []
    for expected_index in range(3):
        assert session.current_exercise_index == expected_index
        assert session.complete_set("10")
        session.complete_exercise()
        rest_transitions.append(session.is_resting)
        session.skip_rest()

    assert session.progress_percentage() == 100
    assert session.is_workout_complete()
    assert session.total_sets() == 3
    assert rest_transitions == [True, True, False]


def test_completing_starts_rest_and_advances(upper_workout, make_session):
    session = make_session(upper_workout)
    session.complete_exercise(0)
    assert session.is_resting
    assert session.rest_remaining_seconds == 90
    assert session.current_exercise_index == 1

    # Row has restTime 0, which falls back to the default
    session.complete_exercise(1)
    assert session.rest_remaining_seconds == 60
    assert session.current_exercise_index == 2

    session.skip_rest()
    session.complete_exercise(2)
    assert not session.is_resting
    assert session.current_exercise_index == 2


def test_completing_twice_does_not_restart_rest(upper_workout, make_session, scheduler):
    session = make_session(upper_workout)
    session.complete_exercise(0)
    scheduler.advance(10)
    session.jump_to(0)
    assert session.complete_exercise(0) is False
    assert session.rest_remaining_seconds == 80
    assert session.current_exercise_index == 0
    assert session.completed_indices == frozenset({0})


def test_exercise_without_sets_can_be_completed(upper_workout, make_session):
    session = make_session(upper_workout)
    assert session.complete_exercise()
    assert session.exercise_state(0).completed
    assert session.exercise_state(0).sets == ()


def test_invalid_reps_do_not_advance_set_number(upper_workout, make_session):
    session = make_session(upper_workout)
    assert session.complete_set("8", "60")
    assert session.current_set_number == 2
    for reps in ("", "0", "lots"):
        assert session.complete_set(reps, "60") is None
    assert session.current_set_number == 2
    assert len(session.sets_for(0)) == 1
    assert session.set_display() == "Set 2 of 3"


def test_navigation_resets_exercise_timer_and_set(upper_workout, make_session, scheduler):
    session = make_session(upper_workout)
    session.start()
    scheduler.advance(20)
    session.complete_set(5)
    session.next_exercise()
    assert session.exercise_elapsed_seconds == 0
    assert session.total_elapsed_seconds == 20
    assert session.current_set_number == 1
    assert session.previous_exercise()
    assert session.previous_exercise() is False


def test_next_at_last_exercise_changes_nothing(upper_workout, make_session):
    session = make_session(upper_workout)
    session.jump_to(2)
    session.complete_set(12)
    before = session.snapshot()
    assert session.next_exercise() is False
    assert session.snapshot() == before


def test_session_clock_pause_and_resume(upper_workout, make_session, scheduler):
    session = make_session(upper_workout)
    session.start()
    scheduler.advance(65)
    session.pause()
    assert session.total_elapsed_seconds == 65
    session.start()
    session.start()
    scheduler.advance(5)
    assert session.total_elapsed_seconds == 70


def test_rest_runs_while_clock_is_paused(upper_workout, make_session, scheduler):
    session = make_session(upper_workout)
    session.complete_exercise(0)
    scheduler.advance(30)
    assert not session.is_running
    assert session.rest_remaining_seconds == 60


def test_rest_cue_plays_when_rest_runs_out(plan, make_session, scheduler):
    cues = []
    session = make_session(_full_body(plan), cue=lambda: cues.append(1))
    session.complete_exercise(0)
    scheduler.advance(30)
    assert not session.is_resting
    assert cues == [1]

    session.set_sound_enabled(False)
    session.complete_exercise(1)
    scheduler.advance(60)
    assert cues == [1]


def test_reset_rest_timer_uses_current_exercise(upper_workout, make_session, scheduler):
    session = make_session(upper_workout)
    session.complete_exercise(1)
    scheduler.advance(15)
    # Cursor now on Curl (restTime 45)
    session.reset_rest_timer()
    assert session.rest_remaining_seconds == 45
    assert session.is_resting


def test_target_sets_fallbacks(upper_workout, make_session):
    session = make_session(upper_workout)
    assert session.target_sets(0) == 3
    assert session.target_sets(1) == 4
    assert session.target_sets(2) == 3
    assert session.exercise_display() == "Exercise 1 of 3"


def test_seeded_from_saved_progress(upper_workout, make_session):
    upper_workout["exercises"][0].update(
        {
            "isCompleted": True,
            "completedSets": [{"setNumber": 1, "reps": 8, "weight": 60}],
            "notes": "felt strong",
        }
    )
    session = make_session(upper_workout)
    state = session.exercise_state(0)
    assert state.completed
    assert state.notes == "felt strong"
    assert state.sets[0].weight == pytest.approx(60.0)
    assert session.progress_percentage() == 33
    assert [idx for idx, _, _ in session.dirty_exercises()] == [0]


def test_notes_and_dirty_exercises(upper_workout, make_session):
    session = make_session(upper_workout)
    session.update_exercise_notes(2, "elbow ok")
    session.update_exercise_notes(9, "ignored")
    session.set_workout_notes("good session")
    assert [idx for idx, _, _ in session.dirty_exercises()] == [2]
    assert session.workout_notes == "good session"


def test_build_summary(plan, make_session, scheduler):
    session = make_session(_full_body(plan))
    session.start()
    scheduler.advance(125)
    session.complete_set(10, "100")
    session.complete_exercise()
    session.set_workout_notes("solid")

    summary = session.build_summary()
    assert summary["durationMinutes"] == 2
    assert summary["duration"] == 2
    assert summary["totalExercises"] == 3
    assert summary["completedExercises"] == 1
    assert summary["totalSets"] == 1
    assert summary["notes"] == "solid"
    assert summary["averageIntensity"] == "High"
    assert summary["perExercise"] is summary["exercises"]
    first = summary["perExercise"][0]
    assert first["exerciseIndex"] == 0
    assert first["completed"] is True
    assert first["actualSets"][0]["reps"] == 10
    assert first["actualSets"][0]["weight"] == pytest.approx(100.0)


def test_summary_defaults_intensity(upper_workout, make_session):
    assert make_session(upper_workout).build_summary()["averageIntensity"] == "Moderate"


def test_close_releases_timers(upper_workout, make_session, scheduler):
    session = make_session(upper_workout)
    session.start()
    session.complete_exercise(0)
    assert len(scheduler.events) == 2
    session.close()
    assert session.closed
    assert not scheduler.events


def test_empty_workout(make_session):
    session = make_session({"name": "Empty", "exercises": []})
    assert session.current_exercise is None
    assert session.complete_set(10) is None
    assert session.complete_exercise() is False
    assert session.exercise_display() == ""
    assert session.progress_percentage() == 0


def test_default_scheduler_is_kivy_clock(upper_workout):
    from kivy.clock import Clock

    session = WorkoutSession(upper_workout)
    assert session.clock._scheduler is Clock
    session.close()
