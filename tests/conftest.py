import copy
import json
import os
from pathlib import Path
import sys

import pytest

# Kivy reads these on import; keep it away from argv, windows and ~/.kivy.
os.environ.setdefault("KIVY_NO_ARGS", "1")
os.environ.setdefault("KIVY_WINDOW", "mock")
os.environ.setdefault("KIVY_UNITTEST", "1")
os.environ.setdefault("KIVY_NO_CONSOLELOG", "1")
os.environ.setdefault("KIVY_NO_FILELOG", "1")
# No window provider in headless runs: give kivy.metrics its values directly.
os.environ.setdefault("KIVY_DPI", "96")
os.environ.setdefault("KIVY_METRICS_DENSITY", "1")
os.environ.setdefault("KIVY_METRICS_FONTSCALE", "1")

sys.path.append(str(Path(__file__).resolve().parents[1]))

from backend import settings  # noqa: E402
from backend.plan_api import PlanApiClient  # noqa: E402
from backend.sessions import SessionPersistenceAdapter  # noqa: E402
from backend.workout_session import WorkoutSession  # noqa: E402


# ----------------------------------------------------------------------
# Timers
# ----------------------------------------------------------------------

class FakeEvent:
    """Interval event returned by :class:`FakeScheduler`."""

    def __init__(self, scheduler, callback, interval):
        self.scheduler = scheduler
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True
        if self in self.scheduler.events:
            self.scheduler.events.remove(self)


class FakeScheduler:
    """Stand-in for ``kivy.clock.Clock`` advanced by hand."""

    def __init__(self):
        self.events = []

    def schedule_interval(self, callback, interval):
        event = FakeEvent(self, callback, interval)
        self.events.append(event)
        return event

    def advance(self, seconds=1):
        for _ in range(seconds):
            for event in list(self.events):
                if not event.cancelled:
                    event.callback(event.interval)


@pytest.fixture
def scheduler():
    return FakeScheduler()


# ----------------------------------------------------------------------
# HTTP
# ----------------------------------------------------------------------

class FakeResponse:
    def __init__(self, status_code=200, body=None, content=None):
        self.status_code = status_code
        if content is None:
            content = b"" if body is None else json.dumps(body).encode("utf-8")
        self.content = content

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.content.decode("utf-8"))


class FakeHttp:
    """Records requests and answers them from registered routes.

    Routes are matched on the method and the end of the URL; the most
    recently added match wins.  Unmatched requests get a 404.
    """

    def __init__(self):
        self.calls = []
        self.routes = []

    def route(self, method, suffix, response):
        self.routes.append((method, suffix, response))

    def request(self, method, url, headers=None, json=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": headers,
                "json": copy.deepcopy(json),
                "timeout": timeout,
            }
        )
        for route_method, suffix, response in reversed(self.routes):
            if route_method == method and url.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                return response
        return FakeResponse(404, {"message": "Not found"})

    def calls_for(self, method):
        return [call for call in self.calls if call["method"] == method]


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def client(http):
    return PlanApiClient(
        "http://api.test/workout-plans",
        token_provider=lambda: "token-123",
        session=http,
        timeout=5,
    )


@pytest.fixture
def adapter(client):
    return SessionPersistenceAdapter(client)


# ----------------------------------------------------------------------
# Plan documents
# ----------------------------------------------------------------------

def make_plan():
    """Plan with one week, one day and three workouts."""
    return {
        "_id": "plan-1",
        "name": "Strength Block",
        "weeks": [
            {
                "weekNumber": 1,
                "days": [
                    {
                        "dayNumber": 1,
                        "workouts": [
                            {
                                "_id": "2",
                                "name": "Upper A",
                                "exercises": [
                                    {
                                        "_id": "ex-bench",
                                        "name": "Bench Press",
                                        "targetSets": 3,
                                        "targetReps": 8,
                                        "restTime": 90,
                                    },
                                    {
                                        "name": "Row",
                                        "sets": 4,
                                        "reps": 10,
                                        "restTime": 0,
                                    },
                                    {"_id": "ex-curl", "name": "Curl", "restTime": 45},
                                ],
                            },
                            {"_id": "w-lower", "name": "Lower", "exercises": []},
                            {
                                "_id": "w-full",
                                "name": "Full Body",
                                "intensity": "High",
                                "exercises": [
                                    {"name": "Squat", "targetSets": 1, "restTime": 30},
                                    {"name": "Press", "targetSets": 1},
                                    {"name": "Deadlift", "targetSets": 1},
                                ],
                            },
                        ],
                    }
                ],
            }
        ],
    }


@pytest.fixture
def plan():
    return make_plan()


@pytest.fixture
def upper_workout(plan):
    return plan["weeks"][0]["days"][0]["workouts"][0]


@pytest.fixture
def make_session(scheduler):
    """Build a :class:`WorkoutSession` driven by the fake scheduler."""

    def _make(workout, **kwargs):
        kwargs.setdefault("scheduler", scheduler)
        return WorkoutSession(copy.deepcopy(workout), **kwargs)

    return _make


# ----------------------------------------------------------------------
# Settings
# ----------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test's settings in a temporary file."""

    monkeypatch.setattr(settings, "SETTINGS_PATH", tmp_path / "settings.json")
    monkeypatch.delenv("COACHLIX_API_BASE_URL", raising=False)
    monkeypatch.delenv("COACHLIX_AUTH_TOKEN", raising=False)
    settings.clear_cache()
    yield tmp_path / "settings.json"
    settings.clear_cache()
