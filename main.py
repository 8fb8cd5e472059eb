import argparse
import os
from pathlib import Path

# Kivy must not consume our command line options.
os.environ.setdefault("KIVY_NO_ARGS", "1")

from kivymd.app import MDApp
from kivy.lang import Builder

from assets.sounds import SoundSystem
from backend import settings as app_settings
from backend.logging_config import setup_logging
from backend.plan_api import PlanApiClient
from backend.sessions import SessionPersistenceAdapter
from ui.dialogs import WorkoutSessionDialog
from ui.screens import PlanEntryScreen, SettingsScreen, WorkoutSessionScreen  # noqa: F401 - used by main.kv
from ui.session_panel import SessionPanel  # noqa: F401 - used by main.kv


class CoachlixApp(MDApp):
    sound: SoundSystem | None = None
    adapter: SessionPersistenceAdapter | None = None

    def __init__(self, start: dict | None = None, **kwargs):
        super().__init__(**kwargs)
        self.start = start

    def build(self):
        self.title = "Coachlix"
        self.sound = SoundSystem(
            enabled=app_settings.sound_on(),
            volume=float(app_settings.get_value("sound_level") or 1.0),
        )
        self.reset_adapter()
        return Builder.load_file(str(Path(__file__).with_name("main.kv")))

    def reset_adapter(self) -> None:
        """Create the API adapter from the current settings."""
        app_settings.clear_cache()
        self.adapter = SessionPersistenceAdapter(PlanApiClient())

    def on_start(self):
        if not self.start:
            return
        if self.start.get("dialog"):
            WorkoutSessionDialog(
                self.start["plan_id"],
                self.start["week"],
                self.start["day"],
                self.start["workout"],
            ).open()
            return
        screen = self.root.get_screen("workout_session")
        screen.plan_id = self.start["plan_id"]
        screen.week_number = self.start["week"]
        screen.day_number = self.start["day"]
        screen.workout_id = self.start["workout"]
        self.root.current = "workout_session"

    def on_stop(self):
        if self.root:
            self.root.get_screen("workout_session").release_session()
        if self.sound:
            self.sound.stop()


def parse_args(argv=None) -> dict | None:
    parser = argparse.ArgumentParser(description="Coachlix workout session")
    parser.add_argument("plan_id", nargs="?", help="open this plan straight away")
    parser.add_argument("--week", type=int, default=1)
    parser.add_argument("--day", type=int, default=1)
    parser.add_argument("--workout", default="0", help="workout index or id")
    parser.add_argument(
        "--dialog", action="store_true", help="show the session as a dialog"
    )
    args = parser.parse_args(argv)
    if not args.plan_id:
        return None
    return {
        "plan_id": args.plan_id,
        "week": args.week,
        "day": args.day,
        "workout": args.workout,
        "dialog": args.dialog,
    }


def main(argv=None) -> None:
    setup_logging()
    CoachlixApp(start=parse_args(argv)).run()


if __name__ == "__main__":
    main()
