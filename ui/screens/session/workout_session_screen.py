from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivy.properties import NumericProperty, ObjectProperty, StringProperty

from ui.dialogs.add_exercise_dialog import AddExerciseDialog
from ui.session_view import SessionView


class WorkoutSessionScreen(SessionView, MDScreen):
    """Full-screen route for performing a workout.

    The workout to load is set through ``plan_id``, ``week_number``,
    ``day_number`` and ``workout_id`` before the screen is entered.  Leaving
    the screen discards any unsaved session state.
    """

    plan_id = StringProperty("")
    week_number = NumericProperty(1)
    day_number = NumericProperty(1)
    workout_id = StringProperty("0")
    back_screen = StringProperty("plan_entry")
    panel = ObjectProperty(None, allownone=True)

    def on_pre_enter(self, *args):
        app = MDApp.get_running_app()
        self.sound = getattr(app, "sound", None)
        self.adapter = getattr(app, "adapter", None)
        if self.panel:
            self.panel.view = self
        self.open_session(
            self.plan_id, self.week_number, self.day_number, self.workout_id
        )
        return super().on_pre_enter(*args)

    def on_leave(self, *args):
        self.release_session()
        return super().on_leave(*args)

    def go_back(self, *args):
        if self.manager:
            self.manager.current = self.back_screen

    def on_session_closed_by_error(self):
        self.go_back()

    def on_workout_finished(self):
        self.go_back()

    def open_add_exercise(self):
        AddExerciseDialog(on_add=self.add_exercises).open()
