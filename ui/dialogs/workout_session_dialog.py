from kivy.metrics import dp
from kivymd.app import MDApp
from kivymd.uix.button import MDFlatButton
from kivymd.uix.dialog import MDDialog

from ui.dialogs.add_exercise_dialog import AddExerciseDialog
from ui.session_panel import SessionPanel
from ui.session_view import SessionView


class WorkoutSessionDialog(SessionView, MDDialog):
    """Modal variant of the workout session.

    Shares the controller and panel with :class:`WorkoutSessionScreen`;
    dismissing the dialog discards unsaved session state.
    """

    def __init__(self, plan_id, week_number, day_number, workout_id, **kwargs):
        self._location = (plan_id, week_number, day_number, workout_id)
        self.panel = SessionPanel(size_hint_y=None, height=dp(560))
        super().__init__(
            title="Workout Session",
            type="custom",
            content_cls=self.panel,
            auto_dismiss=False,
            buttons=[MDFlatButton(text="Close", on_release=lambda *_: self.dismiss())],
            **kwargs,
        )
        self.panel.view = self

    def on_open(self):
        app = MDApp.get_running_app()
        self.sound = getattr(app, "sound", None)
        self.adapter = getattr(app, "adapter", None)
        self.open_session(*self._location)

    def on_dismiss(self):
        self.release_session()
        return super().on_dismiss()

    def on_session_closed_by_error(self):
        self.dismiss()

    def on_workout_finished(self):
        self.dismiss()

    def open_add_exercise(self):
        AddExerciseDialog(on_add=self.add_exercises).open()
