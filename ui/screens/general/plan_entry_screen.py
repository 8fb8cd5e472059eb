from kivymd.uix.screen import MDScreen

from ui.dialogs.workout_session_dialog import WorkoutSessionDialog


class PlanEntryScreen(MDScreen):
    """Pick the plan, week, day and workout to train.

    The workout can be opened either as a full screen or as a dialog.
    """

    def _location(self):
        ids = self.ids
        return (
            ids.plan_field.text.strip(),
            ids.week_field.text.strip() or "1",
            ids.day_field.text.strip() or "1",
            ids.workout_field.text.strip() or "0",
        )

    def start_page(self):
        plan_id, week, day, workout = self._location()
        if not plan_id:
            self.ids.plan_field.error = True
            return
        screen = self.manager.get_screen("workout_session")
        screen.plan_id = plan_id
        screen.week_number = int(week) if week.isdigit() else 1
        screen.day_number = int(day) if day.isdigit() else 1
        screen.workout_id = workout
        screen.back_screen = self.name
        self.manager.current = "workout_session"

    def start_dialog(self):
        plan_id, week, day, workout = self._location()
        if not plan_id:
            self.ids.plan_field.error = True
            return
        WorkoutSessionDialog(plan_id, week, day, workout).open()
