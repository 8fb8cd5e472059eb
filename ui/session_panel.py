"""Widget tree displaying a workout session.

The layout lives in ``main.kv`` (rule ``<SessionPanel>``).  The panel holds
only display values; every button forwards to ``view``, the
:class:`~ui.session_view.SessionView` that owns it.
"""

from __future__ import annotations

from kivy.properties import (
    BooleanProperty,
    ListProperty,
    NumericProperty,
    ObjectProperty,
    StringProperty,
)
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.list import OneLineListItem


class SessionPanel(MDBoxLayout):
    view = ObjectProperty(None, allownone=True)
    exercise_list = ObjectProperty(None, allownone=True)

    loading = BooleanProperty(False)
    saving = BooleanProperty(False)
    has_exercises = BooleanProperty(False)
    workout_name = StringProperty("")
    timer_text = StringProperty("00:00")
    exercise_timer_text = StringProperty("00:00")
    rest_text = StringProperty("00:00")
    is_resting = BooleanProperty(False)
    is_running = BooleanProperty(False)
    sound_enabled = BooleanProperty(True)
    exercise_name = StringProperty("")
    exercise_instructions = StringProperty("")
    exercise_position = StringProperty("")
    set_text = StringProperty("")
    target_text = StringProperty("")
    logged_sets_text = StringProperty("")
    exercise_notes = StringProperty("")
    exercise_completed = BooleanProperty(False)
    is_first = BooleanProperty(True)
    is_last = BooleanProperty(True)
    progress = NumericProperty(0)
    progress_text = StringProperty("")
    finish_text = StringProperty("Finish Workout")
    exercise_items = ListProperty([])

    def apply(self, values: dict) -> None:
        """Copy ``values`` onto the matching properties."""

        for key, value in values.items():
            if key == "exercise_items":
                if value != self.exercise_items:
                    self.exercise_items = value
                    self._populate_exercise_list()
            elif hasattr(self, key):
                setattr(self, key, value)

    def _populate_exercise_list(self) -> None:
        if not self.exercise_list:
            return
        self.exercise_list.clear_widgets()
        for item in self.exercise_items:
            marker = "[x]" if item["completed"] else "[ ]"
            prefix = "> " if item["current"] else ""
            self.exercise_list.add_widget(
                OneLineListItem(
                    text=f"{prefix}{marker} {item['name']}",
                    on_release=lambda _w, idx=item["index"]: self._select(idx),
                )
            )

    def _select(self, index: int) -> None:
        if self.view:
            self.view.select_exercise(index)

    def submit_set(self) -> None:
        """Record the set typed into the reps/weight fields."""

        if not self.view:
            return
        reps = self.ids.reps_field
        weight = self.ids.weight_field
        if self.view.complete_set(reps.text, weight.text):
            reps.text = ""
            weight.text = ""
