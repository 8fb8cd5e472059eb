from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDFlatButton, MDRaisedButton
from kivymd.uix.dialog import MDDialog
from kivymd.uix.textfield import MDTextField

from backend import DEFAULT_REST_SECONDS, DEFAULT_TARGET_SETS


def build_exercise(name: str, sets: str, reps: str, rest: str) -> dict | None:
    """Return the exercise payload for the entered values.

    ``None`` is returned when ``name`` is blank.  Numeric fields that are
    empty or not numbers fall back to their defaults.
    """

    name = (name or "").strip()
    if not name:
        return None

    def as_int(text, default):
        text = (text or "").strip()
        return int(text) if text.isdigit() and int(text) > 0 else default

    return {
        "name": name,
        "targetSets": as_int(sets, DEFAULT_TARGET_SETS),
        "targetReps": as_int(reps, 10),
        "restTime": as_int(rest, DEFAULT_REST_SECONDS),
    }


class AddExerciseDialog(MDDialog):
    """Collect a new exercise and hand it to ``on_add`` as a one-item list."""

    def __init__(self, on_add, **kwargs):
        self.on_add = on_add
        form = MDBoxLayout(
            orientation="vertical", spacing="8dp", size_hint_y=None, height="280dp"
        )
        self.fields = {
            "name": MDTextField(hint_text="Exercise name"),
            "sets": MDTextField(hint_text="Sets", input_filter="int"),
            "reps": MDTextField(hint_text="Reps", input_filter="int"),
            "rest": MDTextField(hint_text="Rest (seconds)", input_filter="int"),
        }
        for field in self.fields.values():
            form.add_widget(field)
        super().__init__(
            title="Add Exercise",
            type="custom",
            content_cls=form,
            buttons=[
                MDFlatButton(text="Cancel", on_release=lambda *_: self.dismiss()),
                MDRaisedButton(text="Add", on_release=self._submit),
            ],
            **kwargs,
        )

    def _submit(self, *args):
        exercise = build_exercise(
            self.fields["name"].text,
            self.fields["sets"].text,
            self.fields["reps"].text,
            self.fields["rest"].text,
        )
        if exercise is None:
            self.fields["name"].error = True
            return
        self.dismiss()
        self.on_add([exercise])
