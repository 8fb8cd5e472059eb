"""Blocking message dialogs."""

from __future__ import annotations

from kivymd.uix.button import MDFlatButton
from kivymd.uix.dialog import MDDialog


def show_alert(title: str, text: str, on_close=None) -> MDDialog:
    """Open a dialog with a single OK button.

    ``on_close`` is called after the user dismisses the dialog.
    """

    dialog = None

    def close(*_):
        dialog.dismiss()
        if on_close:
            on_close()

    dialog = MDDialog(
        title=title,
        text=text,
        auto_dismiss=False,
        buttons=[MDFlatButton(text="OK", on_release=close)],
    )
    dialog.open()
    return dialog
