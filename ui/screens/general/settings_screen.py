from __future__ import annotations

"""Screen for modifying app settings."""

from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivy.properties import StringProperty

from backend import settings as app_settings


class SettingsScreen(MDScreen):
    """Display and persist user-configurable settings."""

    return_to = StringProperty("plan_entry")
    """Name of the screen to return to when leaving settings."""

    def on_pre_enter(self, *args) -> None:
        """Populate controls from stored settings."""
        self.ids.sound_level_slider.value = app_settings.get_value("sound_level") or 1.0
        self.ids.sound_toggle.active = app_settings.sound_on()
        self.ids.api_url_field.text = app_settings.api_base_url()
        self.ids.token_field.text = app_settings.get_value("auth_token") or ""

    def on_sound_level(self, slider, value: float) -> None:
        """Handle volume slider changes."""
        app_settings.set_value("sound_level", value)
        MDApp.get_running_app().sound.set_volume(value)

    def on_sound_toggle(self, switch, value: bool) -> None:
        """Handle sound enable/disable toggling."""
        app_settings.set_value("sound_on", value)
        MDApp.get_running_app().sound.set_enabled(value)

    def save_connection(self) -> None:
        """Store the API address and token, then rebuild the API client."""
        app_settings.set_value("api_base_url", self.ids.api_url_field.text.strip())
        app_settings.set_value("auth_token", self.ids.token_field.text.strip())
        MDApp.get_running_app().reset_adapter()

    def go_back(self) -> None:
        if self.manager:
            self.manager.current = self.return_to
