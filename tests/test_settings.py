import json

from backend import settings


def test_defaults_written_on_first_use(isolated_settings):
    assert settings.get_value("sound_on") is True
    assert isolated_settings.exists()
    stored = json.loads(isolated_settings.read_text(encoding="utf-8"))
    assert {item["key"] for item in stored} >= {"api_base_url", "auth_token"}


def test_missing_keys_are_merged(isolated_settings):
    isolated_settings.write_text(
        json.dumps([{"key": "sound_on", "value": False, "type": "bool"}]),
        encoding="utf-8",
    )
    assert settings.sound_on() is False
    assert settings.request_timeout() == 15.0
    assert settings.api_base_url() == "http://localhost:3000/api/workout-plans"


def test_set_value_persists(isolated_settings):
    settings.set_value("auth_token", "abc")
    settings.clear_cache()
    assert settings.auth_token() == "abc"


def test_environment_overrides_file(monkeypatch):
    settings.set_value("api_base_url", "http://file.test/")
    monkeypatch.setenv("COACHLIX_API_BASE_URL", "http://env.test/")
    assert settings.api_base_url() == "http://env.test"
    monkeypatch.delenv("COACHLIX_API_BASE_URL")
    assert settings.api_base_url() == "http://file.test"


def test_blank_token_means_unauthenticated():
    assert settings.auth_token() is None


def test_unreadable_file_falls_back_to_defaults(isolated_settings):
    isolated_settings.write_text("{not json", encoding="utf-8")
    assert settings.get_value("default_rest_seconds") == 60


def test_default_rest_seconds_accessor():
    assert settings.default_rest_seconds() == 60
    settings.set_value("default_rest_seconds", 0)
    assert settings.default_rest_seconds() == 60
    settings.set_value("default_rest_seconds", 45)
    assert settings.default_rest_seconds() == 45
