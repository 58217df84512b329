"""Tests for the settings module."""

import json
from dataclasses import asdict

import pytest

from src.settings import Settings
from src.utils.exceptions import ConfigError


class TestSettingsDefaults:
    """Tests for default values."""

    def test_defaults_validate(self):
        """Default settings pass validation."""
        Settings().validate()

    def test_default_models(self):
        """Gemini text and image models have sensible defaults."""
        settings = Settings()
        assert settings.text_model == "gemini-2.5-flash"
        assert settings.image_model == "gemini-2.5-flash-image"
        assert settings.api_key_env == "GEMINI_API_KEY"


class TestSettingsValidation:
    """Tests for Settings.validate()."""

    @pytest.mark.parametrize(
        ("field", "value", "match"),
        [
            ("log_level", "LOUD", "log_level"),
            ("text_model", "", "text_model"),
            ("image_model", "  ", "image_model"),
            ("text_temperature", 2.5, "text_temperature"),
            ("text_temperature", -0.1, "text_temperature"),
            ("request_timeout", 1.0, "request_timeout"),
            ("request_timeout", 601.0, "request_timeout"),
            ("api_key_env", "1BAD", "api_key_env"),
            ("api_key_env", "BAD-NAME", "api_key_env"),
            ("host", "", "host"),
            ("port", 0, "port"),
            ("port", 70000, "port"),
        ],
    )
    def test_invalid_values_rejected(self, field, value, match):
        """Out-of-range or malformed values raise ValueError naming the field."""
        settings = Settings()
        setattr(settings, field, value)
        with pytest.raises(ValueError, match=match):
            settings.validate()


class TestApiKey:
    """Tests for API key lookup."""

    def test_reads_configured_variable(self, api_key):
        """The configured environment variable is used."""
        assert Settings().get_api_key() == "test-key"
        assert Settings().has_api_key() is True

    def test_falls_back_to_google_api_key(self, no_api_key, monkeypatch):
        """GOOGLE_API_KEY is the fallback."""
        monkeypatch.setenv("GOOGLE_API_KEY", "fallback")
        assert Settings().get_api_key() == "fallback"

    def test_custom_variable_name(self, no_api_key, monkeypatch):
        """A different variable name can be configured."""
        monkeypatch.setenv("MY_COMIC_KEY", "custom")
        settings = Settings(api_key_env="MY_COMIC_KEY")
        assert settings.get_api_key() == "custom"

    def test_missing_key_raises_config_error(self, no_api_key):
        """No key anywhere raises ConfigError naming the variable."""
        settings = Settings()
        assert settings.has_api_key() is False
        with pytest.raises(ConfigError, match="GEMINI_API_KEY"):
            settings.get_api_key()


class TestSettingsLoadSave:
    """Tests for JSON persistence."""

    def test_load_creates_file_with_defaults(self, isolate_settings_file):
        """Loading with no file writes the defaults."""
        settings = Settings.load()

        assert isolate_settings_file.exists()
        data = json.loads(isolate_settings_file.read_text())
        assert data == asdict(settings)

    def test_save_and_reload(self, isolate_settings_file):
        """Saved values survive a reload."""
        settings = Settings(port=8080, dark_mode=False)
        settings.save()

        loaded = Settings.load(use_cache=False)
        assert loaded.port == 8080
        assert loaded.dark_mode is False

    def test_save_never_writes_api_key(self, isolate_settings_file, api_key):
        """The key itself is never persisted."""
        Settings().save()
        assert "test-key" not in isolate_settings_file.read_text()

    def test_load_is_cached(self):
        """Repeated loads return the same instance until the cache is cleared."""
        first = Settings.load()
        assert Settings.load() is first
        Settings.clear_cache()
        assert Settings.load() is not first

    def test_merges_missing_and_obsolete_keys(self, isolate_settings_file):
        """Unknown keys are dropped and missing keys get defaults."""
        isolate_settings_file.write_text(json.dumps({"port": 9000, "legacy_backend_url": "x"}))

        settings = Settings.load()

        assert settings.port == 9000
        assert settings.text_model == "gemini-2.5-flash"
        data = json.loads(isolate_settings_file.read_text())
        assert "legacy_backend_url" not in data
        assert data["port"] == 9000

    def test_corrupt_file_backed_up(self, isolate_settings_file):
        """Invalid JSON is copied aside and defaults are used."""
        isolate_settings_file.write_text("{not json")

        settings = Settings.load()

        assert settings == Settings()
        backup = isolate_settings_file.with_suffix(".json.corrupt")
        assert backup.read_text() == "{not json"

    def test_non_object_json_backed_up(self, isolate_settings_file):
        """A JSON array is treated as corrupt."""
        isolate_settings_file.write_text("[1, 2]")
        assert Settings.load() == Settings()
        assert isolate_settings_file.with_suffix(".json.corrupt").exists()

    def test_out_of_range_value_raises(self, isolate_settings_file):
        """A stored value outside its range fails the load."""
        isolate_settings_file.write_text(json.dumps({"port": 0}))
        with pytest.raises(ValueError, match="port"):
            Settings.load()

    def test_wrong_type_raises_value_error(self, isolate_settings_file):
        """A value of the wrong type is reported as ValueError."""
        isolate_settings_file.write_text(json.dumps({"port": "eighty"}))
        with pytest.raises(ValueError):
            Settings.load()
