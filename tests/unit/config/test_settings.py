"""Tests for Settings configuration class."""

import pytest


class TestSettingsDefaults:
    """Test that Settings loads sensible defaults."""

    def test_settings_loads_with_defaults(self, monkeypatch):
        """Settings should load with default values when no env vars are set."""
        for var in [
            "CAREMATCH_MAX_WORKERS",
            "CAREMATCH_DEFAULT_LIMIT",
            "CAREMATCH_OUTPUT_FORMAT",
            "CAREMATCH_LOG_LEVEL",
        ]:
            monkeypatch.delenv(var, raising=False)

        from carematch.config.settings import OutputFormat, Settings

        settings = Settings(_env_file=None)

        assert settings.max_workers is None
        assert settings.default_limit == 20
        assert settings.output_format == OutputFormat.TEXT
        assert settings.log_level == "INFO"


class TestSettingsFromEnvironment:
    """Test that Settings reads from environment variables."""

    def test_settings_reads_max_workers_from_env(self, monkeypatch):
        """Settings should read CAREMATCH_MAX_WORKERS from environment."""
        monkeypatch.setenv("CAREMATCH_MAX_WORKERS", "4")

        from carematch.config.settings import Settings

        settings = Settings(_env_file=None)
        assert settings.max_workers == 4

    def test_settings_reads_output_format_case_insensitively(self, monkeypatch):
        """Output format should accept upper-case values."""
        monkeypatch.setenv("CAREMATCH_OUTPUT_FORMAT", "JSON")

        from carematch.config.settings import OutputFormat, Settings

        settings = Settings(_env_file=None)
        assert settings.output_format == OutputFormat.JSON

    def test_settings_normalizes_log_level(self, monkeypatch):
        """Log level should be upper-cased."""
        monkeypatch.setenv("CAREMATCH_LOG_LEVEL", "debug")

        from carematch.config.settings import Settings

        settings = Settings(_env_file=None)
        assert settings.log_level == "DEBUG"


class TestSettingsValidation:
    """Test that Settings validates values correctly."""

    def test_settings_rejects_unknown_log_level(self, monkeypatch):
        """An unknown log level should be rejected."""
        monkeypatch.setenv("CAREMATCH_LOG_LEVEL", "chatty")

        from carematch.config.settings import Settings

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_settings_rejects_unknown_output_format(self, monkeypatch):
        """An unknown output format should be rejected."""
        monkeypatch.setenv("CAREMATCH_OUTPUT_FORMAT", "xml")

        from carematch.config.settings import Settings

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_settings_requires_positive_default_limit(self, monkeypatch):
        """default_limit must be positive."""
        monkeypatch.setenv("CAREMATCH_DEFAULT_LIMIT", "0")

        from carematch.config.settings import Settings

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_settings_requires_positive_max_workers(self, monkeypatch):
        """max_workers should be positive."""
        monkeypatch.setenv("CAREMATCH_MAX_WORKERS", "-2")

        from carematch.config.settings import Settings

        with pytest.raises(ValueError):
            Settings(_env_file=None)


class TestSettingsSingleton:
    """Test the settings singleton helpers."""

    def test_get_settings_returns_same_instance(self):
        """get_settings should return a singleton."""
        from carematch.config.settings import get_settings

        assert get_settings() is get_settings()

    def test_reset_settings_rebuilds_instance(self):
        """reset_settings should force a new instance."""
        from carematch.config.settings import get_settings, reset_settings

        first = get_settings()
        reset_settings()

        assert get_settings() is not first
