"""Tests for environment-driven configuration."""

import pytest
from pathlib import Path

from finance_tracker.config import (
    AppSettings,
    DisplaySettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:
    """Tests for values used when nothing is configured."""

    def test_storage_defaults(self):
        """Test default data directory and write attempts."""
        settings = StorageSettings()
        assert settings.data_dir == Path(".finance_tracker")
        assert settings.write_attempts == 3

    def test_display_defaults(self):
        """Test default currency and recent list size."""
        settings = DisplaySettings()
        assert settings.currency_symbol == "£"
        assert settings.recent_transactions_limit == 5

    def test_app_defaults(self):
        """Test default logging and validation settings."""
        settings = AppSettings()
        assert settings.log_level == "INFO"
        assert settings.default_category == "Other"


class TestEnvironment:
    """Tests for overriding settings from the environment."""

    def test_display_override(self, monkeypatch):
        """Test the currency symbol can be changed."""
        monkeypatch.setenv("FINANCE_TRACKER_DISPLAY_CURRENCY_SYMBOL", "$")
        assert get_settings().display.currency_symbol == "$"

    def test_log_level_is_normalised(self, monkeypatch):
        """Test log levels are case-insensitive."""
        monkeypatch.setenv("FINANCE_TRACKER_LOG_LEVEL", "debug")
        assert get_settings().app.log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValueError):
            AppSettings(log_level="verbose")

    def test_write_attempts_bounds(self):
        """Test write attempts must be between 1 and 10."""
        with pytest.raises(ValueError):
            StorageSettings(write_attempts=0)


class TestValidateAll:
    """Tests for validate_all_settings."""

    def test_all_valid(self):
        """Test every section validates with defaults."""
        results = validate_all_settings()
        assert results == {"storage": True, "display": True, "app": True}

    def test_reports_invalid_section(self, monkeypatch):
        """Test a bad value marks only its own section invalid."""
        monkeypatch.setenv("FINANCE_TRACKER_LOG_LEVEL", "loud")
        results = validate_all_settings()
        assert results["app"] is False
        assert "app_error" in results
        assert results["storage"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
