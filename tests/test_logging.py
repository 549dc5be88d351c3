"""Tests for structured store event logging."""

import logging

import pytest

from finance_tracker.events import StoreEventLogger, configure_logging
from finance_tracker.events.logger import LOGGER_NAME


@pytest.fixture
def package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    yield logger
    logger.setLevel(logging.NOTSET)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_keeps_application_handlers(self, package_logger):
        """Test existing root handlers are left in place."""
        handler = logging.NullHandler()
        root = logging.getLogger()
        root.addHandler(handler)
        try:
            configure_logging("DEBUG", json_logs=False)
            assert handler in root.handlers
        finally:
            root.removeHandler(handler)

    def test_sets_package_level(self, package_logger):
        """Test the configured level applies to the package logger."""
        configure_logging("warning")
        assert package_logger.level == logging.WARNING

    def test_events_reach_stdlib_logging(self, package_logger, caplog):
        """Test store events are emitted through the package logger."""
        configure_logging("INFO")
        StoreEventLogger().log_record_added("savings", "42")
        assert "record_added" in caplog.text
        assert caplog.records[-1].name == LOGGER_NAME

    def test_level_filters_events(self, package_logger, caplog):
        """Test events below the configured level are dropped."""
        configure_logging("ERROR")
        StoreEventLogger().log_record_added("savings", "42")
        assert "record_added" not in caplog.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
