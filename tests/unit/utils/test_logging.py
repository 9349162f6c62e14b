"""Tests for logging utility."""

import logging
from io import StringIO


class TestLoggerConfiguration:
    """Test that logger configures correctly from settings."""

    def test_configure_logging_creates_logger(self):
        """configure_logging should return a configured logger."""
        from carematch.utils.logging import configure_logging

        logger = configure_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "carematch"

    def test_configure_logging_respects_level(self):
        """Logger should respect the configured log level."""
        from carematch.utils.logging import configure_logging

        logger = configure_logging(level="DEBUG")
        assert logger.level == logging.DEBUG

        logger = configure_logging(level="WARNING")
        assert logger.level == logging.WARNING

    def test_configure_logging_default_level_is_info(self):
        """Default log level should be INFO."""
        from carematch.utils.logging import configure_logging

        logger = configure_logging()
        assert logger.level == logging.INFO

    def test_configure_logging_installs_single_handler(self):
        """Repeated configuration should not stack handlers."""
        from carematch.utils.logging import configure_logging

        configure_logging()
        logger = configure_logging(level="ERROR")

        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.ERROR
        assert logger.propagate is False


class TestLogOutput:
    """Test that log output format is correct."""

    def test_log_message_includes_level_and_name(self):
        """Log messages should include the level and logger name."""
        from carematch.utils.logging import configure_logging, get_logger

        logger = configure_logging(level="INFO")

        buffer = StringIO()
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(logger.handlers[0].formatter)
        logger.addHandler(handler)

        get_logger("matching.ranking").info("Scored 3 caregivers")

        output = buffer.getvalue()
        assert "INFO" in output
        assert "carematch.matching.ranking" in output
        assert "Scored 3 caregivers" in output


class TestGetLogger:
    """Test the get_logger convenience function."""

    def test_get_logger_returns_child_logger(self):
        """get_logger should return a child of the main logger."""
        from carematch.utils.logging import configure_logging, get_logger

        configure_logging()

        logger = get_logger("matching.service")
        assert logger.name == "carematch.matching.service"

    def test_get_logger_inherits_level(self):
        """Child logger should inherit parent's level."""
        from carematch.utils.logging import configure_logging, get_logger

        configure_logging(level="DEBUG")

        logger = get_logger("test_module")
        assert logger.getEffectiveLevel() == logging.DEBUG


class TestResetLogging:
    """Test resetting logging state."""

    def test_reset_logging_clears_handlers(self):
        """reset_logging should remove handlers and restore propagation."""
        from carematch.utils.logging import configure_logging, reset_logging

        logger = configure_logging()
        reset_logging()

        assert logger.handlers == []
        assert logger.propagate is True


class TestLogStream:
    """Test where log records are written."""

    def test_records_go_to_the_given_stream(self):
        """configure_logging should write to the stream it is given."""
        from carematch.utils.logging import configure_logging, get_logger

        buffer = StringIO()
        configure_logging(level="INFO", stream=buffer)

        get_logger("matching.ranking").info("Scored 3 caregivers")

        assert "Scored 3 caregivers" in buffer.getvalue()

    def test_new_stream_replaces_handler(self):
        """Switching streams should replace the handler, not add one."""
        from carematch.utils.logging import configure_logging, get_logger

        first, second = StringIO(), StringIO()
        configure_logging(stream=first)
        logger = configure_logging(stream=second)

        get_logger("matching.service").warning("moved")

        assert len(logger.handlers) == 1
        assert first.getvalue() == ""
        assert "moved" in second.getvalue()

    def test_numeric_and_unknown_levels(self):
        """Numeric levels pass through and unknown names fall back to INFO."""
        from carematch.utils.logging import configure_logging

        assert configure_logging(level=logging.ERROR).level == logging.ERROR
        assert configure_logging(level="chatty").level == logging.INFO
