"""Unit tests for the logging helpers."""

import logging

from rights_engine.utils.logging import ExtraFieldsFormatter, get_logger


def _record(**extra):
    record = logging.LogRecord("rights_engine.test", logging.INFO, __file__, 10, "Harvested 3 benefits", (), None)
    record.__dict__.update(extra)
    return record


class TestExtraFieldsFormatter:

    def test_extra_fields_are_appended(self):
        """Test that extra fields are appended as key=value pairs."""
        formatter = ExtraFieldsFormatter(fmt="%(message)s")

        line = formatter.format(_record(document_id="policy-1", benefits=3))

        assert line == "Harvested 3 benefits | document_id=policy-1 benefits=3"

    def test_plain_record_is_unchanged(self):
        """Test that a record without extra fields is formatted as is."""
        formatter = ExtraFieldsFormatter(fmt="%(levelname)s %(message)s")

        assert formatter.format(_record()) == "INFO Harvested 3 benefits"


class TestGetLogger:

    def test_single_handler_per_logger(self):
        """Test that repeated calls reuse the logger and its single handler."""
        first = get_logger("rights_engine.tests.logging", level="debug")
        second = get_logger("rights_engine.tests.logging")

        assert first is second
        assert len(second.handlers) == 1
        assert isinstance(second.handlers[0].formatter, ExtraFieldsFormatter)
        assert second.level == logging.INFO
