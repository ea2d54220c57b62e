"""Unit tests for diagnostic reporters."""

import logging
from unittest.mock import Mock

import pytest

from tagcourier.tracking.diagnostics import (
    CallbackReporter,
    LoggingReporter,
    as_reporter,
)


class TestLoggingReporter:
    """Test cases for LoggingReporter."""

    def test_warns_outside_production(self, caplog):
        """Test failures are logged at WARNING in non-production environments."""
        reporter = LoggingReporter(environment="development")

        with caplog.at_level(logging.DEBUG, logger="tagcourier.tracking.diagnostics"):
            reporter.report("[analytics]", ValueError("bad payload"))

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "[analytics] ValueError: bad payload" in record.getMessage()

    def test_quiet_in_production(self, caplog):
        """Test failures are logged at DEBUG in production."""
        reporter = LoggingReporter(environment="production")

        with caplog.at_level(logging.DEBUG, logger="tagcourier.tracking.diagnostics"):
            reporter.report("[analytics]", ValueError("bad payload"))

        assert caplog.records[-1].levelno == logging.DEBUG
        assert reporter.is_production

    def test_history_is_bounded(self):
        """Test only the most recent entries are kept."""
        reporter = LoggingReporter(environment="test", max_history=3)

        for i in range(5):
            reporter.report("[analytics]", RuntimeError(f"error {i}"))

        assert [entry.message for entry in reporter.history] == ["error 2", "error 3", "error 4"]

    def test_statistics(self):
        """Test failure counts per tag and error type."""
        reporter = LoggingReporter(environment="test")
        reporter.report("[analytics]", ValueError("a"))
        reporter.report("[analytics]", ValueError("b"))
        reporter.report("[analytics]", TimeoutError("c"))

        stats = reporter.get_statistics()

        assert stats["total_failures"] == 3
        assert stats["failure_counts"] == {
            "[analytics]:ValueError": 2,
            "[analytics]:TimeoutError": 1
        }
        assert stats["recent"][0]["error_type"] == "ValueError"

        reporter.clear()
        assert reporter.get_statistics()["total_failures"] == 0

    def test_report_never_raises(self):
        """Test a broken logger does not escape the reporter."""
        broken_log = Mock()
        broken_log.log.side_effect = RuntimeError("handler failed")
        reporter = LoggingReporter(environment="test", log=broken_log)

        reporter.report("[analytics]", ValueError("x"))

        assert len(reporter.history) == 1


class TestCallbackReporter:
    """Test cases for CallbackReporter and reporter coercion."""

    def test_forwards_tag_and_error(self):
        """Test callback receives the pair unchanged."""
        callback = Mock()
        error = ValueError("x")

        CallbackReporter(callback).report("[analytics]", error)

        callback.assert_called_once_with("[analytics]", error)

    def test_callback_failure_contained(self):
        """Test a raising callback is swallowed."""
        reporter = CallbackReporter(Mock(side_effect=RuntimeError("boom")))

        reporter.report("[analytics]", ValueError("x"))

    def test_as_reporter(self):
        """Test coercion of supported reporter shapes."""
        logging_reporter = LoggingReporter()

        assert as_reporter(logging_reporter) is logging_reporter
        assert isinstance(as_reporter(lambda tag, error: None), CallbackReporter)
        assert isinstance(as_reporter(None), LoggingReporter)

        with pytest.raises(TypeError):
            as_reporter(42)
