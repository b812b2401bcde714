"""Tests for the audit logger, sinks and logging configuration."""

import logging
from uuid import uuid4

import pytest
import structlog

from statement_import.audit import (
    AuditLogger,
    AuditSinkInterface,
    InMemoryAuditSink,
    configure_logging,
    create_correlation_id,
)
from statement_import.config import LoggingSettings
from statement_import.models import AuditEventBuilder, AuditEventType, AuditSeverity


class RejectingSink(AuditSinkInterface):
    def append_event(self, event):
        return False

    def get_events_by_correlation_id(self, correlation_id):
        return []


class BrokenSink(AuditSinkInterface):
    def append_event(self, event):
        raise ConnectionError("database down")

    def get_events_by_correlation_id(self, correlation_id):
        return []


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_without_sink(self):
        """Test that local-only logging succeeds."""
        event = AuditEventBuilder.rows_parsed(row_count=3, headers=["a"], correlation_id=uuid4())
        assert AuditLogger().log(event) is True

    def test_log_forwards_to_sink(self):
        """Test that events reach the sink."""
        sink = InMemoryAuditSink()
        event = AuditEventBuilder.rows_parsed(row_count=3, headers=["a"], correlation_id=uuid4())

        assert AuditLogger(sink).log(event) is True
        assert sink.events == [event]

    def test_sink_rejection_reported(self):
        """Test that a sink refusing the event gives False."""
        event = AuditEventBuilder.rows_parsed(row_count=3, headers=["a"], correlation_id=uuid4())
        assert AuditLogger(RejectingSink()).log(event) is False

    def test_sink_error_swallowed(self):
        """Test that sink exceptions do not propagate."""
        event = AuditEventBuilder.rows_parsed(row_count=3, headers=["a"], correlation_id=uuid4())
        assert AuditLogger(BrokenSink()).log(event) is False

    def test_log_error(self):
        """Test that log_error records a system error event."""
        sink = InMemoryAuditSink()
        cid = uuid4()

        AuditLogger(sink).log_error(
            error_type="ValueError",
            error_message="bad input",
            details={"stage": "parse"},
            correlation_id=cid,
        )

        event = sink.events[0]
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "bad input"
        assert event.details == {"stage": "parse"}
        assert event.correlation_id == cid


class TestInMemoryAuditSink:
    """Tests for InMemoryAuditSink."""

    def test_filter_by_correlation_id(self):
        """Test grouping events of one run."""
        sink = InMemoryAuditSink()
        first, second = uuid4(), uuid4()
        sink.append_event(AuditEventBuilder.rows_parsed(1, [], first))
        sink.append_event(AuditEventBuilder.rows_parsed(2, [], second))
        sink.append_event(AuditEventBuilder.import_completed(1, 0, 0, first))

        events = sink.get_events_by_correlation_id(first)

        assert [e.event_type for e in events] == [
            AuditEventType.ROWS_PARSED,
            AuditEventType.IMPORT_COMPLETED,
        ]

    def test_events_is_a_copy(self):
        """Test that callers cannot alter the stored trail."""
        sink = InMemoryAuditSink()
        sink.append_event(AuditEventBuilder.rows_parsed(1, [], uuid4()))

        sink.events.clear()

        assert len(sink.events) == 1

    def test_clear(self):
        """Test emptying the sink."""
        sink = InMemoryAuditSink()
        sink.append_event(AuditEventBuilder.rows_parsed(1, [], uuid4()))

        sink.clear()

        assert sink.events == []


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.mark.usefixtures("restore_logging")
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_root_level(self, monkeypatch):
        """Test that the root logger level follows the settings."""
        monkeypatch.delenv("DEBUG_MODE", raising=False)

        configure_logging(LoggingSettings(level="warning", json_output=False))

        assert logging.getLogger().level == logging.WARNING

    def test_debug_overrides_level(self):
        """Test that debug mode forces DEBUG."""
        configure_logging(LoggingSettings(level="ERROR"), debug=True)

        assert logging.getLogger().level == logging.DEBUG

    def test_debug_mode_from_environment(self, monkeypatch):
        """Test that DEBUG_MODE switches debug logging on."""
        monkeypatch.setenv("DEBUG_MODE", "true")

        configure_logging(LoggingSettings(level="ERROR"))

        assert logging.getLogger().level == logging.DEBUG

    def test_json_output(self, capsys):
        """Test that events are rendered as JSON lines."""
        configure_logging(LoggingSettings(level="INFO", json_output=True))

        structlog.get_logger("statement_import.test").info("csv_parsed", row_count=2)

        out = capsys.readouterr().out
        assert '"event": "csv_parsed"' in out
        assert '"row_count": 2' in out


def test_correlation_ids_are_unique():
    """Test that every run gets its own ID."""
    assert create_correlation_id() != create_correlation_id()
