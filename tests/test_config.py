"""
Tests for configuration and the audit logger.
"""

import logging
from pathlib import Path
from uuid import uuid4

import pytest

from taskledger.audit import AuditLogger, set_log_level
from taskledger.config import AppSettings, StorageSettings, get_settings, validate_all_settings
from taskledger.models.audit import (
    DESCRIPTION_MAX_LENGTH,
    AuditEvent,
    AuditEventType,
    AuditSeverity,
)


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_defaults(self, monkeypatch):
        """Test the default file layout."""
        monkeypatch.delenv("TASKLEDGER_STORAGE_DATA_DIR", raising=False)
        settings = StorageSettings(_env_file=None)
        assert settings.task_path == Path("data") / "tasklist.txt"
        assert settings.expense_path == Path("data") / "expenselist.txt"

    def test_environment_override(self, monkeypatch, tmp_path):
        """Test that the data directory comes from the environment."""
        monkeypatch.setenv("TASKLEDGER_STORAGE_DATA_DIR", str(tmp_path))
        settings = StorageSettings(_env_file=None)
        assert settings.task_path == tmp_path / "tasklist.txt"

    def test_rejects_nested_file_name(self):
        """Test that file names cannot escape the data directory."""
        with pytest.raises(ValueError):
            StorageSettings(task_file="../tasklist.txt", _env_file=None)


class TestAppSettings:
    """Tests for AppSettings."""

    def test_log_level_is_normalized(self):
        """Test that log levels are upper-cased."""
        assert AppSettings(log_level="debug", _env_file=None).log_level == "DEBUG"

    def test_rejects_unknown_log_level(self):
        """Test that unknown levels are rejected."""
        with pytest.raises(ValueError):
            AppSettings(log_level="chatty", _env_file=None)

    def test_validate_all_settings(self, monkeypatch):
        """Test the startup check reports each group."""
        monkeypatch.setenv("TASKLEDGER_LOG_LEVEL", "chatty")
        get_settings.cache_clear()
        try:
            results = validate_all_settings()
        finally:
            get_settings.cache_clear()
        assert results["storage"] is True
        assert results["app"] is False
        assert "app_error" in results


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_stamps_correlation_id(self, audit_logger):
        """Test that every event carries the session's correlation ID."""
        correlation_id = audit_logger.correlation_id
        audit_logger.log_session_started(task_count=1, expense_count=0)
        audit_logger.log_command_rejected("done", "bad_operation", "No task #3")

        events = audit_logger.events
        assert [e.correlation_id for e in events] == [correlation_id, correlation_id]
        assert events[1].event_type == AuditEventType.COMMAND_REJECTED
        assert events[1].severity == AuditSeverity.WARNING

    def test_uses_given_correlation_id(self):
        """Test that a caller-supplied correlation ID is kept."""
        correlation_id = uuid4()
        assert AuditLogger(correlation_id=correlation_id).correlation_id == correlation_id

    def test_keeps_no_event_history(self):
        """Test that events are only logged, never accumulated."""
        audit = AuditLogger()
        for _ in range(3):
            audit.log_command_received("list")
        assert not hasattr(audit, "events")

    def test_long_command_is_shortened(self, audit_logger):
        """Test that a huge command word still produces a valid event."""
        audit_logger.log_command_received("x" * 600)
        audit_logger.log_command_rejected("x" * 600, "unrecognized_command", "unknown")

        assert len(audit_logger.events) == 2
        for event in audit_logger.events:
            assert len(event.description) <= DESCRIPTION_MAX_LENGTH
            assert event.description.endswith("...")

    def test_invalid_event_is_not_raised(self, audit_logger):
        """Test that an event that fails validation is dropped, not raised."""
        def oversized():
            return AuditEvent(
                event_type=AuditEventType.COMMAND_RECEIVED,
                description="x" * (DESCRIPTION_MAX_LENGTH + 1),
            )

        audit_logger._record(oversized)
        assert audit_logger.events == []

    def test_set_log_level(self):
        """Test that the package logger level can be changed."""
        set_log_level("warning")
        assert logging.getLogger("taskledger").level == logging.WARNING
        set_log_level("INFO")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
