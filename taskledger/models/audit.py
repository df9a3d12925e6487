"""
Audit Models for taskledger

Every command and every store mutation produces an audit event.
This provides:
1. A trace of what each session did
2. Debugging information when a command is rejected
3. A record of which persisted lines were skipped on load

DESIGN DECISION: Audit events are only written to the structured log.
They are never persisted next to the task/expense records.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


DESCRIPTION_MAX_LENGTH = 500

# Room left in a description for the user's command word
COMMAND_PREVIEW_LENGTH = 80


def _preview(text: str, limit: int = COMMAND_PREVIEW_LENGTH) -> str:
    """Shorten user-supplied text for a description line."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Session lifecycle
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"

    # Commands
    COMMAND_RECEIVED = "command_received"
    COMMAND_REJECTED = "command_rejected"

    # Store mutations
    STORE_LOADED = "store_loaded"
    RECORD_SKIPPED = "record_skipped"
    ENTITY_ADDED = "entity_added"
    ENTITY_REMOVED = "entity_removed"
    ENTITY_COMPLETED = "entity_completed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Which store the event concerns ('task', 'expense'), if any
    store: Optional[str] = None

    # Ties together all events of one session
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by every event of one session"
    )

    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_kind: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "store": self.store,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_kind": self.error_kind,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.command_received("todo", correlation_id)
        event = AuditEventBuilder.entity_added("task", 3, record, correlation_id)
    """

    @staticmethod
    def session_started(
        task_count: int,
        expense_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_STARTED,
            correlation_id=correlation_id,
            description="Session started",
            details={
                "task_count": task_count,
                "expense_count": expense_count,
            },
        )

    @staticmethod
    def session_ended(correlation_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_ENDED,
            correlation_id=correlation_id,
            description="Session ended; stores closed",
        )

    @staticmethod
    def command_received(
        command: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_RECEIVED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Command received: {_preview(command)}",
            details={"command": command},
        )

    @staticmethod
    def command_rejected(
        command: Optional[str],
        error_kind: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Command rejected: {_preview(command or '<unknown>')}",
            details={"command": command, "message": error_message},
            error_kind=error_kind,
        )

    @staticmethod
    def store_loaded(
        store: str,
        path: str,
        count: int,
        skipped: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOADED,
            store=store,
            description=f"Loaded {count} {store} records",
            details={
                "path": path,
                "count": count,
                "skipped": skipped,
            },
        )

    @staticmethod
    def record_skipped(
        store: str,
        line_number: int,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SKIPPED,
            severity=AuditSeverity.WARNING,
            store=store,
            description=f"Skipped malformed {store} record on line {line_number}",
            details={
                "line_number": line_number,
                "reason": reason,
            },
        )

    @staticmethod
    def entity_added(
        store: str,
        index: int,
        record: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_ADDED,
            store=store,
            correlation_id=correlation_id,
            description=f"Added {store} #{index}",
            details={"index": index, "record": record},
        )

    @staticmethod
    def entity_removed(
        store: str,
        index: int,
        record: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_REMOVED,
            store=store,
            correlation_id=correlation_id,
            description=f"Removed {store} #{index}",
            details={"index": index, "record": record},
        )

    @staticmethod
    def entity_completed(
        store: str,
        index: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_COMPLETED,
            store=store,
            correlation_id=correlation_id,
            description=f"Marked {store} #{index} as done",
            details={"index": index},
        )
