"""
Audit Logger

DESIGN DECISION: Every command and every store mutation is logged.
This provides:
1. Complete traceability of a session
2. Debugging capability when a command is rejected
3. Visibility into records skipped while loading

The audit logger:
- Is synchronous, like the rest of the core
- Never raises: a logging failure must not fail a command
- Stamps every event with the session's correlation ID
"""

import logging
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

import structlog

from taskledger.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    One instance per session; stores and the dispatcher share it.
    Events go to the structured log only; nothing is kept in memory.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        """
        Initialize audit logger.

        Args:
            correlation_id: ID stamped on every event.
                            If None, a fresh one is created.
        """
        self.correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("taskledger.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event locally."""
        if event.correlation_id is None:
            event.correlation_id = self.correlation_id

        try:
            log_dict = event.to_log_dict()
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            structlog.get_logger("taskledger.audit").error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )

    def _record(self, build: Callable[..., AuditEvent], *args: Any, **kwargs: Any) -> None:
        """Build an event from caller data and log it; a bad event is reported, not raised."""
        try:
            event = build(*args, **kwargs)
        except ValueError as e:
            self._logger.error(
                "audit_event_invalid",
                builder=build.__name__,
                error=str(e),
            )
            return
        self.log(event)

    def log_session_started(self, task_count: int, expense_count: int) -> None:
        """Log session start."""
        self._record(AuditEventBuilder.session_started, task_count, expense_count)

    def log_session_ended(self) -> None:
        """Log session end."""
        self._record(AuditEventBuilder.session_ended)

    def log_command_received(self, command: str) -> None:
        self._record(AuditEventBuilder.command_received, command)

    def log_command_rejected(
        self,
        command: Optional[str],
        error_kind: str,
        error_message: str,
    ) -> None:
        """Log a rejected command."""
        self._record(
            AuditEventBuilder.command_rejected,
            command=command,
            error_kind=error_kind,
            error_message=error_message,
        )

    def log_store_loaded(self, store: str, path: str, count: int, skipped: int) -> None:
        self._record(AuditEventBuilder.store_loaded, store, path, count, skipped)

    def log_record_skipped(self, store: str, line_number: int, reason: str) -> None:
        self._record(AuditEventBuilder.record_skipped, store, line_number, reason)

    def log_entity_added(self, store: str, index: int, record: str) -> None:
        self._record(AuditEventBuilder.entity_added, store, index, record)

    def log_entity_removed(self, store: str, index: int, record: str) -> None:
        self._record(AuditEventBuilder.entity_removed, store, index, record)

    def log_entity_completed(self, store: str, index: int) -> None:
        self._record(AuditEventBuilder.entity_completed, store, index)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this once per session and pass it to the AuditLogger.
    """
    return uuid4()


def set_log_level(level: str) -> None:
    """Set the minimum level for every taskledger logger."""
    logging.getLogger("taskledger").setLevel(level.upper())
