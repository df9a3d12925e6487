"""
Data Models Package

This package contains all Pydantic models used in taskledger.
Everything a store holds or a command returns conforms to these schemas.
"""

from taskledger.models.task import (
    BaseTask,
    Deadline,
    Event,
    Task,
    TaskKind,
    Todo,
    format_date,
    make_task,
)
from taskledger.models.expense import Expense
from taskledger.models.command import (
    BadFormatError,
    BadOperationError,
    CommandError,
    CommandResult,
    EmptyDescriptionError,
    ErrorKind,
    SessionNotRunningError,
    UnrecognizedCommandError,
)
from taskledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Task models
    "BaseTask",
    "Deadline",
    "Event",
    "Task",
    "TaskKind",
    "Todo",
    "format_date",
    "make_task",
    # Expense model
    "Expense",
    # Command outcomes
    "BadFormatError",
    "BadOperationError",
    "CommandError",
    "CommandResult",
    "EmptyDescriptionError",
    "ErrorKind",
    "SessionNotRunningError",
    "UnrecognizedCommandError",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
