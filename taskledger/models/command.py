"""
Command Outcome Models

Every command either succeeds with a response text or fails with one
of a small, fixed set of error kinds.

DESIGN DECISION: Inside the core, failures travel as exceptions (each
carrying its ErrorKind). At the dispatcher boundary they are turned into
a CommandResult, so the presentation layer only ever pattern-matches on
ErrorKind and never needs to catch anything for a bad command.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Why a command was rejected."""
    EMPTY_DESCRIPTION = "empty_description"      # required free text missing
    BAD_FORMAT = "bad_format"                    # present but malformed
    BAD_OPERATION = "bad_operation"              # well formed but out of range
    UNRECOGNIZED_COMMAND = "unrecognized_command"
    SESSION_NOT_RUNNING = "session_not_running"  # before start() or after bye


class CommandError(Exception):
    """Base exception for rejected commands."""
    kind: ErrorKind = ErrorKind.BAD_FORMAT

    def __init__(self, message: str, command: Optional[str] = None):
        self.command = command
        super().__init__(message)


class EmptyDescriptionError(CommandError):
    """A required free-text segment is missing."""
    kind = ErrorKind.EMPTY_DESCRIPTION


class BadFormatError(CommandError):
    """A segment is present but fails validation."""
    kind = ErrorKind.BAD_FORMAT

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        expected: Optional[str] = None,
    ):
        self.expected = expected
        if expected:
            message = f"{message}. Expected: {expected}"
        super().__init__(message, command)


class BadOperationError(CommandError):
    """The command is well formed but cannot be applied (e.g. index out of range)."""
    kind = ErrorKind.BAD_OPERATION


class UnrecognizedCommandError(CommandError):
    """The leading keyword is not a known command."""
    kind = ErrorKind.UNRECOGNIZED_COMMAND


class SessionNotRunningError(CommandError):
    """A command arrived before start() or after bye."""
    kind = ErrorKind.SESSION_NOT_RUNNING


class CommandResult(BaseModel):
    """
    Outcome of handling one command line.

    This is what the presentation layer renders.
    """

    success: bool = Field(
        ...,
        description="Was the command applied?"
    )
    message: str = Field(
        ...,
        description="Text to show the user (response or error description)"
    )
    command: Optional[str] = Field(
        default=None,
        description="Recognized command keyword, if any"
    )
    error_kind: Optional[ErrorKind] = Field(
        default=None,
        description="Why the command failed (None on success)"
    )
    session_ended: bool = Field(
        default=False,
        description="True once 'bye' has closed the session"
    )

    @classmethod
    def ok(
        cls,
        message: str,
        command: Optional[str] = None,
        session_ended: bool = False,
    ) -> "CommandResult":
        return cls(
            success=True,
            message=message,
            command=command,
            session_ended=session_ended,
        )

    @classmethod
    def failed(cls, error: CommandError) -> "CommandResult":
        return cls(
            success=False,
            message=str(error),
            command=error.command,
            error_kind=error.kind,
        )
