"""
Main Orchestrator for taskledger

This module ties together the decoder, the two record stores and the
audit trail, and defines the end-to-end flow for one command:

    raw line -> keyword lookup -> decode -> store operation -> CommandResult

DESIGN DECISION: The dispatcher enforces the boundaries:
- Nothing is decoded after 'bye'; the session is terminal
- Every command error becomes a CommandResult, never an exception
- Storage failures are NOT command errors and still propagate
- The host process is never exited from here; 'bye' only returns
  a result with session_ended set
"""

from enum import Enum
from typing import Callable, Optional

from taskledger.audit import AuditLogger, set_log_level
from taskledger.config import StorageSettings, get_settings
from taskledger.decoding import (
    decode_persisted_expense,
    decode_persisted_task,
    parse_date,
    parse_expense_command,
    parse_find_query,
    parse_index_command,
    parse_task_command,
)
from taskledger.models.command import (
    CommandError,
    CommandResult,
    SessionNotRunningError,
    UnrecognizedCommandError,
)
from taskledger.models.expense import Expense
from taskledger.models.task import Task
from taskledger.services.storage import (
    FlatFileChannel,
    RecordChannel,
    RecordStore,
    StorageError,
)


LOGO = (
    " ____        _\n"
    "|  _ \\ _   _| | _____\n"
    "| | | | | | | |/ / _ \\\n"
    "| |_| | |_| |   <  __/\n"
    "|____/ \\__,_|_|\\_\\___|\n"
)

FAREWELL = "Bye. Hope to see you again soon!"


class SessionState(str, Enum):
    """Dispatcher lifecycle."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    TERMINATED = "terminated"  # reached only via 'bye'; irreversible


ChannelFactory = Callable[[StorageSettings], tuple[RecordChannel, RecordChannel]]


def flat_file_channels(settings: StorageSettings) -> tuple[RecordChannel, RecordChannel]:
    """Open the task and expense files named by the storage settings."""
    task_channel = FlatFileChannel(settings.task_path)
    try:
        expense_channel = FlatFileChannel(settings.expense_path)
    except StorageError:
        task_channel.close()
        raise
    return task_channel, expense_channel


class Dispatcher:
    """
    Session-level command router.

    Owns one store of tasks and one store of expenses. The presentation
    layer calls start() once, then handle() per input line.

    Flow:
    1. Match the leading keyword (case-insensitive) against the command set
    2. Decode the rest of the line
    3. Apply the matching store operation
    4. Return a CommandResult
    """

    def __init__(
        self,
        storage_settings: Optional[StorageSettings] = None,
        channel_factory: Optional[ChannelFactory] = None,
        audit_logger: Optional[AuditLogger] = None,
        greeting_name: str = "Duke",
    ):
        self._storage_settings = storage_settings
        self._channel_factory = channel_factory or flat_file_channels
        self._audit_logger = audit_logger or AuditLogger()
        self._greeting_name = greeting_name
        self._state = SessionState.NOT_STARTED
        self._tasks: Optional[RecordStore[Task]] = None
        self._expenses: Optional[RecordStore[Expense]] = None

        self._handlers: dict[str, Callable[[str], str]] = {
            "list": self._list,
            "done": self._done,
            "delete": self._delete,
            "todo": self._add_task,
            "deadline": self._add_task,
            "event": self._add_task,
            "date": self._date,
            "find": self._find,
            "expense": self._add_expense,
            "showexpense": self._show_expenses,
            "delexpense": self._delete_expense,
        }

    # ---- lifecycle ----

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def tasks(self) -> RecordStore[Task]:
        if self._tasks is None:
            raise SessionNotRunningError("The session has not been started")
        return self._tasks

    @property
    def expenses(self) -> RecordStore[Expense]:
        if self._expenses is None:
            raise SessionNotRunningError("The session has not been started")
        return self._expenses

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def start(self) -> str:
        """
        Open both stores (loading persisted records) and greet the user.

        Raises:
            SessionNotRunningError: If the session was already started
            StorageError: If a backing file cannot be opened (fatal)
        """
        if self._state != SessionState.NOT_STARTED:
            raise SessionNotRunningError(
                f"Cannot start a session that is {self._state.value}"
            )

        settings = self._storage_settings or get_settings().storage
        task_channel, expense_channel = self._channel_factory(settings)
        try:
            tasks = RecordStore(
                task_channel, decode_persisted_task, "task", self._audit_logger
            )
            expenses = RecordStore(
                expense_channel, decode_persisted_expense, "expense", self._audit_logger
            )
        except StorageError:
            task_channel.close()
            expense_channel.close()
            raise
        self._tasks, self._expenses = tasks, expenses
        self._state = SessionState.RUNNING
        self._audit_logger.log_session_started(
            task_count=self._tasks.num_stored(),
            expense_count=self._expenses.num_stored(),
        )

        return f"Hello from\n{LOGO}\nI'm {self._greeting_name}. How can I help you?"

    def close(self) -> None:
        """Close both stores without the farewell. Safe to call more than once."""
        for store in (self._tasks, self._expenses):
            if store is not None:
                store.close()
        if self._state != SessionState.TERMINATED:
            self._state = SessionState.TERMINATED
            self._audit_logger.log_session_ended()

    # ---- command handling ----

    def handle(self, line: str) -> CommandResult:
        """
        Handle one command line.

        Returns:
            CommandResult with the response text, or with the error kind
            and message if the command was rejected.

        Raises:
            StorageError: Only for failures of the backing files
        """
        keyword = line.split()[0] if line.split() else ""
        command = keyword.lower() or None

        try:
            if self._state != SessionState.RUNNING:
                raise SessionNotRunningError(
                    "The session is not running; no more commands are accepted",
                    command=command,
                )
            self._audit_logger.log_command_received(command or "")

            if command == "bye":
                return self._bye()

            handler = self._handlers.get(command or "")
            if handler is None:
                raise UnrecognizedCommandError(
                    f"Sorry, I don't know what '{keyword}' means",
                    command=command,
                )
            return CommandResult.ok(handler(line), command=command)

        except CommandError as e:
            if e.command is None:
                e.command = command
            self._audit_logger.log_command_rejected(
                command=e.command,
                error_kind=e.kind.value,
                error_message=str(e),
            )
            return CommandResult.failed(e)

    def _bye(self) -> CommandResult:
        self.close()
        return CommandResult.ok(FAREWELL, command="bye", session_ended=True)

    def _list(self, line: str) -> str:
        return self.tasks.show_list()

    def _done(self, line: str) -> str:
        return self.tasks.mark_done(parse_index_command(line, self.tasks.num_stored()))

    def _delete(self, line: str) -> str:
        return self.tasks.delete(parse_index_command(line, self.tasks.num_stored()))

    def _add_task(self, line: str) -> str:
        return self.tasks.add(parse_task_command(line))

    def _date(self, line: str) -> str:
        return self.tasks.show_by_date(parse_date(line))

    def _find(self, line: str) -> str:
        return self.tasks.find(parse_find_query(line))

    def _add_expense(self, line: str) -> str:
        return self.expenses.add(parse_expense_command(line))

    def _show_expenses(self, line: str) -> str:
        return self.expenses.show_list()

    def _delete_expense(self, line: str) -> str:
        return self.expenses.delete(parse_index_command(line, self.expenses.num_stored()))


def create_dispatcher(
    storage_settings: Optional[StorageSettings] = None,
    channel_factory: Optional[ChannelFactory] = None,
) -> Dispatcher:
    """
    Factory function to create a dispatcher from application settings.

    Args:
        storage_settings: Where the data files live.
                          Defaults to the configured StorageSettings.
        channel_factory: How to open the two channels.
                         Defaults to flat files.

    Returns:
        A dispatcher that still needs start()
    """
    settings = get_settings()
    app_settings = settings.app
    set_log_level("DEBUG" if app_settings.debug_mode else app_settings.log_level)

    return Dispatcher(
        storage_settings=storage_settings or settings.storage,
        channel_factory=channel_factory,
        greeting_name=app_settings.greeting_name,
    )
