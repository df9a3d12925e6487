"""
Task Models for taskledger

A task is one of three closed variants:
1. Todo     - a description, nothing else
2. Deadline - a description that must be done by a date
3. Event    - a description that happens at a date

DESIGN DECISION: The variants form a pydantic discriminated union keyed on
a one-letter tag (T / D / E). The same tag is the first field of the
persisted record, so the tag that decodes a record is the tag that
builds the model.
"""

from datetime import date
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


DONE_GLYPH = "✓"
NOT_DONE_GLYPH = "✗"


class TaskKind(str, Enum):
    """Task variant tags, as written in the persisted record."""
    TODO = "T"
    DEADLINE = "D"
    EVENT = "E"


class BaseTask(BaseModel):
    """
    Fields shared by every task variant.

    Tasks are mutable only through mark_done(); everything else is
    fixed at construction.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(
        ...,
        min_length=1,
        description="What the task is about"
    )
    done: bool = Field(
        default=False,
        description="Has the task been completed?"
    )

    @property
    def occurs_on(self) -> Optional[date]:
        return None

    @property
    def search_text(self) -> str:
        return self.description

    def mark_done(self) -> None:
        self.done = True

    def _status_prefix(self, kind: "TaskKind") -> str:
        glyph = DONE_GLYPH if self.done else NOT_DONE_GLYPH
        return f"[{kind.value}][{glyph}]"

    def _record_head(self, kind: "TaskKind") -> str:
        return f"{kind.value},{str(self.done).lower()},{self.description}"


class Todo(BaseTask):
    """A task with no date."""
    kind: Literal[TaskKind.TODO] = TaskKind.TODO

    def describe(self) -> str:
        return f"{self._status_prefix(self.kind)} {self.description}"

    def to_record(self) -> str:
        return self._record_head(self.kind)


class Deadline(BaseTask):
    """A task that must be finished by a date."""
    kind: Literal[TaskKind.DEADLINE] = TaskKind.DEADLINE
    by: date = Field(
        ...,
        description="Date the task is due"
    )

    @property
    def occurs_on(self) -> date:
        return self.by

    def describe(self) -> str:
        return (
            f"{self._status_prefix(self.kind)} {self.description} "
            f"(by: {format_date(self.by)})"
        )

    def to_record(self) -> str:
        return f"{self._record_head(self.kind)},{self.by.isoformat()}"


class Event(BaseTask):
    """A task that takes place at a date."""
    kind: Literal[TaskKind.EVENT] = TaskKind.EVENT
    at: date = Field(
        ...,
        description="Date the event takes place"
    )

    @property
    def occurs_on(self) -> date:
        return self.at

    def describe(self) -> str:
        return (
            f"{self._status_prefix(self.kind)} {self.description} "
            f"(at: {format_date(self.at)})"
        )

    def to_record(self) -> str:
        return f"{self._record_head(self.kind)},{self.at.isoformat()}"


Task = Annotated[Union[Todo, Deadline, Event], Field(discriminator="kind")]

_TASK_ADAPTER: TypeAdapter = TypeAdapter(Task)

# Field name that carries the date for each dated variant
_DATE_FIELD: dict[TaskKind, Optional[str]] = {
    TaskKind.TODO: None,
    TaskKind.DEADLINE: "by",
    TaskKind.EVENT: "at",
}


def make_task(
    kind: TaskKind,
    description: str,
    occurs_on: Optional[date] = None,
    done: bool = False,
) -> Task:
    """
    Build a task of the given kind.

    Every TaskKind has an entry in _DATE_FIELD, so this never returns
    an unset value. Invalid field values surface as pydantic's
    ValidationError (a ValueError).

    Args:
        kind: Which variant to build
        description: Task description
        occurs_on: Date for deadlines/events; ignored for todos
        done: Completion flag
    """
    kind = TaskKind(kind)
    data: dict = {"kind": kind, "description": description, "done": done}
    date_field = _DATE_FIELD[kind]
    if date_field is not None:
        data[date_field] = occurs_on
    return _TASK_ADAPTER.validate_python(data)


def format_date(value: date) -> str:
    """Render a date the way responses show it, e.g. 'Mar 1 2024'."""
    return f"{value:%b} {value.day} {value.year}"
