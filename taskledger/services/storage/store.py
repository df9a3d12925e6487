"""
Record Store

DESIGN DECISION: One generic store serves both tasks and expenses.
The store only relies on the Record capability (to_record, describe,
search_text, occurs_on) plus a parser that turns a persisted line back
into an entity, so adding a new collection never means copying a class.

GUARANTEES:
- Items keep insertion order; users address them 1-based
- Every index is checked before anything changes
- After every mutating call, memory and the channel agree:
  adds append one line, deletions and completions rewrite everything
"""

from datetime import date
from typing import Callable, Generic, Iterable, Optional, TypeVar

from taskledger.audit import AuditLogger
from taskledger.models.command import BadOperationError, CommandError
from taskledger.models.task import format_date
from taskledger.services.storage.interface import (
    CompletableRecord,
    Record,
    RecordChannel,
    StoreClosedError,
)


T = TypeVar("T", bound=Record)


class RecordStore(Generic[T]):
    """
    Ordered, file-backed collection of records.

    Constructed once per session; loads whatever the channel already
    holds, and must be closed exactly once at shutdown.
    """

    def __init__(
        self,
        channel: RecordChannel,
        parse: Callable[[str], T],
        label: str,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the store and load persisted records.

        Args:
            channel: Where records are persisted
            parse: Turns one persisted line into an entity;
                   raises CommandError (or ValueError) on malformed lines
            label: Singular noun used in responses ('task', 'expense')
            audit_logger: Optional audit trail
        """
        self._channel = channel
        self._parse = parse
        self._label = label
        self._audit_logger = audit_logger
        self._items: list[T] = []
        self._closed = False
        self._load()

    def _load(self) -> None:
        skipped = 0
        for line_number, line in enumerate(self._channel.read_lines(), start=1):
            try:
                self._items.append(self._parse(line))
            except (CommandError, ValueError) as e:
                # Skip malformed rows; they disappear on the next rewrite
                skipped += 1
                if self._audit_logger:
                    self._audit_logger.log_record_skipped(self._label, line_number, str(e))

        if self._audit_logger:
            self._audit_logger.log_store_loaded(
                store=self._label,
                path=self._channel.location,
                count=len(self._items),
                skipped=skipped,
            )

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedError(f"The {self._label} store is closed")

    def _check_index(self, index: int) -> None:
        if index < 1 or index > len(self._items):
            raise BadOperationError(
                f"No {self._label} #{index}; there are {len(self._items)} {self._label}(s)"
            )

    def _persist_all(self) -> None:
        self._channel.rewrite(item.to_record() for item in self._items)

    def _count_line(self) -> str:
        return f"Now you have {len(self._items)} {self._label}(s) in the list."

    def _render(self, header: str, empty: str, indexed: Iterable[tuple[int, T]]) -> str:
        lines = [f"{index}.{item.describe()}" for index, item in indexed]
        if not lines:
            return empty
        return "\n".join([header, *lines])

    # ---- queries ----

    @property
    def label(self) -> str:
        return self._label

    @property
    def items(self) -> tuple[T, ...]:
        return tuple(self._items)

    @property
    def closed(self) -> bool:
        return self._closed

    def num_stored(self) -> int:
        return len(self._items)

    def get(self, index: int) -> T:
        """Return the item at a 1-based index."""
        self._check_index(index)
        return self._items[index - 1]

    def show_list(self) -> str:
        """Render every item, 1-based."""
        self._ensure_open()
        return self._render(
            header=f"Here are the {self._label}s in your list:",
            empty=f"There are no {self._label}s in your list.",
            indexed=enumerate(self._items, start=1),
        )

    def find(self, substring: str) -> str:
        """
        Render items whose text contains substring (case-sensitive).

        Matches keep their original order and original indices.
        """
        self._ensure_open()
        return self._render(
            header=f"Here are the matching {self._label}s in your list:",
            empty=f"No {self._label}s match '{substring}'.",
            indexed=self.matching(substring),
        )

    def matching(self, substring: str) -> list[tuple[int, T]]:
        return [
            (index, item)
            for index, item in enumerate(self._items, start=1)
            if substring in item.search_text
        ]

    def show_by_date(self, on: date) -> str:
        """Render date-bearing items whose date equals on."""
        self._ensure_open()
        return self._render(
            header=f"Here are the {self._label}s on {format_date(on)}:",
            empty=f"There are no {self._label}s on {format_date(on)}.",
            indexed=self.on_date(on),
        )

    def on_date(self, on: date) -> list[tuple[int, T]]:
        return [
            (index, item)
            for index, item in enumerate(self._items, start=1)
            if item.occurs_on is not None and item.occurs_on == on
        ]

    # ---- mutations ----

    def add(self, entity: T) -> str:
        """Append an entity, persist it, and acknowledge."""
        self._ensure_open()
        record = entity.to_record()
        self._items.append(entity)
        self._channel.append_line(record)

        if self._audit_logger:
            self._audit_logger.log_entity_added(self._label, len(self._items), record)

        return (
            f"Got it. I've added this {self._label}:\n"
            f"  {entity.describe()}\n"
            f"{self._count_line()}"
        )

    def delete(self, index: int) -> str:
        """Remove the entity at a 1-based index and rewrite the file."""
        self._ensure_open()
        self._check_index(index)
        removed = self._items.pop(index - 1)
        self._persist_all()

        if self._audit_logger:
            self._audit_logger.log_entity_removed(self._label, index, removed.to_record())

        return (
            f"Noted. I've removed this {self._label}:\n"
            f"  {removed.describe()}\n"
            f"{self._count_line()}"
        )

    def mark_done(self, index: int) -> str:
        """Mark the entity at a 1-based index as done and rewrite the file."""
        self._ensure_open()
        self._check_index(index)
        entity = self._items[index - 1]
        if not isinstance(entity, CompletableRecord):
            raise BadOperationError(f"A {self._label} cannot be marked as done")
        entity.mark_done()
        self._persist_all()

        if self._audit_logger:
            self._audit_logger.log_entity_completed(self._label, index)

        return (
            f"Nice! I've marked this {self._label} as done:\n"
            f"  {entity.describe()}"
        )

    def close(self) -> None:
        """Release the channel. Later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        self._channel.close()
