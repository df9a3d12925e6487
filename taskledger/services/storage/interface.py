"""
Abstract Storage Interface

DESIGN DECISION: A store never touches the filesystem directly.
It talks to a RecordChannel, which only knows how to:
1. Read every persisted line
2. Append one line
3. Rewrite the whole file
4. Close

This allows us to:
1. Use an in-memory channel for testing
2. Swap flat files for something else later
3. Keep the ordering/indexing logic decoupled from file I/O

The interface is intentionally tiny - records are opaque lines here.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class Record(Protocol):
    """
    What a store needs from the entities it holds.

    Tasks and expenses both satisfy this.
    """

    @property
    def occurs_on(self) -> Optional[date]: ...

    @property
    def search_text(self) -> str: ...

    def describe(self) -> str: ...

    def to_record(self) -> str: ...


@runtime_checkable
class CompletableRecord(Record, Protocol):
    """A record that can be marked as done."""

    def mark_done(self) -> None: ...


class RecordChannel(ABC):
    """
    Abstract persistence channel for one collection.

    Any channel implementation (flat file, in-memory, etc.)
    must implement these methods.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable name of where the records live."""
        pass

    @abstractmethod
    def read_lines(self) -> list[str]:
        """
        Read every persisted record.

        Returns:
            Record lines in file order, without line terminators.
            Blank lines are dropped.
        """
        pass

    @abstractmethod
    def append_line(self, line: str) -> None:
        """
        Append one record.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def rewrite(self, lines: Iterable[str]) -> None:
        """
        Replace every persisted record with the given lines.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Flush and release the channel. Safe to call more than once."""
        pass

    @property
    @abstractmethod
    def closed(self) -> bool:
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ChannelOpenError(StorageError):
    """The backing location could not be created or opened."""
    pass


class StoreClosedError(StorageError):
    """Operation attempted on a store after close()."""
    pass
