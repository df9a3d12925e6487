"""
In-Memory Channel

Keeps records in a list instead of a file. Used by tests, and by hosts
that want a throwaway session.
"""

from typing import Iterable, Optional

from taskledger.services.storage.interface import RecordChannel, StoreClosedError


class InMemoryChannel(RecordChannel):
    """RecordChannel backed by a plain list of lines."""

    def __init__(self, lines: Optional[Iterable[str]] = None, name: str = "memory"):
        self.lines: list[str] = [line for line in (lines or []) if line.strip()]
        self._name = name
        self._closed = False
        self.rewrite_count = 0

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedError(f"Channel {self._name} is closed")

    @property
    def location(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    def read_lines(self) -> list[str]:
        self._ensure_open()
        return list(self.lines)

    def append_line(self, line: str) -> None:
        self._ensure_open()
        self.lines.append(line)

    def rewrite(self, lines: Iterable[str]) -> None:
        self._ensure_open()
        self.lines = list(lines)
        self.rewrite_count += 1

    def close(self) -> None:
        self._closed = True
