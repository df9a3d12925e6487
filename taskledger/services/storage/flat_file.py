"""
Flat File Channel

DESIGN DECISION: Each collection lives in its own UTF-8 text file,
one record per line, because:
1. Users can read and fix their data with any editor
2. No database setup required
3. Appending a record is a single write

TRADEOFFS:
- Deleting or changing a record rewrites the whole file
  (we're fine for a personal list of a few hundred lines)
- No transactions (we flush after every write and rewrite in place)

The channel keeps one append handle open for the whole session and
releases it exactly once, in close().
"""

from pathlib import Path
from typing import IO, Iterable, Optional

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from taskledger.services.storage.interface import (
    ChannelOpenError,
    RecordChannel,
    StorageError,
    StoreClosedError,
)


logger = structlog.get_logger("taskledger.storage")

# Editors, sync clients and virus scanners can hold the file briefly
retry_transient = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


class FlatFileChannel(RecordChannel):
    """
    Line-per-record text file.

    The parent directory and the file are created if absent.
    """

    def __init__(self, path: Path, encoding: str = "utf-8"):
        self._path = Path(path)
        self._encoding = encoding
        self._handle: Optional[IO[str]] = None
        self._closed = False

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.touch(exist_ok=True)
            self._handle = self._open_for_append()
        except OSError as e:
            raise ChannelOpenError(f"Cannot open {self._path}: {e}")

    @retry_transient
    def _open_for_append(self) -> IO[str]:
        return open(self._path, "a", encoding=self._encoding, newline="\n")

    @retry_transient
    def _write_all(self, content: str) -> None:
        with open(self._path, "w", encoding=self._encoding, newline="\n") as f:
            f.write(content)

    def _ensure_open(self) -> IO[str]:
        if self._closed:
            raise StoreClosedError(f"Channel for {self._path} is closed")
        if self._handle is None:
            raise StorageError(f"No append handle for {self._path}; reopening it failed")
        return self._handle

    def _reopen(self) -> None:
        try:
            self._handle = self._open_for_append()
        except OSError as e:
            raise StorageError(f"Failed to reopen {self._path}: {e}") from e

    @property
    def location(self) -> str:
        return str(self._path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    def read_lines(self) -> list[str]:
        """Read every non-blank line of the file."""
        self._ensure_open()
        try:
            with open(self._path, "r", encoding=self._encoding) as f:
                return [line.rstrip("\r\n") for line in f if line.strip()]
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

    def append_line(self, line: str) -> None:
        """Append one line and flush it to disk."""
        handle = self._ensure_open()
        try:
            handle.write(line + "\n")
            handle.flush()
        except OSError as e:
            raise StorageError(f"Failed to append to {self._path}: {e}")

    def rewrite(self, lines: Iterable[str]) -> None:
        """Replace the file contents, then reopen the append handle."""
        handle = self._ensure_open()
        content = "".join(line + "\n" for line in lines)
        handle.close()
        self._handle = None
        try:
            self._write_all(content)
        except OSError as e:
            raise StorageError(f"Failed to rewrite {self._path}: {e}") from e
        finally:
            self._reopen()

    def close(self) -> None:
        """Flush and release the append handle."""
        if self._closed:
            logger.warning("channel_already_closed", path=str(self._path))
            return
        self._closed = True
        if self._handle is not None:
            self._handle.flush()
            self._handle.close()
            self._handle = None
