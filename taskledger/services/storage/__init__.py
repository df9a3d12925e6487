"""
Storage Services Package

Provides the channel interface, its flat-file and in-memory
implementations, and the generic record store built on top.
"""

from taskledger.services.storage.interface import (
    ChannelOpenError,
    CompletableRecord,
    Record,
    RecordChannel,
    StorageError,
    StoreClosedError,
)
from taskledger.services.storage.flat_file import FlatFileChannel
from taskledger.services.storage.memory import InMemoryChannel
from taskledger.services.storage.store import RecordStore

__all__ = [
    # Interfaces
    "CompletableRecord",
    "Record",
    "RecordChannel",
    # Exceptions
    "ChannelOpenError",
    "StorageError",
    "StoreClosedError",
    # Implementations
    "FlatFileChannel",
    "InMemoryChannel",
    "RecordStore",
]
