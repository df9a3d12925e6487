"""Services package."""

from taskledger.services.storage import (
    ChannelOpenError,
    CompletableRecord,
    FlatFileChannel,
    InMemoryChannel,
    Record,
    RecordChannel,
    RecordStore,
    StorageError,
    StoreClosedError,
)

__all__ = [
    "ChannelOpenError",
    "CompletableRecord",
    "FlatFileChannel",
    "InMemoryChannel",
    "Record",
    "RecordChannel",
    "RecordStore",
    "StorageError",
    "StoreClosedError",
]
