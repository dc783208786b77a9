"""
Data models for the 0-db adapter.
"""

from zdb.models.exceptions import (
    BatchClosedError,
    BatchWriteError,
    CommandError,
    CursorExhaustedError,
    EndOfDataError,
    InvalidArgumentError,
    IteratorClosedError,
    KeyDeletedError,
    KeyNotFoundError,
    PreconditionViolatedError,
    ProtocolFormatError,
    StoreIOError,
    ZDBError,
)
from zdb.models.info import parse_info
from zdb.models.scan import KeyInfo, ScanResponse

__all__ = [
    "KeyInfo",
    "ScanResponse",
    "parse_info",
    "ZDBError",
    "StoreIOError",
    "CommandError",
    "ProtocolFormatError",
    "CursorExhaustedError",
    "KeyNotFoundError",
    "InvalidArgumentError",
    "EndOfDataError",
    "KeyDeletedError",
    "IteratorClosedError",
    "PreconditionViolatedError",
    "BatchClosedError",
    "BatchWriteError",
]
