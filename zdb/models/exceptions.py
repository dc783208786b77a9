"""
Custom exceptions for the 0-db adapter.

Every error carries a ``recoverable`` flag. Recoverable errors describe
conditions a caller can handle (I/O failures, malformed replies, closed
resources). Non-recoverable errors describe a broken calling contract and
should be treated as programmer errors.
"""


class ZDBError(Exception):
    """Base exception for all adapter errors."""

    recoverable = True


class StoreIOError(ZDBError):
    """Raised when a round trip to the store fails."""


class CommandError(StoreIOError):
    """
    Raised when the store answers a command with an error reply.

    The reply text is kept verbatim in ``reply`` so callers can match the
    store's sentinel messages.
    """

    def __init__(self, command: str, reply: str):
        """
        Initialize command error.

        Args:
            command: Name of the command that failed.
            reply: Error text returned by the store.
        """
        self.command = command
        self.reply = reply
        super().__init__(f"{command} failed: {reply}")


class ProtocolFormatError(ZDBError):
    """Raised when a reply does not have the expected shape or types."""


class CursorExhaustedError(ZDBError):
    """Raised when a scan reports that no more data follows the cursor."""

    def __init__(self) -> None:
        super().__init__("No more data")


class KeyNotFoundError(ZDBError):
    """Raised when a key cannot be resolved to a scan cursor."""

    def __init__(self, key: bytes):
        self.key = key
        super().__init__(f"Key not found: {key!r}")


class InvalidArgumentError(ZDBError, ValueError):
    """Raised when a required key or value is missing or empty."""


class EndOfDataError(ZDBError):
    """Recorded by an iterator once its domain is exhausted."""

    def __init__(self) -> None:
        super().__init__("end of data")


class KeyDeletedError(ZDBError):
    """Recorded by an iterator when its current key no longer exists."""

    def __init__(self, key: bytes):
        self.key = key
        super().__init__(f"current key {key!r} no longer exists")


class IteratorClosedError(ZDBError):
    """Recorded by an iterator when it is closed."""

    def __init__(self) -> None:
        super().__init__("iterator closed")


class PreconditionViolatedError(ZDBError):
    """
    Raised when a positional accessor is used on an invalid iterator.

    This is a contract violation, not a runtime condition: the caller must
    check ``valid()`` before calling ``key()``, ``value()`` or ``next()``.
    The iterator's recorded error, if any, is chained as ``__cause__``.
    """

    recoverable = False


class BatchClosedError(ZDBError):
    """Raised when a closed batch is used."""

    def __init__(self) -> None:
        super().__init__("batch is closed")


class BatchWriteError(ZDBError):
    """
    Raised when replaying a batch fails part way.

    Operations applied before the failure stay applied and are not replayed
    by the next ``write()``.
    """

    def __init__(self) -> None:
        super().__init__("batch write failed; try again")
