"""
ZDBIterator - range iterator over a 0-db keyspace.
"""

import logging
from collections import deque

from zdb.adapter.pager import CursorPager, Direction, Page
from zdb.client import Client
from zdb.interfaces.iterator import Iterator
from zdb.models.exceptions import (
    EndOfDataError,
    InvalidArgumentError,
    IteratorClosedError,
    KeyDeletedError,
    PreconditionViolatedError,
    ZDBError,
)

logger = logging.getLogger(__name__)


class ZDBIterator(Iterator):
    """
    Iterator over a ``[start, end)`` domain backed by SCAN/RSCAN pages.

    Only keys are buffered, one page at a time; values are read fresh on
    every ``value()`` call. Every positional call first re-checks that the
    server is reachable and that the current key still exists, since the
    protocol has no change notifications.

    State machine:
    - valid: the buffer holds at least one key; its head is the current key
    - invalid: terminal. ``error()`` tells why: EndOfDataError when the
      domain is exhausted, IteratorClosedError after close(), a StoreIOError
      or ProtocolFormatError after a failure, KeyDeletedError if the current
      key vanished, None if a bound key the scan is anchored on or stops
      at did not exist
    """

    def __init__(
        self,
        client: Client,
        start: bytes | None,
        end: bytes | None,
        direction: Direction = Direction.FORWARD,
    ) -> None:
        """
        Initialize iterator and load its first page.

        Args:
            client: Command client to read from.
            start: First key (inclusive), or None for the start of the keyspace.
            end: End key (exclusive), or None for the end of the keyspace.
            direction: FORWARD walks from start to end, REVERSE from end to start.

        Raises:
            InvalidArgumentError: If start or end is an empty key.
            StoreIOError: If the first page cannot be fetched.
            ProtocolFormatError: If the first page is malformed.
        """
        if start is not None and len(start) == 0:
            raise InvalidArgumentError("start key cannot be empty")
        if end is not None and len(end) == 0:
            raise InvalidArgumentError("end key cannot be empty")

        self._client = client
        self._start = start
        self._end = end
        self._direction = direction

        # Forward scans end at `end`, reverse scans at `start`
        stop_key = end if direction is Direction.FORWARD else start
        self._pager = CursorPager(client, direction, stop_key)

        self._keys: deque[bytes] = deque()
        self._next_cursor: bytes | None = None
        self._last_page = True
        self._valid = False
        self._err: Exception | None = None

        self._open()

    def _open(self) -> None:
        logger.debug(
            f"Opening {self._direction.value} iterator, start: {self._start!r}, end: {self._end!r}"
        )

        if self._start is not None and self._end is not None and self._start >= self._end:
            self._invalidate(EndOfDataError())
            return

        anchor = self._start if self._direction is Direction.FORWARD else self._end
        cursor = None
        lead: list[bytes] = []

        if anchor is not None:
            cursor = self._pager.resolve(anchor)
            if cursor is None:
                # Absent anchor: empty domain, not an error
                logger.debug(f"Key {anchor!r} not found, iterator is empty")
                return

            # Scans from a key cursor start after the key itself
            if self._direction is Direction.FORWARD:
                lead.append(anchor)

        # Reverse scans only stop on an exact match of start
        if self._direction is Direction.REVERSE and self._start is not None:
            if self._pager.resolve(self._start) is None:
                logger.debug(f"Key {self._start!r} not found, iterator is empty")
                return

        self._load(self._pager.fetch(cursor, lead))

    def _load(self, page: Page) -> None:
        self._keys = deque(page.keys)
        self._next_cursor = page.next_cursor
        self._last_page = page.last

        if self._keys:
            self._valid = True
        else:
            self._invalidate(EndOfDataError())

    def _refill(self) -> None:
        """Load the next page once the buffer is drained."""
        if self._last_page:
            self._invalidate(EndOfDataError())
            return

        try:
            page = self._pager.fetch(self._next_cursor)
        except ZDBError as e:
            self._invalidate(e)
            return

        logger.debug(f"Fetched {len(page.keys)} keys, last page: {page.last}")
        self._load(page)

    def _invalidate(self, err: Exception) -> None:
        self._valid = False
        self._err = err
        self._keys.clear()

    def _require_valid(self) -> None:
        if not self.valid():
            raise PreconditionViolatedError("iterator is not valid") from self._err

    def domain(self) -> tuple[bytes | None, bytes | None]:
        return self._start, self._end

    @property
    def direction(self) -> Direction:
        return self._direction

    def valid(self) -> bool:
        """
        Return whether the iterator is positioned on an existing key.

        Pings the server and checks the current key on every call. A failed
        round trip or a vanished key invalidates the iterator for good.
        """
        if not self._valid:
            return False

        current = self._keys[0]
        try:
            self._client.ping()
            exists = self._client.exists(current)
        except ZDBError as e:
            self._invalidate(e)
            return False

        if not exists:
            self._invalidate(KeyDeletedError(current))
            return False

        return True

    def next(self) -> None:
        """
        Move to the next key.

        Reaching the end of the domain invalidates the iterator with
        EndOfDataError; a failed page fetch invalidates it with the failure.

        Raises:
            PreconditionViolatedError: If the iterator is not valid.
        """
        self._require_valid()

        self._keys.popleft()
        if not self._keys:
            self._refill()

    def key(self) -> bytes:
        self._require_valid()
        return self._keys[0]

    def value(self) -> bytes:
        """
        Read the value of the current key from the store.

        Raises:
            PreconditionViolatedError: If the iterator is not valid, or
                becomes invalid because the read fails.
        """
        self._require_valid()

        current = self._keys[0]
        try:
            value = self._client.get(current)
        except ZDBError as e:
            self._invalidate(e)
            raise PreconditionViolatedError("iterator is not valid") from e

        if value is None:
            self._invalidate(KeyDeletedError(current))
            raise PreconditionViolatedError("iterator is not valid") from self._err

        return value

    def error(self) -> Exception | None:
        return self._err

    def close(self) -> None:
        self._invalidate(IteratorClosedError())
