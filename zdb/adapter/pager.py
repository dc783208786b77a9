"""
CursorPager - turns SCAN/RSCAN replies into bounded pages of candidate keys.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from zdb.client import Client
from zdb.models.exceptions import CursorExhaustedError, KeyNotFoundError
from zdb.models.scan import ScanResponse


class Direction(Enum):
    """Order in which a domain is walked."""

    FORWARD = "forward"  # ascending, SCAN
    REVERSE = "reverse"  # descending, RSCAN


@dataclass
class Page:
    """
    Keys of one scan page after truncation to the iterator's domain.

    Attributes:
        keys: Candidate keys in iteration order.
        next_cursor: Cursor to request the following page with.
        last: True when no page may follow, either because the domain bound
            was reached or because the store ran out of keys.
    """

    keys: list[bytes] = field(default_factory=list)
    next_cursor: bytes | None = None
    last: bool = True


class CursorPager:
    """
    Fetches pages of keys in one direction and clips them to a bound.

    Forward pagers stop before ``stop_key`` (the exclusive end of the domain).
    Reverse pagers stop after ``stop_key`` (the inclusive start of the
    domain). A None ``stop_key`` means the scan runs to the end of the
    keyspace.

    Bounds are matched by byte equality against the keys the store returns;
    a bound that is not present in the keyspace is never hit and the scan
    continues until the store is exhausted.
    """

    def __init__(self, client: Client, direction: Direction, stop_key: bytes | None) -> None:
        """
        Initialize pager.

        Args:
            client: Command client used for KEYCUR, SCAN and RSCAN.
            direction: Scan direction.
            stop_key: Domain bound that ends the scan, or None.
        """
        self._client = client
        self._direction = direction
        self._stop_key = stop_key

    @property
    def direction(self) -> Direction:
        return self._direction

    def resolve(self, key: bytes) -> bytes | None:
        """
        Resolve ``key`` to the cursor positioned on it.

        Returns:
            The cursor, or None if the key does not exist.

        Raises:
            StoreIOError: If the lookup fails for any other reason.
        """
        try:
            return self._client.key_cursor(key)
        except KeyNotFoundError:
            return None

    def fetch(self, cursor: bytes | None, lead: Iterable[bytes] = ()) -> Page:
        """
        Fetch the page that follows ``cursor``.

        Args:
            cursor: Cursor to continue from. None starts at the beginning of
                the keyspace (forward) or at its end (reverse).
            lead: Keys to place ahead of the scanned ones, subject to the
                same truncation.

        Returns:
            The truncated page.

        Raises:
            ProtocolFormatError: If the reply is malformed.
            StoreIOError: If the scan fails.
        """
        response = self._scan(cursor)

        candidates = list(lead)
        if response is not None:
            candidates.extend(info.key for info in response.keys)

        keys, reached = self._truncate(candidates)
        if response is None:
            return Page(keys=keys, next_cursor=None, last=True)

        return Page(
            keys=keys,
            next_cursor=response.next,
            last=reached or not response.keys,
        )

    def _scan(self, cursor: bytes | None) -> ScanResponse | None:
        try:
            if self._direction is Direction.FORWARD:
                return self._client.scan(cursor)
            return self._client.rscan(cursor)
        except CursorExhaustedError:
            return None

    def _truncate(self, candidates: list[bytes]) -> tuple[list[bytes], bool]:
        """Clip ``candidates`` at the stop key; report whether it was found."""
        if self._stop_key is None:
            return candidates, False

        for i, key in enumerate(candidates):
            if key == self._stop_key:
                # Reverse scans keep the inclusive start bound
                if self._direction is Direction.REVERSE:
                    return candidates[: i + 1], True
                return candidates[:i], True

        return candidates, False
