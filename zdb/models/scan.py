"""
KeyInfo and ScanResponse for representing scan pages returned by the store.
"""

from dataclasses import dataclass, field
from typing import Any

from zdb.models.exceptions import ProtocolFormatError


def _type_name(value: Any) -> str:
    return type(value).__name__


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class KeyInfo:
    """
    Describes one key of a scan page.

    Attributes:
        key: The key itself.
        size: Size of the stored value in bytes.
        timestamp: Creation time of the entry (unix seconds).
    """

    key: bytes
    size: int
    timestamp: int

    @classmethod
    def from_reply(cls, entry: Any) -> "KeyInfo":
        """
        Parse a ``[key, size, timestamp]`` entry of a scan reply.

        Raises:
            ProtocolFormatError: If the entry is not a three element list of
                bytes, int and int.
        """
        if not isinstance(entry, (list, tuple)):
            raise ProtocolFormatError(
                f"invalid response, expected key information to be a list, "
                f"but a {_type_name(entry)} was returned"
            )

        if len(entry) != 3:
            raise ProtocolFormatError(
                f"invalid response, expected key information to be a list with 3 elements, "
                f"but {len(entry)} elements were returned"
            )

        key, size, ts = entry
        if not isinstance(key, bytes):
            raise ProtocolFormatError(
                f"invalid response, expected key to be bytes, but a {_type_name(key)} was returned"
            )

        if not _is_int(size) or size < 0:
            raise ProtocolFormatError(
                f"invalid response, expected key size to be an unsigned integer, "
                f"but {size!r} was returned"
            )

        if not _is_int(ts):
            raise ProtocolFormatError(
                f"invalid response, expected key creation timestamp to be an integer, "
                f"but a {_type_name(ts)} was returned"
            )

        return cls(key=key, size=size, timestamp=ts)


@dataclass(frozen=True)
class ScanResponse:
    """
    One page of a SCAN or RSCAN.

    Attributes:
        next: Opaque cursor to continue the scan from. Never inspected.
        keys: Key descriptors in scan order.
    """

    next: bytes
    keys: list[KeyInfo] = field(default_factory=list)

    @classmethod
    def from_reply(cls, reply: Any) -> "ScanResponse":
        """
        Parse a ``[next_cursor, [[key, size, timestamp], ...]]`` reply.

        Raises:
            ProtocolFormatError: If the reply does not have exactly that shape.
        """
        if not isinstance(reply, (list, tuple)):
            raise ProtocolFormatError(
                f"invalid response, scan operations should return a list, "
                f"but a {_type_name(reply)} was returned"
            )

        if len(reply) != 2:
            raise ProtocolFormatError(
                f"invalid response, scan operations should return two elements, "
                f"but {len(reply)} were returned"
            )

        next_cursor, entries = reply
        if not isinstance(next_cursor, bytes):
            raise ProtocolFormatError(
                f"invalid response, expected next cursor to be bytes, "
                f"but a {_type_name(next_cursor)} was returned"
            )

        if not isinstance(entries, (list, tuple)):
            raise ProtocolFormatError(
                f"invalid response, expected keys to be a list, "
                f"but a {_type_name(entries)} was returned"
            )

        return cls(next=next_cursor, keys=[KeyInfo.from_reply(e) for e in entries])

    def __len__(self) -> int:
        return len(self.keys)
