"""
Shared pytest fixtures for the 0-db adapter tests.

FakeZDBConnection stands in for ``redis.Connection``: it answers the 0-db
commands from an in-memory, byte-ordered keyspace, pages scans, hands out
opaque cursors and raises the same ``redis.exceptions`` a live server
connection would.
"""

import bisect
from typing import Any

import pytest
from redis.exceptions import ConnectionError, ResponseError

from zdb.adapter import ZDB
from zdb.client import Client

FAKE_TIMESTAMP = 1700000000


def _b(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    return str(value).encode("utf-8")


class FakeZDBConnection:
    """In-memory 0-db speaking the connection interface used by Client."""

    CURSOR_PREFIX = b"\x00cur\x00"

    def __init__(self, page_size: int = 2) -> None:
        self.data: dict[bytes, bytes] = {}
        self.page_size = page_size
        self.commands: list[tuple[Any, ...]] = []
        self.disconnected = False
        self.stopped = False
        self.namespaces: list[bytes] = [b"default"]
        self._replies: dict[str, list[Any]] = {}
        self._failures: dict[str, list[list[Any]]] = {}
        self._pending: Any = None

    # Test controls

    def fail(self, command: str, error: Exception | None = None, times: int = 1, skip: int = 0) -> None:
        """Make ``command`` fail ``times`` times after ``skip`` successful calls."""
        if error is None:
            error = ConnectionError("Connection reset by peer")
        self._failures.setdefault(command, []).append([skip, times, error])

    def reply_once(self, command: str, reply: Any) -> None:
        """Answer the next ``command`` with a raw ``reply``."""
        self._replies.setdefault(command, []).append(reply)

    def count(self, command: str) -> int:
        return sum(1 for c in self.commands if c[0] == command)

    # Connection interface

    def send_command(self, *args: Any, **kwargs: Any) -> None:
        command = str(args[0]).upper()
        self.commands.append((command, *args[1:]))
        try:
            self._pending = self._dispatch(command, list(args[1:]))
        except Exception as e:
            self._pending = e

    def read_response(self, *args: Any, **kwargs: Any) -> Any:
        pending, self._pending = self._pending, None
        if isinstance(pending, Exception):
            raise pending
        return pending

    def disconnect(self, *args: Any) -> None:
        self.disconnected = True

    # Command emulation

    def _injected_failure(self, command: str) -> Exception | None:
        for rule in self._failures.get(command, []):
            if rule[0] > 0:
                rule[0] -= 1
                continue
            if rule[1] > 0:
                rule[1] -= 1
                return rule[2]
        return None

    def _cursor(self, key: bytes) -> bytes:
        return self.CURSOR_PREFIX + key

    def _cursor_key(self, cursor: bytes) -> bytes:
        if not cursor.startswith(self.CURSOR_PREFIX):
            raise ResponseError("Invalid cursor")
        return cursor[len(self.CURSOR_PREFIX):]

    def _page(self, keys: list[bytes]) -> list[Any]:
        if not keys:
            raise ResponseError("No more data")
        page = keys[: self.page_size]
        entries = [[k, len(self.data[k]), FAKE_TIMESTAMP] for k in page]
        return [self._cursor(page[-1]), entries]

    def _dispatch(self, command: str, args: list[Any]) -> Any:
        failure = self._injected_failure(command)
        if failure is not None:
            raise failure

        if self._replies.get(command):
            return self._replies[command].pop(0)

        keys = sorted(self.data)

        if command == "PING":
            return b"PONG"
        if command == "GET":
            return self.data.get(_b(args[0]))
        if command == "MGET":
            return [self.data.get(_b(k)) for k in args]
        if command == "SET":
            key = _b(args[0])
            self.data[key] = _b(args[1])
            return key
        if command == "DEL":
            key = _b(args[0])
            if key not in self.data:
                raise ResponseError("Key not found")
            del self.data[key]
            return b"OK"
        if command == "EXISTS":
            return 1 if _b(args[0]) in self.data else 0
        if command == "CHECK":
            return 1 if _b(args[0]) in self.data else 0
        if command == "LENGTH":
            return len(self.data[_b(args[0])])
        if command == "KEYTIME":
            return FAKE_TIMESTAMP
        if command == "KEYCUR":
            key = _b(args[0])
            if key not in self.data:
                raise ResponseError("Key not found")
            return self._cursor(key)
        if command == "SCAN":
            if not args:
                return self._page(keys)
            after = self._cursor_key(_b(args[0]))
            return self._page(keys[bisect.bisect_right(keys, after):])
        if command == "RSCAN":
            if not args:
                return self._page(keys[::-1])
            before = self._cursor_key(_b(args[0]))
            return self._page(keys[: bisect.bisect_left(keys, before)][::-1])
        if command == "INFO":
            return (
                b"# server\r\n"
                b"server_name: 0-db (zdb)\r\n"
                b"server_revision: fake\r\n"
                b"\r\n"
                b"# stats\r\n"
                b"entries: " + str(len(self.data)).encode() + b"\r\n"
            )
        if command == "DBSIZE":
            return sum(len(v) for v in self.data.values())
        if command == "TIME":
            return FAKE_TIMESTAMP
        if command == "STOP":
            self.stopped = True
            return b"OK"
        if command == "FLUSH":
            self.data.clear()
            return b"OK"
        if command == "NSNEW":
            self.namespaces.append(_b(args[0]))
            return b"OK"
        if command == "NSDEL":
            self.namespaces.remove(_b(args[0]))
            return b"OK"
        if command == "NSLIST":
            return list(self.namespaces)
        if command == "NSINFO":
            return b"# namespace\nname: " + _b(args[0]) + b"\nentries: 0\n"
        if command in ("NSSET", "NSJUMP", "SELECT"):
            return b"OK"
        if command == "AUTH":
            if [_b(a) for a in args] == [b"SECURE", b"CHALLENGE"]:
                return b"abcdef0123456789"
            return b"OK"

        raise ResponseError(f"Unknown command '{command}'")


@pytest.fixture
def fake_connection():
    """Provide an empty fake 0-db connection with two keys per scan page."""
    return FakeZDBConnection(page_size=2)


@pytest.fixture
def client(fake_connection):
    """Provide a Client over the fake connection."""
    return Client(fake_connection)


@pytest.fixture
def db(client):
    """Provide a ZDB instance over the fake connection."""
    with ZDB(client) as database:
        yield database


@pytest.fixture
def sample_entries():
    """Provide sample key-value entries for testing."""
    return [
        (b"a", b"1"),
        (b"b", b"2"),
        (b"c", b"3"),
        (b"d", b"4"),
        (b"e", b"5"),
    ]


@pytest.fixture
def populated_db(db, fake_connection, sample_entries):
    """Provide a ZDB whose keyspace holds sample_entries."""
    for key, value in sample_entries:
        fake_connection.data[key] = value
    return db
