"""
Client - synchronous command client for a 0-db server.
"""

import hashlib
import logging
from typing import Any, Protocol

import redis

from zdb.config import ClientConfig
from zdb.models.exceptions import (
    CommandError,
    CursorExhaustedError,
    KeyNotFoundError,
    ProtocolFormatError,
    StoreIOError,
)
from zdb.models.info import parse_info
from zdb.models.scan import ScanResponse

logger = logging.getLogger(__name__)

# Error replies the store uses as sentinels rather than failures
NO_MORE_DATA = "No more data"
KEY_NOT_FOUND = "Key not found"


class Connection(Protocol):
    """The subset of ``redis.Connection`` the client relies on."""

    def send_command(self, *args: Any, **kwargs: Any) -> None: ...

    def read_response(self, *args: Any, **kwargs: Any) -> Any: ...

    def disconnect(self, *args: Any) -> None: ...


class Client:
    """
    Request/response client for the 0-db command set.

    Wraps a single Redis-protocol connection. Replies are returned without
    any response callbacks applied, so cursors and keys stay raw bytes.
    One request is in flight at a time; the client is not thread-safe.
    """

    def __init__(self, connection: Connection) -> None:
        """
        Initialize client.

        Args:
            connection: An open or lazily connecting Redis-protocol connection.
        """
        self._connection = connection
        self._closed = False

    @classmethod
    def connect(cls, config: ClientConfig) -> "Client":
        """
        Open a connection described by ``config``.

        Selects ``config.namespace`` when set, otherwise authenticates with
        ``config.password`` when set.

        Raises:
            StoreIOError: If the server cannot be reached or rejects the
                namespace selection or authentication.
        """
        connection = redis.Connection(
            host=config.host,
            port=config.port,
            socket_timeout=config.socket_timeout,
            socket_connect_timeout=config.connect_timeout,
            lib_name=None,
            lib_version=None,
        )
        try:
            connection.connect()
        except redis.exceptions.RedisError as e:
            raise StoreIOError(f"failed to connect to {config.address}: {e}") from e

        client = cls(connection)
        try:
            if config.namespace:
                client.select(config.namespace, config.password)
            elif config.password:
                client.auth(config.password)
        except StoreIOError:
            client.close()
            raise

        logger.info(f"Connected to 0-db at {config.address}")
        return client

    def execute(self, command: str, *args: Any) -> Any:
        """
        Send one command and wait for its reply.

        Args:
            command: Command name.
            *args: Command arguments.

        Returns:
            The raw reply: bytes, int, list or None.

        Raises:
            CommandError: If the store replies with an error.
            StoreIOError: If the round trip fails.
        """
        try:
            self._connection.send_command(command, *args)
            return self._connection.read_response()
        except redis.exceptions.ResponseError as e:
            raise CommandError(command, str(e)) from e
        except redis.exceptions.RedisError as e:
            raise StoreIOError(f"{command} failed: {e}") from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._connection.disconnect()
        logger.info("Closed 0-db connection")

    # Core commands

    def ping(self) -> None:
        self.execute("PING")

    def get(self, key: bytes) -> bytes | None:
        """Return the value stored at ``key`` or None if it does not exist."""
        return _expect_optional_bytes("GET", self.execute("GET", key))

    def mget(self, keys: list[bytes]) -> list[bytes | None]:
        reply = _expect_list("MGET", self.execute("MGET", *keys))
        return [_expect_optional_bytes("MGET", v) for v in reply]

    def set(self, key: bytes, value: bytes) -> None:
        self.execute("SET", key, value)

    def delete(self, key: bytes) -> None:
        """Delete ``key``. Deleting a missing key is not an error."""
        try:
            self.execute("DEL", key)
        except CommandError as e:
            if e.reply != KEY_NOT_FOUND:
                raise

    def exists(self, key: bytes) -> bool:
        return _expect_int("EXISTS", self.execute("EXISTS", key)) == 1

    def check(self, key: bytes) -> bool:
        """Run the store's integrity check on the entry at ``key``."""
        return _expect_int("CHECK", self.execute("CHECK", key)) == 1

    def length(self, key: bytes) -> int:
        return _expect_int("LENGTH", self.execute("LENGTH", key))

    def key_time(self, key: bytes) -> int:
        return _expect_int("KEYTIME", self.execute("KEYTIME", key))

    def key_cursor(self, key: bytes) -> bytes:
        """
        Resolve ``key`` to a scan cursor positioned on it.

        Scanning from the returned cursor yields the keys after ``key`` (or
        before it, for RSCAN).

        Raises:
            KeyNotFoundError: If ``key`` does not exist.
        """
        try:
            reply = self.execute("KEYCUR", key)
        except CommandError as e:
            if e.reply == KEY_NOT_FOUND:
                raise KeyNotFoundError(key) from e
            raise

        if reply is None:
            raise KeyNotFoundError(key)
        return _expect_bytes("KEYCUR", reply)

    def scan(self, cursor: bytes | None = None) -> ScanResponse:
        """
        Fetch the next page of keys in ascending order.

        Args:
            cursor: Cursor to continue from, or None to start at the first key.

        Raises:
            CursorExhaustedError: If no key follows the cursor.
        """
        return self._scan("SCAN", cursor)

    def rscan(self, cursor: bytes | None = None) -> ScanResponse:
        """
        Fetch the next page of keys in descending order.

        Args:
            cursor: Cursor to continue from, or None to start at the last key.

        Raises:
            CursorExhaustedError: If no key precedes the cursor.
        """
        return self._scan("RSCAN", cursor)

    def _scan(self, command: str, cursor: bytes | None) -> ScanResponse:
        args = () if cursor is None else (cursor,)
        try:
            reply = self.execute(command, *args)
        except CommandError as e:
            if e.reply == NO_MORE_DATA:
                raise CursorExhaustedError() from e
            raise

        return ScanResponse.from_reply(reply)

    def info(self) -> dict[str, str]:
        return parse_info(self.execute("INFO"))

    def dbsize(self) -> int:
        return _expect_int("DBSIZE", self.execute("DBSIZE"))

    def time(self) -> int:
        """Server clock as a unix timestamp."""
        return _expect_int("TIME", self.execute("TIME"))

    def flush(self) -> None:
        """Remove every entry of the selected namespace."""
        self.execute("FLUSH")

    def stop(self) -> None:
        """Ask the server to shut down. Only servers running in debug mode accept it."""
        self.execute("STOP")

    # Namespaces

    def new_namespace(self, namespace: str) -> None:
        self.execute("NSNEW", namespace)

    def delete_namespace(self, namespace: str) -> None:
        self.execute("NSDEL", namespace)

    def namespace_info(self, namespace: str) -> dict[str, str]:
        return parse_info(self.execute("NSINFO", namespace))

    def list_namespaces(self) -> list[str]:
        reply = _expect_list("NSLIST", self.execute("NSLIST"))
        return [_expect_bytes("NSLIST", ns).decode("utf-8") for ns in reply]

    def set_namespace(self, namespace: str, prop: str, value: str) -> None:
        """Change a namespace property (``maxsize``, ``password``, ``public``, ``worm``)."""
        self.execute("NSSET", namespace, prop, value)

    def jump_namespace(self) -> None:
        self.execute("NSJUMP")

    def select(self, namespace: str, password: str | None = None) -> None:
        if password is None:
            self.execute("SELECT", namespace)
        else:
            self.execute("SELECT", namespace, "SECURE", password)

    # Authentication

    def auth(self, password: str) -> None:
        self.execute("AUTH", password)

    def auth_secure(self, password: str) -> None:
        """
        Authenticate without sending the password in clear.

        The server hands out a one-time nonce; the client answers with the
        SHA1 hex digest of ``nonce:password``.
        """
        nonce = _expect_bytes("AUTH", self.execute("AUTH", "SECURE", "CHALLENGE"))
        digest = hashlib.sha1(nonce + b":" + password.encode("utf-8")).hexdigest()
        self.execute("AUTH", "SECURE", digest)

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _expect_int(command: str, reply: Any) -> int:
    if not isinstance(reply, int) or isinstance(reply, bool):
        raise ProtocolFormatError(
            f"invalid response, expected {command} to return an integer, "
            f"but a {type(reply).__name__} was returned"
        )
    return reply


def _expect_bytes(command: str, reply: Any) -> bytes:
    if not isinstance(reply, bytes):
        raise ProtocolFormatError(
            f"invalid response, expected {command} to return bytes, "
            f"but a {type(reply).__name__} was returned"
        )
    return reply


def _expect_optional_bytes(command: str, reply: Any) -> bytes | None:
    if reply is None:
        return None
    return _expect_bytes(command, reply)


def _expect_list(command: str, reply: Any) -> list:
    if not isinstance(reply, list):
        raise ProtocolFormatError(
            f"invalid response, expected {command} to return a list, "
            f"but a {type(reply).__name__} was returned"
        )
    return reply
