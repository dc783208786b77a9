"""
ZDB - embedded database API on top of a 0-db server.
"""

import logging

from zdb.adapter.batch import ZDBBatch
from zdb.adapter.iterator import ZDBIterator
from zdb.adapter.keys import check_key
from zdb.adapter.pager import Direction
from zdb.client import Client
from zdb.config import ClientConfig
from zdb.interfaces.database import Database
from zdb.models.exceptions import InvalidArgumentError, ZDBError

logger = logging.getLogger(__name__)


class ZDB(Database):
    """
    Embedded database backed by a remote 0-db namespace.

    Provides:
    - get/has/set/delete: Direct command pass-through
    - iterator/reverse_iterator: Range iteration over SCAN/RSCAN pages
    - new_batch: Best-effort, non-atomic grouped writes
    - stats: Parsed INFO output

    The store has no separate durable flush visible to clients, so the
    *_sync variants behave like their plain counterparts.
    """

    def __init__(self, client: Client) -> None:
        """
        Initialize the database.

        Args:
            client: Command client owned by this database. Iterators and
                batches created here share it.
        """
        self._client = client

    @classmethod
    def connect(cls, config: ClientConfig | None = None) -> "ZDB":
        """
        Connect to a 0-db server.

        Args:
            config: Connection settings (default: read from the environment).

        Returns:
            Connected database.
        """
        if config is None:
            config = ClientConfig.from_env()
        return cls(Client.connect(config))

    @property
    def client(self) -> Client:
        return self._client

    def get(self, key: bytes) -> bytes | None:
        check_key(key)
        return self._client.get(key)

    def has(self, key: bytes) -> bool:
        check_key(key)
        return self._client.exists(key)

    def set(self, key: bytes, value: bytes) -> None:
        check_key(key)
        if value is None:
            raise InvalidArgumentError("value cannot be None")
        self._client.set(key, value)

    def set_sync(self, key: bytes, value: bytes) -> None:
        self.set(key, value)

    def delete(self, key: bytes) -> None:
        check_key(key)
        self._client.delete(key)

    def delete_sync(self, key: bytes) -> None:
        self.delete(key)

    def iterator(self, start: bytes | None, end: bytes | None) -> ZDBIterator:
        return ZDBIterator(self._client, start, end, Direction.FORWARD)

    def reverse_iterator(self, start: bytes | None, end: bytes | None) -> ZDBIterator:
        return ZDBIterator(self._client, start, end, Direction.REVERSE)

    def new_batch(self) -> ZDBBatch:
        return ZDBBatch(self._client)

    def close(self) -> None:
        self._client.close()

    def stats(self) -> dict[str, str] | None:
        """
        Return the server's INFO properties.

        Returns:
            The parsed mapping, or None if INFO failed. Failures are logged,
            not raised.
        """
        try:
            return self._client.info()
        except ZDBError as e:
            logger.warning(f"Failed to get db info: {e}")
            return None

