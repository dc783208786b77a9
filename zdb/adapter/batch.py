"""
ZDBBatch - best-effort batch of writes against a store without transactions.
"""

import logging
import threading
from collections import deque

from zdb.adapter.keys import check_key
from zdb.client import Client
from zdb.interfaces.batch import Batch
from zdb.models.exceptions import (
    BatchClosedError,
    BatchWriteError,
    InvalidArgumentError,
    ZDBError,
)

logger = logging.getLogger(__name__)


class ZDBBatch(Batch):
    """
    Buffers writes and replays them one command at a time.

    The store has no multi-key transaction, so a batch is NOT atomic and
    NOT isolated: concurrent readers may observe a partially applied batch.

    Replay order is fixed: every set in the order it was added, then every
    delete in the order it was added. Sets and deletes are not interleaved,
    so a set and a delete of the same key in one batch always end with the
    key deleted.

    Each operation leaves the log as soon as the store accepts it. When a
    write fails part way, calling write() again resumes from the failed
    operation without re-applying the earlier ones.
    """

    def __init__(self, client: Client) -> None:
        """
        Initialize batch.

        Args:
            client: Command client the operations are replayed against.
        """
        self._client = client
        self._set_ops: deque[tuple[bytes, bytes]] = deque()
        self._del_keys: deque[bytes] = deque()
        self._closed = False

        # Keeps the open/closed state consistent across threads
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        """Number of operations waiting to be written."""
        return len(self._set_ops) + len(self._del_keys)

    def set(self, key: bytes, value: bytes) -> None:
        """
        Buffer a set operation.

        Raises:
            BatchClosedError: If the batch is closed.
            InvalidArgumentError: If key is None or empty, or value is None.
        """
        with self._lock:
            if self._closed:
                raise BatchClosedError()
            check_key(key)
            if value is None:
                raise InvalidArgumentError("value cannot be None")

            self._set_ops.append((key, value))

    def delete(self, key: bytes) -> None:
        """
        Buffer a delete operation.

        Raises:
            BatchClosedError: If the batch is closed.
            InvalidArgumentError: If key is None or empty.
        """
        with self._lock:
            if self._closed:
                raise BatchClosedError()
            check_key(key)

            self._del_keys.append(key)

    def write(self) -> None:
        """
        Replay the buffered operations against the store.

        Raises:
            BatchClosedError: If the batch is closed.
            BatchWriteError: If an operation fails. Operations applied before
                it are kept applied and dropped from the log.
        """
        with self._lock:
            if self._closed:
                raise BatchClosedError()

            logger.debug(
                f"Writing batch: {len(self._set_ops)} sets, {len(self._del_keys)} deletes"
            )

            while self._set_ops:
                key, value = self._set_ops[0]
                try:
                    self._client.set(key, value)
                except ZDBError as e:
                    logger.debug(f"Batch set failed, {len(self)} operations pending: {e}")
                    raise BatchWriteError() from e
                self._set_ops.popleft()

            while self._del_keys:
                key = self._del_keys[0]
                try:
                    self._client.delete(key)
                except ZDBError as e:
                    logger.debug(f"Batch delete failed, {len(self)} operations pending: {e}")
                    raise BatchWriteError() from e
                self._del_keys.popleft()

    def write_sync(self) -> None:
        """Same as write(); the store exposes no separate durable flush."""
        self.write()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._set_ops.clear()
            self._del_keys.clear()
