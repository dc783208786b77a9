"""
Database contract for an embedded, byte-ordered key-value store.
"""

from abc import ABC, abstractmethod

from zdb.interfaces.batch import Batch
from zdb.interfaces.iterator import Iterator


class Database(ABC):
    """
    Abstract embedded database.

    Keys are non-empty byte strings compared in byte order. Values are byte
    strings; an empty value is valid, a missing one (None) is not.

    Implementations:
    - ZDB: Backed by a remote 0-db server
    """

    @abstractmethod
    def get(self, key: bytes) -> bytes | None:
        """
        Fetch the value of ``key``.

        Args:
            key: The key to look up.

        Returns:
            The value if found, None otherwise.
        """
        pass

    @abstractmethod
    def has(self, key: bytes) -> bool:
        """
        Check if a key exists.

        Args:
            key: The key to check.

        Returns:
            True if the key exists, False otherwise.
        """
        pass

    @abstractmethod
    def set(self, key: bytes, value: bytes) -> None:
        """Set ``key`` to ``value``, replacing any existing value."""
        pass

    @abstractmethod
    def set_sync(self, key: bytes, value: bytes) -> None:
        """Like set(), and flush to storage before returning."""
        pass

    @abstractmethod
    def delete(self, key: bytes) -> None:
        """Delete ``key``; does nothing if it does not exist."""
        pass

    @abstractmethod
    def delete_sync(self, key: bytes) -> None:
        """Like delete(), and flush to storage before returning."""
        pass

    @abstractmethod
    def iterator(self, start: bytes | None, end: bytes | None) -> Iterator:
        """
        Return an iterator over ``[start, end)`` in ascending order.

        Args:
            start: First key (inclusive). None starts at the first key.
            end: End key (exclusive). None runs through the last key.

        Returns:
            An Iterator the caller must close.

        No writes may happen within the domain while the iterator exists.
        """
        pass

    @abstractmethod
    def reverse_iterator(self, start: bytes | None, end: bytes | None) -> Iterator:
        """
        Return an iterator over ``[start, end)`` in descending order.

        Args:
            start: Last key yielded (inclusive). None runs through the first key.
            end: End key (exclusive). None starts at the last key.

        Returns:
            An Iterator the caller must close.
        """
        pass

    @abstractmethod
    def new_batch(self) -> Batch:
        """Create a batch of writes. The caller must close it."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the database handle."""
        pass

    @abstractmethod
    def stats(self) -> dict[str, str] | None:
        """Return store properties, or None if they are unavailable."""
        pass

    def print(self) -> None:
        """Dump debugging information. Does nothing by default."""
        return None

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
