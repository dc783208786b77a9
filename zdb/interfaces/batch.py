"""
Batch contract for grouped writes.
"""

from abc import ABC, abstractmethod


class Batch(ABC):
    """
    A group of writes submitted together.

    ``write()`` and ``write_sync()`` apply the buffered operations but keep
    the batch usable; only ``close()`` ends its life.
    """

    @abstractmethod
    def set(self, key: bytes, value: bytes) -> None:
        """
        Buffer a write of ``value`` at ``key``.

        Args:
            key: The key to write.
            value: The value to store.
        """
        pass

    @abstractmethod
    def delete(self, key: bytes) -> None:
        """
        Buffer a delete of ``key``.

        Args:
            key: The key to remove.
        """
        pass

    @abstractmethod
    def write(self) -> None:
        """Apply the buffered operations."""
        pass

    @abstractmethod
    def write_sync(self) -> None:
        """Apply the buffered operations and flush them to storage."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Discard the batch. Safe to call more than once."""
        pass

    def __enter__(self) -> "Batch":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
