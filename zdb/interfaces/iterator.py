"""
Iterator contract for ordered iteration over a key domain.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator as PyIterator


class Iterator(ABC):
    """
    Cursor over the keys of a ``[start, end)`` domain.

    An iterator starts positioned on the first key of its domain (in the
    iteration direction). Once ``valid()`` returns False it stays invalid
    forever. ``key()``, ``value()`` and ``next()`` must only be called while
    the iterator is valid.

    Implementations must support:
    - Explicit stepping via valid()/key()/value()/next()
    - Python iteration via __iter__, yielding (key, value) pairs
    - Use as a context manager, closing on exit
    """

    @abstractmethod
    def domain(self) -> tuple[bytes | None, bytes | None]:
        """Return the start (inclusive) and end (exclusive) bounds."""
        pass

    @abstractmethod
    def valid(self) -> bool:
        """Return whether the iterator is positioned on a usable key."""
        pass

    @abstractmethod
    def next(self) -> None:
        """Move to the next key in iteration order."""
        pass

    @abstractmethod
    def key(self) -> bytes:
        """Return the key at the current position."""
        pass

    @abstractmethod
    def value(self) -> bytes:
        """Return the value at the current position."""
        pass

    @abstractmethod
    def error(self) -> Exception | None:
        """Return the condition that invalidated the iterator, if any."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Invalidate the iterator. Safe to call more than once."""
        pass

    def __iter__(self) -> PyIterator[tuple[bytes, bytes]]:
        while self.valid():
            yield self.key(), self.value()
            self.next()

    def __enter__(self) -> "Iterator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
