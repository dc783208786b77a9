"""
Abstract base classes for the embedded database contract.
"""

from zdb.interfaces.batch import Batch
from zdb.interfaces.database import Database
from zdb.interfaces.iterator import Iterator

__all__ = ["Batch", "Database", "Iterator"]
