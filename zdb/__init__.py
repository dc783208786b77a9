"""
Embedded key-value database API backed by a remote 0-db server.

This package adapts 0-db's small command set to an embedded database
contract:
- get(key) / has(key) - Point reads and existence checks
- set(key, value) / delete(key) - Point writes
- iterator(start, end) / reverse_iterator(start, end) - Range iteration
  over [start, end) built on cursor-paginated SCAN/RSCAN
- new_batch() - Grouped writes, replayed one by one (not atomic)
- stats() - Server INFO properties
"""

from zdb.adapter import ZDB, ZDBBatch, ZDBIterator
from zdb.client import Client
from zdb.config import ClientConfig

__all__ = ["ZDB", "ZDBBatch", "ZDBIterator", "Client", "ClientConfig"]
