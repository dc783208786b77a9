"""
Embedded database adapter over the 0-db command client.
"""

from zdb.adapter.batch import ZDBBatch
from zdb.adapter.database import ZDB
from zdb.adapter.iterator import ZDBIterator
from zdb.adapter.pager import CursorPager, Direction, Page

__all__ = ["ZDB", "ZDBBatch", "ZDBIterator", "CursorPager", "Direction", "Page"]
