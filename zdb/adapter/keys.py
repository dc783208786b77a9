"""
Argument checks shared by point writes and batches.
"""

from zdb.models.exceptions import InvalidArgumentError


def check_key(key: bytes) -> None:
    if key is None:
        raise InvalidArgumentError("key cannot be None")
    if len(key) == 0:
        raise InvalidArgumentError("key cannot be empty")
