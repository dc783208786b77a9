"""
Command client for the 0-db wire protocol.
"""

from zdb.client.client import Client, Connection

__all__ = ["Client", "Connection"]
